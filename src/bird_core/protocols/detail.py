# src/bird_core/protocols/detail.py
"""
show protocols all - 详细输出解析

每个协议实例 = 摘要行 + 正文。按协议类型分派:
- Device / Direct: 只有摘要字段。
- Kernel / Static: 摘要 + Channel 列表。
- BGP: 摘要 + Channel 列表 + 会话 (info 为 Passive 时为被动会话)。

解析失败时整个查询失败 (抛出首个 ParseError)。
"""

import logging
from collections.abc import Sequence

from ..utils import split_blocks
from .bgp import parse_bgp_session, parse_passive_bgp_session
from .channel import parse_channel
from .constants import PASSIVE_INFO, ChannelLabel
from .models import (
    BgpProtocol,
    DeviceProtocol,
    DirectProtocol,
    KernelProtocol,
    ProtocolDetail,
    ProtocolType,
    StaticProtocol,
)
from .summary import iter_protocol_segments, parse_summary_line

logger = logging.getLogger(__name__)


def parse_protocol_detail(summary_line: str, body: Sequence[str]) -> ProtocolDetail:
    """解析单个协议实例 (摘要行 + 正文行)。

    Raises:
        ParseError: 协议类型未知、BGP 必要字段缺失或数值格式错误。
    """
    base = parse_summary_line(summary_line)
    common = dict(
        name=base.name,
        proto=base.proto,
        table=base.table,
        state=base.state,
        since=base.since,
        info=base.info,
    )

    if base.proto == ProtocolType.DEVICE:
        return DeviceProtocol(**common)
    if base.proto == ProtocolType.DIRECT:
        return DirectProtocol(**common)

    head, blocks = split_blocks(body, ChannelLabel.HEADER)
    channels = tuple(parse_channel(block, base.name) for block in blocks)

    if base.proto == ProtocolType.KERNEL:
        return KernelProtocol(**common, channels=channels)
    if base.proto == ProtocolType.STATIC:
        return StaticProtocol(**common, channels=channels)

    if base.info == PASSIVE_INFO:
        bgp = parse_passive_bgp_session(head, base.name)
    else:
        bgp = parse_bgp_session(head, base.name)
    return BgpProtocol(**common, channels=channels, bgp=bgp)


def parse_protocols_all(text: str) -> tuple[ProtocolDetail, ...]:
    """解析 `show protocols all` 的完整应答。"""
    return tuple(
        parse_protocol_detail(summary, body)
        for summary, body in iter_protocol_segments(text)
    )


def find_protocol_detail(text: str, name: str) -> ProtocolDetail | None:
    """只解析名称匹配的那个协议实例，其余分段直接跳过。"""
    for summary, body in iter_protocol_segments(text):
        if summary.split(maxsplit=1)[0] == name:
            return parse_protocol_detail(summary, body)
    logger.debug(f"未找到协议: {name}")
    return None


def find_protocol_segment(text: str, name: str) -> str | None:
    """返回指定协议分段的原文 (摘要行 + 正文)，供需要守护进程原始格式的调用方使用。"""
    for summary, body in iter_protocol_segments(text):
        if summary.split(maxsplit=1)[0] == name:
            return "\n".join([summary, *body])
    return None
