# src/bird_core/protocols/bgp.py
"""
show protocols all - BGP 会话解析

BGP 实例正文在 Channel 块之前的部分 (已清洗)::

    BGP state: Established
    Neighbor address: 10.0.0.2
    Neighbor AS: 65002
    Local AS: 65001
    Neighbor ID: 10.0.0.2
    Local capabilities
    Multiprotocol
    AF announced: ipv4
    Route refresh
    ...
    Neighbor capabilities
    ...
    Session: external AS4
    Source address: 10.0.0.1
    Hold timer: 140.960/240
    Keepalive timer: 36.252/80
"""

from collections.abc import Sequence

from ..exceptions import ParseError
from ..utils import parse_int, require, scan_labeled_fields
from .constants import BgpLabel, CapabilityLabel
from .models import BgpCapabilities, BgpSession, BgpTimer, PassiveBgpSession


def parse_capabilities(lines: Sequence[str]) -> BgpCapabilities:
    """解析一个能力协商块。

    布尔能力以标签文本是否出现在块内判断；
    列表能力取对应标签行的值按空白切分，缺失时为空元组。
    """
    text = "\n".join(lines)
    fields = scan_labeled_fields(
        lines, (CapabilityLabel.AF_ANNOUNCED, CapabilityLabel.IPV6_NEXTHOP)
    )

    def _words(label: str) -> tuple[str, ...]:
        return tuple(fields.get(label, "").split())

    return BgpCapabilities(
        af_announced=_words(CapabilityLabel.AF_ANNOUNCED),
        route_refresh=CapabilityLabel.ROUTE_REFRESH in text,
        ipv6_next_hop=_words(CapabilityLabel.IPV6_NEXTHOP),
        extended_message=CapabilityLabel.EXTENDED_MESSAGE in text,
        graceful_restart=CapabilityLabel.GRACEFUL_RESTART in text,
        four_octet_as_numbers=CapabilityLabel.FOUR_OCTET_AS in text,
        enhanced_refresh=CapabilityLabel.ENHANCED_REFRESH in text,
        long_lived_graceful_restart=CapabilityLabel.LONG_LIVED_GR in text,
    )


def parse_bgp_timer(
    text: str, protocol: str | None = None, field: str = "timer"
) -> BgpTimer:
    """解析 ``current/max`` 形式的计时器 (浮点秒)。

    Raises:
        ParseError: 格式不是两个以 ``/`` 分隔的数字。
    """
    parts = text.split()[0].split("/") if text.strip() else []
    if len(parts) != 2:
        raise ParseError(f"计时器格式无效: {text!r}", protocol, field)
    try:
        current, maximum = (float(p) for p in parts)
    except ValueError:
        raise ParseError(f"计时器格式无效: {text!r}", protocol, field) from None
    return BgpTimer(current=current, max=maximum)


def _first_word(value: str | None) -> str | None:
    if not value:
        return value
    return value.split(maxsplit=1)[0]


def _state(lines: Sequence[str]) -> str:
    """会话状态：优先取 ``BGP state:`` 行，没有该标签时取正文首行"""
    for line in lines:
        if line.startswith(BgpLabel.STATE):
            return line[len(BgpLabel.STATE) :].strip()
    return lines[0] if lines else ""


def _slice(lines: Sequence[str], start: str, stops: Sequence[str]) -> list[str] | None:
    """截取 ``start`` 标记行之后、任一 ``stops`` 标记行之前的行"""
    for i, line in enumerate(lines):
        if line.startswith(start):
            block = []
            for tail in lines[i + 1 :]:
                if any(tail.startswith(stop) for stop in stops):
                    break
                block.append(tail)
            return block
    return None


def parse_bgp_session(lines: Sequence[str], protocol: str | None = None) -> BgpSession:
    """解析主动/已建立的 BGP 会话。

    Args:
        lines: 会话部分的文本行 (不含 Channel 块)。
        protocol: 协议实例名，用于错误上下文。

    Raises:
        ParseError: 缺少 Neighbor address / Neighbor AS / Local AS，或数值格式错误。
    """
    fields = scan_labeled_fields(lines, BgpLabel.ALL)

    neighbor_address = _first_word(require(fields, BgpLabel.NEIGHBOR_ADDRESS, protocol))
    if not neighbor_address:
        raise ParseError("Neighbor address 为空", protocol, "Neighbor address")
    neighbor_as = require(fields, BgpLabel.NEIGHBOR_AS, protocol)
    local_as = require(fields, BgpLabel.LOCAL_AS, protocol)

    local_block = _slice(
        lines,
        BgpLabel.LOCAL_CAPABILITIES,
        (BgpLabel.NEIGHBOR_CAPABILITIES, BgpLabel.SESSION),
    )
    neighbor_block = _slice(lines, BgpLabel.NEIGHBOR_CAPABILITIES, (BgpLabel.SESSION,))

    def _timer(label: str) -> BgpTimer | None:
        value = fields.get(label)
        if value is None:
            return None
        return parse_bgp_timer(value, protocol, label.rstrip(":"))

    session = fields.get(BgpLabel.SESSION)

    return BgpSession(
        state=_state(lines),
        neighbor_address=neighbor_address,
        neighbor_as=parse_int(neighbor_as, protocol, "Neighbor AS"),
        local_as=parse_int(local_as, protocol, "Local AS"),
        neighbor_id=_first_word(fields.get(BgpLabel.NEIGHBOR_ID)),
        local_capabilities=(
            parse_capabilities(local_block) if local_block is not None else None
        ),
        neighbor_capabilities=(
            parse_capabilities(neighbor_block) if neighbor_block is not None else None
        ),
        session=tuple(session.split()) if session is not None else None,
        source_address=_first_word(fields.get(BgpLabel.SOURCE_ADDRESS)),
        hold_timer=_timer(BgpLabel.HOLD_TIMER),
        keepalive_timer=_timer(BgpLabel.KEEPALIVE_TIMER),
        send_hold_timer=_timer(BgpLabel.SEND_HOLD_TIMER),
    )


def parse_passive_bgp_session(
    lines: Sequence[str], protocol: str | None = None
) -> PassiveBgpSession:
    """解析被动监听的 BGP 实例 (摘要 info 为 ``Passive``)。"""
    fields = scan_labeled_fields(lines, BgpLabel.ALL)

    return PassiveBgpSession(
        state=_state(lines),
        neighbor_range=_first_word(require(fields, BgpLabel.NEIGHBOR_RANGE, protocol)),
        neighbor_as=parse_int(
            require(fields, BgpLabel.NEIGHBOR_AS, protocol), protocol, "Neighbor AS"
        ),
        local_as=parse_int(
            require(fields, BgpLabel.LOCAL_AS, protocol), protocol, "Local AS"
        ),
    )
