# src/bird_core/protocols/__init__.py
"""
BIRD 控制协议层 (Protocol Layer)

本包负责命令文本的构建 (Build) 与应答文本的分帧、解析 (Parse)。

- 不包含任何 socket 操作或网络 I/O。
- 不包含任何连接状态管理 (State)。
- 不依赖于 core 或 network 层。
"""

from . import constants
from .bgp import (
    parse_bgp_session,
    parse_bgp_timer,
    parse_capabilities,
    parse_passive_bgp_session,
)
from .channel import parse_channel, parse_route_change_stats, parse_routes
from .configure import (
    build_configure_check_command,
    build_configure_command,
    parse_configure_check_response,
    parse_configure_response,
)
from .detail import (
    find_protocol_detail,
    find_protocol_segment,
    parse_protocol_detail,
    parse_protocols_all,
)
from .framing import FramerState, ResponseFramer, clean_response, parse_greeting
from .summary import (
    build_show_protocols_command,
    find_summary_line,
    iter_protocol_segments,
    parse_protocols_summary,
    parse_summary_line,
)

# 公共 API
__all__ = [
    "constants",
    "ResponseFramer",
    "FramerState",
    "clean_response",
    "parse_greeting",
    "build_show_protocols_command",
    "parse_summary_line",
    "parse_protocols_summary",
    "find_summary_line",
    "iter_protocol_segments",
    "parse_protocol_detail",
    "parse_protocols_all",
    "find_protocol_detail",
    "find_protocol_segment",
    "parse_channel",
    "parse_routes",
    "parse_route_change_stats",
    "parse_capabilities",
    "parse_bgp_timer",
    "parse_bgp_session",
    "parse_passive_bgp_session",
    "build_configure_check_command",
    "parse_configure_check_response",
    "build_configure_command",
    "parse_configure_response",
]
