# src/bird_core/protocols/constants.py
"""
BIRD 控制协议 - 常量定义

本模块定义了控制协议的应答码、命令文本、正则表达式以及输出中的字段标签。
采用命名空间 (Class Namespace) 组织。
"""

import re

# =========================================================================
# 1. 线路格式 (Wire Framing)
# =========================================================================


class Wire:
    """应答行格式: 4 位应答码 + 分隔符 (空格=最后一行, '-'=续行) + 文本"""

    # 终止行: 行首 4 位数字 + 空格，且必须是完整的一行
    TERMINAL_LINE = re.compile(rb"^(\d{4}) [^\n]*\n", re.MULTILINE)
    # 每行的应答码前缀
    CODE_PREFIX = re.compile(r"^\d{4}[-\s]?")
    MULTI_SPACE = re.compile(r" {2,}")
    GREETING = re.compile(r"BIRD (?P<version>v?\d+(?:\.\d+)*\S*) ready\.")
    LINE_END = b"\n"


class ReplyCode:
    # 8xxx: 运行时错误, 9xxx: 语法错误
    ERROR_MIN = 8000


# =========================================================================
# 2. 命令 (Commands)
# =========================================================================


class Command:
    # 注意: 非 all 模式下保留尾随空格
    SHOW_PROTOCOLS = "show protocols "
    SHOW_PROTOCOLS_ALL = "show protocols all"
    CONFIGURE_CHECK = "configure check"
    CONFIGURE = "configure"


class ConfigureReply:
    CHECK_OK = "Configuration OK"
    RECONFIGURED = "Reconfigured"


# =========================================================================
# 3. show protocols 输出
# =========================================================================

PROTOCOL_TYPES = ("Kernel", "Static", "BGP", "Direct", "Device")
PROTOCOL_STATES = ("up", "down", "start", "stop", "flush")

# 详细输出中的摘要行 (任意协议类型，以便识别未知类型)
SUMMARY_LINE = re.compile(
    r"^(?P<name>\S+) (?P<proto>\S+) (?P<table>\S+) "
    r"(?P<state>" + "|".join(PROTOCOL_STATES) + r")(?: (?P<rest>.*))?$",
    re.MULTILINE,
)
HEADER_PREFIX = "name proto"
TIME_OF_DAY = re.compile(r"^\d{2}:\d{2}:\d{2}(?:\.\d+)?$")
INTEGER = re.compile(r"\d+")
NOT_APPLICABLE = "---"
PASSIVE_INFO = "Passive"


class ChannelLabel:
    """Channel 块中的字段标签"""

    HEADER = "Channel "
    STATE = "State:"
    TABLE = "Table:"
    PREFERENCE = "Preference:"
    INPUT_FILTER = "Input filter:"
    OUTPUT_FILTER = "Output filter:"
    IMPORT_LIMIT = "Import limit:"
    ACTION = "Action:"
    ROUTES = "Routes:"
    IMPORT_UPDATES = "Import updates:"
    IMPORT_WITHDRAWS = "Import withdraws:"
    EXPORT_UPDATES = "Export updates:"
    EXPORT_WITHDRAWS = "Export withdraws:"
    BGP_NEXT_HOP = "BGP Next hop:"

    ALL = (
        STATE,
        TABLE,
        PREFERENCE,
        INPUT_FILTER,
        OUTPUT_FILTER,
        IMPORT_LIMIT,
        ACTION,
        ROUTES,
        IMPORT_UPDATES,
        IMPORT_WITHDRAWS,
        EXPORT_UPDATES,
        EXPORT_WITHDRAWS,
        BGP_NEXT_HOP,
    )


class BgpLabel:
    """BGP 会话块中的字段标签"""

    STATE = "BGP state:"
    NEIGHBOR_ADDRESS = "Neighbor address:"
    NEIGHBOR_RANGE = "Neighbor range:"
    NEIGHBOR_AS = "Neighbor AS:"
    LOCAL_AS = "Local AS:"
    NEIGHBOR_ID = "Neighbor ID:"
    LOCAL_CAPABILITIES = "Local capabilities"
    NEIGHBOR_CAPABILITIES = "Neighbor capabilities"
    SESSION = "Session:"
    SOURCE_ADDRESS = "Source address:"
    HOLD_TIMER = "Hold timer:"
    KEEPALIVE_TIMER = "Keepalive timer:"
    SEND_HOLD_TIMER = "Send hold timer:"

    ALL = (
        NEIGHBOR_ADDRESS,
        NEIGHBOR_RANGE,
        NEIGHBOR_AS,
        LOCAL_AS,
        NEIGHBOR_ID,
        SESSION,
        SOURCE_ADDRESS,
        HOLD_TIMER,
        KEEPALIVE_TIMER,
        SEND_HOLD_TIMER,
    )


class CapabilityLabel:
    """能力协商块中的标签 (按子串出现判断)"""

    AF_ANNOUNCED = "AF announced:"
    IPV6_NEXTHOP = "IPv6 nexthop:"
    ROUTE_REFRESH = "Route refresh"
    EXTENDED_MESSAGE = "Extended message"
    GRACEFUL_RESTART = "Graceful restart"
    FOUR_OCTET_AS = "4-octet AS numbers"
    ENHANCED_REFRESH = "Enhanced refresh"
    LONG_LIVED_GR = "Long-lived graceful restart"
