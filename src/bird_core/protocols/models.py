# src/bird_core/protocols/models.py
"""
BIRD 协议状态 - 数据模型

`show protocols [all]` 输出解析后的不可变值对象。
所有可选字段在守护进程未打印时为 None，与 "打印了但为空" 严格区分。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class ProtocolType(str, Enum):
    """协议类型 (Proto 列)，封闭集合"""

    KERNEL = "Kernel"
    STATIC = "Static"
    BGP = "BGP"
    DIRECT = "Direct"
    DEVICE = "Device"


@dataclass(frozen=True)
class Protocol:
    """摘要输出中的一行。

    Attributes:
        name: 协议实例名 (如 ``bgp1``)。
        proto: 协议类型。
        table: 路由表名 (Device 等协议为 ``---``)。
        state: 协议状态 (up/down/start/stop)。
        since: 进入当前状态的时间。
        info: 附加信息 (如 ``Established``、``Passive``)，可能为空串。
    """

    name: str
    proto: ProtocolType
    table: str
    state: str
    since: str
    info: str


@dataclass(frozen=True)
class RouteCounts:
    imported: int = 0
    exported: int = 0
    preferred: int = 0


@dataclass(frozen=True)
class RouteChangeStats:
    """路由变更统计的一行。None 表示守护进程打印了 ``---`` (不适用) 或未打印。"""

    received: int | None = None
    rejected: int | None = None
    filtered: int | None = None
    ignored: int | None = None
    accepted: int | None = None


@dataclass(frozen=True)
class Channel:
    """协议实例下的一个 Channel (如 ``ipv4``)。"""

    name: str
    state: str | None = None
    table: str | None = None
    preference: int | None = None
    input_filter: str | None = None
    output_filter: str | None = None
    import_limit: str | None = None
    action: str | None = None
    routes: RouteCounts = field(default_factory=RouteCounts)
    import_updates: RouteChangeStats = field(default_factory=RouteChangeStats)
    import_withdraws: RouteChangeStats = field(default_factory=RouteChangeStats)
    export_updates: RouteChangeStats = field(default_factory=RouteChangeStats)
    export_withdraws: RouteChangeStats = field(default_factory=RouteChangeStats)
    bgp_next_hop: tuple[str, ...] | None = None


@dataclass(frozen=True)
class BgpCapabilities:
    af_announced: tuple[str, ...] = ()
    route_refresh: bool = False
    ipv6_next_hop: tuple[str, ...] = ()
    extended_message: bool = False
    graceful_restart: bool = False
    four_octet_as_numbers: bool = False
    enhanced_refresh: bool = False
    long_lived_graceful_restart: bool = False


@dataclass(frozen=True)
class BgpTimer:
    """``current/max`` 形式的计时器 (秒)"""

    current: float
    max: float


@dataclass(frozen=True)
class BgpSession:
    state: str
    neighbor_address: str
    neighbor_as: int
    local_as: int
    neighbor_id: str | None = None
    local_capabilities: BgpCapabilities | None = None
    neighbor_capabilities: BgpCapabilities | None = None
    session: tuple[str, ...] | None = None
    source_address: str | None = None
    hold_timer: BgpTimer | None = None
    keepalive_timer: BgpTimer | None = None
    send_hold_timer: BgpTimer | None = None


@dataclass(frozen=True)
class PassiveBgpSession:
    """被动 (监听网段) 的 BGP 实例，没有已连接的对端。"""

    state: str
    neighbor_range: str
    neighbor_as: int
    local_as: int


@dataclass(frozen=True)
class KernelProtocol(Protocol):
    channels: tuple[Channel, ...] = ()


@dataclass(frozen=True)
class StaticProtocol(Protocol):
    channels: tuple[Channel, ...] = ()


@dataclass(frozen=True)
class BgpProtocol(Protocol):
    channels: tuple[Channel, ...] = ()
    bgp: BgpSession | PassiveBgpSession | None = None


@dataclass(frozen=True)
class DirectProtocol(Protocol):
    pass


@dataclass(frozen=True)
class DeviceProtocol(Protocol):
    pass


ProtocolDetail = Union[
    KernelProtocol, StaticProtocol, BgpProtocol, DirectProtocol, DeviceProtocol
]
