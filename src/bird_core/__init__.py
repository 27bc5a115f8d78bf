# src/bird_core/__init__.py
"""
bird-core v0.1.0
BIRD 路由守护进程控制 Socket 的异步客户端库。
"""

# 暴露核心配置
from .config import (
    BirdConfig,
    create_config_from_dict,
    load_config_from_env,
    load_config_from_toml,
)

# 暴露客户端与状态
from .core import BirdClient

# 暴露异常体系 (方便上层 try-except)
from .exceptions import (
    BirdError,
    CommandTimeoutError,
    ConfigError,
    ConnectError,
    NetworkError,
    NotConnectedError,
    ParseError,
    StateError,
)
from .protocols.models import (
    BgpCapabilities,
    BgpProtocol,
    BgpSession,
    BgpTimer,
    Channel,
    DeviceProtocol,
    DirectProtocol,
    KernelProtocol,
    PassiveBgpSession,
    Protocol,
    ProtocolDetail,
    ProtocolType,
    RouteChangeStats,
    RouteCounts,
    StaticProtocol,
)
from .state import BirdState, ConnectionStatus

__version__ = "0.1.0"

__all__ = [
    "BirdClient",
    "BirdConfig",
    "BirdState",
    "ConnectionStatus",
    "create_config_from_dict",
    "load_config_from_env",
    "load_config_from_toml",
    "BirdError",
    "ConfigError",
    "ConnectError",
    "NotConnectedError",
    "NetworkError",
    "CommandTimeoutError",
    "ParseError",
    "StateError",
    "ProtocolType",
    "Protocol",
    "ProtocolDetail",
    "KernelProtocol",
    "StaticProtocol",
    "BgpProtocol",
    "DirectProtocol",
    "DeviceProtocol",
    "Channel",
    "RouteCounts",
    "RouteChangeStats",
    "BgpCapabilities",
    "BgpTimer",
    "BgpSession",
    "PassiveBgpSession",
]
