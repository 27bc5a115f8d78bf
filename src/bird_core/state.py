# File: src/bird_core/state.py
"""
BIRD 控制客户端 - 状态模块

负责定义和存储控制连接的易变会话状态。
本模块不包含业务逻辑，仅作为数据容器供 Core 读写。
"""

from dataclasses import dataclass
from enum import Enum, auto


class ConnectionStatus(Enum):
    """控制连接的生命周期状态枚举。

    状态流转示意:
    IDLE -> CONNECTING -> CONNECTED -> CLOSED
               |              |
               v              v
             ERROR          ERROR
    """

    IDLE = auto()
    """初始状态，客户端已实例化但尚未连接。"""

    CONNECTING = auto()
    """正在打开 Socket 并等待欢迎语。"""

    CONNECTED = auto()
    """欢迎语校验通过，可以发送命令。"""

    CLOSED = auto()
    """已由调用者主动关闭。"""

    ERROR = auto()
    """连接失败或传输层出错，需要重新 connect()。"""


@dataclass
class BirdState:
    """存储控制连接的易变状态数据。

    Attributes:
        status: 当前连接状态。
        version: 欢迎语中解析出的 BIRD 版本号。
        last_error: 最近一次错误的描述 (含 configure 校验失败时的守护进程原文)。
        last_reply_code: 最近一次响应终止行的 4 位应答码。
    """

    status: ConnectionStatus = ConnectionStatus.IDLE
    version: str = ""
    last_error: str = ""
    last_reply_code: int | None = None

    @property
    def is_connected(self) -> bool:
        """判断当前是否可以发送命令。"""
        return self.status == ConnectionStatus.CONNECTED
