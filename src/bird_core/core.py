# File: src/bird_core/core.py
"""
BIRD 控制客户端 (Core Facade)

职责：
1. 资源组装：Config + Network + Framer + Sequencer + State。
2. 生命周期：connect (校验欢迎语) -> 命令 -> close。
3. 结构化查询：show protocols [all] 与 configure [check]。
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, Union

from . import protocols
from .config import BirdConfig
from .exceptions import (
    ConnectError,
    NetworkError,
    NotConnectedError,
    StateError,
)
from .network import NetworkClient
from .protocols.framing import ResponseFramer
from .protocols.models import Protocol, ProtocolDetail
from .sequencer import CommandSequencer
from .state import BirdState, ConnectionStatus

logger = logging.getLogger(__name__)

# 定义回调函数类型别名：支持同步或异步函数
StatusCallback = Callable[[ConnectionStatus, str], Any | Awaitable[Any]]

ShowProtocolsResult = Union[
    str,
    Protocol,
    ProtocolDetail,
    tuple[Protocol, ...],
    tuple[ProtocolDetail, ...],
    None,
]


class BirdClient:
    """BIRD 控制 Socket 客户端 (Async)。

    一个实例对应一条控制连接，可被多个任务并发使用，
    命令按提交顺序依次执行。
    """

    def __init__(
        self,
        config: BirdConfig | None = None,
        status_callback: StatusCallback | None = None,
    ) -> None:
        """初始化客户端。

        Args:
            config: 配置对象，缺省使用 BirdConfig() 默认值 (/run/bird/bird.ctl)。
            status_callback: 初始状态回调。也可以之后用 add_listener 注册。
        """
        self.config = config or BirdConfig()

        self._listeners: list[StatusCallback] = []
        if status_callback:
            self.add_listener(status_callback)

        self._state = BirdState()
        self.net_client: NetworkClient | None = None
        self.sequencer: CommandSequencer | None = None

    @property
    def state(self) -> BirdState:
        """获取当前连接状态的只读副本。"""
        return replace(self._state)

    @property
    def connected(self) -> bool:
        return self._state.is_connected

    def add_listener(self, callback: StatusCallback) -> None:
        """注册状态变更监听器。"""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: StatusCallback) -> None:
        """移除状态变更监听器。"""
        if callback in self._listeners:
            self._listeners.remove(callback)

    # ------------------------------------------------------------------
    # 生命周期
    # ------------------------------------------------------------------

    async def connect(self) -> bool:
        """打开控制 Socket 并校验欢迎语。

        Returns:
            bool: 成功返回 True。

        Raises:
            ConnectError: Socket 打开失败、欢迎语超时/缺失或格式不符。
            StateError: 已经处于连接 (或正在连接) 状态。
        """
        if self._state.status in (
            ConnectionStatus.CONNECTING,
            ConnectionStatus.CONNECTED,
        ):
            raise StateError(f"当前状态不允许连接: {self._state.status.name}")

        # 传输层出错后重连：先释放旧 Socket
        if self.net_client is not None:
            await self.net_client.close()
            self.net_client = None
            self.sequencer = None

        self._update_status(
            ConnectionStatus.CONNECTING, f"正在连接 {self.config.socket_path}"
        )

        net_client = NetworkClient(self.config)
        framer = ResponseFramer(self.config.encoding)
        sequencer = CommandSequencer(net_client, framer, self.config.command_timeout)

        try:
            await net_client.connect()
            try:
                greeting = await sequencer.read_greeting(self.config.connect_timeout)
            except asyncio.TimeoutError:
                raise ConnectError(
                    f"等待欢迎语超时 ({self.config.connect_timeout}s)"
                ) from None
            except NetworkError as e:
                raise ConnectError(f"欢迎语之前连接已断开: {e}") from e

            version = protocols.parse_greeting(greeting)

        except ConnectError as e:
            await net_client.close()
            self._state.last_error = str(e)
            self._update_status(ConnectionStatus.ERROR, f"连接失败: {e}")
            raise

        except BaseException:
            # 被取消等情况：释放 Socket 并回到可重连状态
            await net_client.close()
            self._update_status(ConnectionStatus.ERROR, "连接被中断")
            raise

        self.net_client = net_client
        self.sequencer = sequencer
        self._state.version = version
        self._state.last_error = ""
        self._update_status(ConnectionStatus.CONNECTED, f"已连接 BIRD {version}")
        return True

    async def close(self) -> None:
        """关闭连接并释放 Socket (幂等)。"""
        if self.net_client is None:
            return

        net_client = self.net_client
        self.net_client = None
        self.sequencer = None
        await net_client.close()
        self._update_status(ConnectionStatus.CLOSED, "连接已关闭")

    async def destroy(self) -> None:
        """close() 的别名。"""
        await self.close()

    async def __aenter__(self) -> "BirdClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # 命令
    # ------------------------------------------------------------------

    async def send_command(self, command: str) -> str:
        """发送一条命令并返回清洗后的应答文本。

        并发调用按提交顺序排队，每个调用者只会收到自己命令的应答。

        Raises:
            NotConnectedError: 尚未连接或已关闭。
            NetworkError: 传输层错误 (连接随即进入 ERROR 状态)。
            CommandTimeoutError: 超过 command_timeout。
        """
        if not self._state.is_connected or self.sequencer is None:
            raise NotConnectedError("控制 Socket 未连接")

        sequencer = self.sequencer
        try:
            text = await sequencer.submit(command)
        except NetworkError as e:
            self._state.last_error = str(e)
            if sequencer.failure is not None and self._state.is_connected:
                self._update_status(ConnectionStatus.ERROR, f"传输层错误: {e}")
            raise

        self._state.last_reply_code = sequencer.framer.reply_code
        return text

    async def show_protocols(
        self,
        name: str | None = None,
        all: bool = False,
        raw: bool = False,
    ) -> ShowProtocolsResult:
        """查询协议状态。

        每次调用都是一次新的往返，不做缓存。名称过滤在客户端完成。

        Args:
            name: 只返回该名称的协议实例。
            all: 使用 `show protocols all`，返回包含 Channel/BGP 详情的记录。
            raw: 返回守护进程的原始文本 (有 name 时只返回该协议的分段)。

        Returns:
            - raw=True: str (未找到 name 时为 None)。
            - name 给定: 单条记录，未找到时为 None。
            - 否则: 记录元组。

        Raises:
            ParseError: 应答结构不符 (多记录查询在首个错误处整体失败)。
        """
        text = await self.send_command(protocols.build_show_protocols_command(all))

        if raw:
            if name is None:
                return text
            if all:
                return protocols.find_protocol_segment(text, name)
            return protocols.find_summary_line(text, name)

        if all:
            if name is not None:
                return protocols.find_protocol_detail(text, name)
            return protocols.parse_protocols_all(text)

        if name is not None:
            line = protocols.find_summary_line(text, name)
            return protocols.parse_summary_line(line) if line is not None else None
        return protocols.parse_protocols_summary(text)

    async def configure_check(self) -> bool:
        """检查守护进程配置文件的语法。

        Returns:
            bool: 应答包含 "Configuration OK" 时返回 True。
                失败不是异常情况：返回 False，守护进程原文记录在 state.last_error。
        """
        text = await self.send_command(protocols.build_configure_check_command())
        ok, detail = protocols.parse_configure_check_response(text)
        if not ok:
            self._state.last_error = detail
            logger.warning(f"配置检查未通过: {detail}")
        return ok

    async def configure(self) -> bool:
        """先检查配置，通过后再让守护进程重新加载配置。

        Returns:
            bool: 应答包含 "Reconfigured" 时返回 True；检查未通过时不会发送 configure。
        """
        if not await self.configure_check():
            logger.warning("配置检查未通过，跳过 configure")
            return False

        text = await self.send_command(protocols.build_configure_command())
        ok, detail = protocols.parse_configure_response(text)
        if not ok:
            self._state.last_error = detail
            logger.warning(f"配置应用未确认: {detail}")
        return ok

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _update_status(self, status: ConnectionStatus, msg: str) -> None:
        """更新内部状态并异步触发所有回调。"""
        self._state.status = status
        logger.info(f"[{status.name}] {msg}")

        for callback in self._listeners:
            try:
                if inspect.iscoroutinefunction(callback):
                    asyncio.create_task(callback(status, msg))  # type: ignore
                else:
                    loop = asyncio.get_running_loop()
                    loop.call_soon(callback, status, msg)
            except RuntimeError:
                # 应对 loop 尚未运行或已关闭的边缘情况
                logger.debug(f"无运行中的事件循环，跳过回调: {callback!r}")

