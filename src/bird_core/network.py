# src/bird_core/network.py
"""
BIRD 控制客户端 - 网络模块 (Network) [Asyncio Edition]

封装 Unix Domain Socket 流连接的建立、写入、接收和关闭。
该模块屏蔽了底层 Socket 的复杂性，向上层提供纯粹的 bytes 收发接口。
"""

import asyncio
import logging
from typing import Optional, Union, cast

from .config import BirdConfig
from .exceptions import ConnectError, NetworkError

logger = logging.getLogger(__name__)


class BirdStreamProtocol(asyncio.Protocol):
    """
    asyncio 流协议适配器。
    将回调风格的 data_received 转换为 Queue 模式，供上层 await 使用。
    字节块按到达顺序入队，不保证与应答边界对齐。
    """

    def __init__(self):
        self.transport: Optional[asyncio.Transport] = None
        # 队列内容可以是数据块，也可以是异常对象（用于快速失败）
        self.queue: asyncio.Queue[Union[bytes, Exception]] = asyncio.Queue()
        self.error: Optional[Exception] = None

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = cast(asyncio.Transport, transport)
        logger.debug("控制 Socket Transport 已建立")

    def data_received(self, data: bytes) -> None:
        """接收数据并放入队列"""
        logger.debug(f"收到 {len(data)} bytes")
        self.queue.put_nowait(data)

    def eof_received(self) -> bool:
        logger.debug("对端关闭了写方向 (EOF)")
        # 返回 False 让 transport 自行关闭，随后触发 connection_lost
        return False

    def connection_lost(self, exc: Optional[Exception]) -> None:
        """处理连接断开"""
        if exc:
            logger.warning(f"控制连接断开: {exc}")
            self._propagate_error(exc)
        else:
            logger.debug("控制连接已关闭")
            # 正常关闭也发送一个异常，以中断正在等待的 receive
            self._propagate_error(NetworkError("连接已关闭"))
        self.transport = None

    def _propagate_error(self, exc: Exception) -> None:
        """将底层错误立即传播给上层消费者 (只记录第一个错误)"""
        if self.error is None:
            self.error = exc
        self.queue.put_nowait(exc)


class NetworkClient:
    """
    封装 asyncio Unix Socket 操作的客户端。
    持有系统中唯一的 Socket 资源。
    """

    def __init__(self, config: BirdConfig):
        self.config = config
        self.protocol: Optional[BirdStreamProtocol] = None
        self.transport: Optional[asyncio.Transport] = None

    @property
    def is_open(self) -> bool:
        return self.transport is not None and not self.transport.is_closing()

    async def connect(self) -> None:
        """
        打开控制 Socket。

        Raises:
            ConnectError: Socket 不存在、权限不足或连接被拒绝 (原始异常保留在 __cause__)。
        """
        loop = asyncio.get_running_loop()
        path = self.config.socket_path

        try:
            transport, protocol = await loop.create_unix_connection(
                BirdStreamProtocol, path=path
            )
        except OSError as e:
            await self.close()
            raise ConnectError(f"无法连接控制 Socket {path}: {e}") from e

        self.transport = cast(asyncio.Transport, transport)
        self.protocol = cast(BirdStreamProtocol, protocol)
        logger.debug(f"控制 Socket 已连接: {path}")

    async def send(self, data: bytes) -> None:
        """
        写入原始字节。

        Raises:
            NetworkError: 连接未打开或已关闭，或写入失败。
        """
        if not self.is_open:
            raise NetworkError("Transport 已关闭")

        # 显式断言：此时 transport 绝不可能是 None
        assert self.transport is not None

        try:
            # write 是同步非阻塞的，直接调用
            self.transport.write(data)
        except Exception as e:
            raise NetworkError(f"发送失败: {e}") from e

    async def receive(self, timeout: Optional[float] = None) -> bytes:
        """
        接收下一个字节块 (Async)。

        Args:
            timeout: 超时秒数，None 表示无限等待。

        Raises:
            asyncio.TimeoutError: 等待超时 (由调用方决定如何映射)。
            NetworkError: 连接断开或读取错误。
        """
        if not self.protocol:
            raise NetworkError("Protocol 未初始化")

        # 错误已被之前的读取者取走时，后来者直接失败而不是永远等待
        if self.protocol.queue.empty() and self.protocol.error is not None:
            item: Union[bytes, Exception] = self.protocol.error
        else:
            item = await asyncio.wait_for(self.protocol.queue.get(), timeout=timeout)

        # 检查取出来的是数据还是错误
        if isinstance(item, NetworkError):
            raise item
        if isinstance(item, Exception):
            raise NetworkError(f"接收错误: {item}") from item
        return item

    async def close(self) -> None:
        """关闭 Transport (幂等)"""
        if self.transport:
            self.transport.close()
            self.transport = None
            logger.debug("控制 Socket Transport 已关闭")

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
