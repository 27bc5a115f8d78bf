# File: src/bird_core/sequencer.py
"""
BIRD 控制客户端 - 命令串行器 (Command Sequencer)

职责：
1. 串行化：同一连接上任意时刻最多只有一条命令在途。
2. 配对：每个调用者拿到的恰好是自己那条命令之后的完整应答。
3. 公平：并发调用者严格按提交顺序 (FIFO) 获得服务。

守护进程自身按顺序应答，交错写入多条命令会破坏分帧，
因此"写入 + 等待终止行"必须作为一个整体在锁内完成。
"""

import asyncio
import logging

from .exceptions import CommandTimeoutError, ConnectError, NetworkError
from .network import NetworkClient
from .protocols.framing import ResponseFramer

logger = logging.getLogger(__name__)


class CommandSequencer:
    """在单个控制连接上按 FIFO 顺序执行命令。

    asyncio.Lock 的等待者按获取顺序排队唤醒，
    锁只保护"写命令并读完应答"这一临界区。
    """

    def __init__(
        self,
        net_client: NetworkClient,
        framer: ResponseFramer,
        command_timeout: float | None = None,
    ) -> None:
        """初始化串行器。

        Args:
            net_client: 已连接的网络客户端。
            framer: 与该连接绑定的分帧器 (欢迎语之后的残留字节也在其中)。
            command_timeout: 单条命令等待应答的超时，None 表示无限等待。
        """
        self.net_client = net_client
        self.framer = framer
        self.command_timeout = command_timeout

        self._lock = asyncio.Lock()
        # 已超时/被取消、但应答尚未读走的命令数
        self._orphaned = 0
        self._failure: NetworkError | None = None

    @property
    def failure(self) -> NetworkError | None:
        """传输层失败后记录的错误，之后所有命令都会以它失败。"""
        return self._failure

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def read_response(self, timeout: float | None = None) -> str:
        """读取一个完整应答 (也用于连接时的欢迎语)。

        Raises:
            asyncio.TimeoutError: 在 timeout 内没有读到终止行。
            NetworkError: 连接断开或读取错误。
        """
        return await asyncio.wait_for(self._read_response(), timeout=timeout)

    async def _read_response(self) -> str:
        text = self.framer.next_response()
        while text is None:
            text = self.framer.feed(await self._receive())
        return text

    async def read_greeting(self, timeout: float | None = None) -> str:
        """读取连接后的欢迎语。

        首行一旦完整就必须是终止行，否则立即失败，
        不会一直等待一个永远不会出现的终止行。

        Raises:
            ConnectError: 首个完整行不是带应答码的终止行。
            asyncio.TimeoutError: 在 timeout 内没有读到完整首行。
            NetworkError: 连接断开或读取错误。
        """
        return await asyncio.wait_for(self._read_greeting(), timeout=timeout)

    async def _read_greeting(self) -> str:
        text = self.framer.next_response()
        while text is None:
            line = self.framer.peek_line()
            if line is not None:
                raise ConnectError(f"欢迎语无效: {line.strip()!r}", greeting=line)
            text = self.framer.feed(await self._receive())
        return text

    async def _receive(self) -> bytes:
        try:
            return await self.net_client.receive()
        except NetworkError as e:
            self.framer.fail(e)
            raise

    async def submit(self, command: str) -> str:
        """提交一条命令并等待它自己的应答。

        Args:
            command: 命令文本，缺少结尾换行时自动补上。

        Returns:
            str: 清洗后的应答文本。

        Raises:
            ValueError: 命令中间包含换行 (会被守护进程当作多条命令)。
            CommandTimeoutError: 超过 command_timeout 仍未收到完整应答。
            NetworkError: 传输层错误 (在途命令与排队命令都会收到)。
        """
        data = self._encode(command)

        async with self._lock:
            if self._failure is not None:
                raise NetworkError(f"连接已失效: {self._failure}") from self._failure

            sent = False
            try:
                await self._drain_orphans()
                await self.net_client.send(data)
                sent = True
                logger.debug(f"发送命令: {command.strip()!r}")
                return await self.read_response(self.command_timeout)

            except asyncio.TimeoutError:
                if sent:
                    self._orphaned += 1
                logger.warning(
                    f"命令超时 ({self.command_timeout}s): {command.strip()!r}"
                )
                raise CommandTimeoutError(
                    f"等待应答超时 ({self.command_timeout}s): {command.strip()!r}"
                ) from None

            except asyncio.CancelledError:
                # 命令已写出，其应答仍会到达，需要在下一条命令之前丢弃
                if sent:
                    self._orphaned += 1
                raise

            except NetworkError as e:
                logger.error(f"命令执行失败，连接失效: {e}")
                self._failure = e
                raise

    async def _drain_orphans(self) -> None:
        """读走并丢弃超时命令的迟到应答，保证后续命令的配对关系"""
        while self._orphaned:
            text = await self.read_response(self.command_timeout)
            self._orphaned -= 1
            logger.debug(f"丢弃迟到的应答 ({len(text)} chars)")

    @staticmethod
    def _encode(command: str) -> bytes:
        body = command[:-1] if command.endswith("\n") else command
        if "\n" in body:
            raise ValueError(f"命令不能包含换行: {command!r}")
        return (body + "\n").encode("utf-8")
