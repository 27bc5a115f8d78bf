# tests/conftest.py
import asyncio
import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# 确保 src 目录在 sys.path 中
src_path = Path(__file__).resolve().parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from bird_core.config import BirdConfig

GREETING = b"0001 BIRD 2.0.7 ready.\n"


class FakeBirdDaemon:
    """
    进程内的假 BIRD 守护进程，监听 Unix Socket。
    按行读取命令，依次回放预设应答 (可拆成多个字节块发送)。
    """

    def __init__(self, path: str, greeting: bytes | None = GREETING):
        self.path = path
        self.greeting = greeting
        # 命令 -> 应答字节块列表
        self.replies: dict[str, list[bytes]] = {}
        self.received: list[str] = []
        self.close_after_greeting = False
        self._server: asyncio.AbstractServer | None = None
        self._writers: list[asyncio.StreamWriter] = []

    def reply(self, command: str, *chunks: bytes) -> None:
        self.replies[command] = list(chunks)

    async def _handle(self, reader, writer):
        self._writers.append(writer)
        try:
            if self.greeting is not None:
                writer.write(self.greeting)
                await writer.drain()
            if self.close_after_greeting:
                return
            while True:
                line = await reader.readline()
                if not line:
                    break
                command = line.decode().rstrip("\n")
                self.received.append(command)
                for chunk in self.replies.get(command, [b"9001 syntax error\n"]):
                    writer.write(chunk)
                    await writer.drain()
                    # 让出事件循环，使应答真正分多次到达
                    await asyncio.sleep(0)
        except ConnectionError:
            pass
        finally:
            writer.close()

    async def __aenter__(self):
        self._server = await asyncio.start_unix_server(self._handle, path=self.path)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        for writer in self._writers:
            writer.close()
        assert self._server is not None
        self._server.close()
        await self._server.wait_closed()


@pytest.fixture
def socket_path():
    """[Fixture] 临时 Socket 路径 (Unix Socket 路径有长度限制，放在短目录下)"""
    tmpdir = tempfile.mkdtemp(prefix="bird-")
    yield os.path.join(tmpdir, "bird.ctl")
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def valid_config(socket_path):
    """[Fixture] 指向临时 Socket 的配置，带超时以免测试挂死"""
    return BirdConfig(
        socket_path=socket_path,
        connect_timeout=2.0,
        command_timeout=5.0,
    )


@pytest.fixture
def fake_daemon(socket_path):
    """[Fixture] 尚未启动的假守护进程，测试中用 `async with fake_daemon:` 启动"""
    return FakeBirdDaemon(socket_path)
