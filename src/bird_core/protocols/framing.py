# src/bird_core/protocols/framing.py
"""
BIRD 控制协议 - 响应分帧 (Response Framer)

守护进程的每个应答由若干行组成，每行以 4 位应答码开头：
    ``1002-...``  续行 (还有后续行)
    `` ...``      同一应答码下的无编号续行
    ``0000 ...``  终止行 (应答码后为空格)

本模块只做字节累积与文本清洗，不包含任何 Socket 操作。
"""

import logging
from enum import Enum, auto

from ..exceptions import ConnectError
from .constants import ReplyCode, Wire

logger = logging.getLogger(__name__)


class FramerState(Enum):
    AWAITING = auto()
    """尚未收到当前应答的任何字节。"""

    ACCUMULATING = auto()
    """已收到部分字节，终止行尚未出现。"""

    COMPLETE = auto()
    """终止行已出现，应答已交付。"""

    ERRORED = auto()
    """传输层出错，当前应答作废。"""


def clean_response(text: str) -> str:
    """清洗应答文本。

    逐行去掉应答码前缀 (``\\d{4}[-\\s]?``)、首尾空白，并将连续空格压缩为一个。
    空行保留为空串，由上层解析器忽略。
    """
    lines = []
    for line in text.splitlines():
        line = Wire.CODE_PREFIX.sub("", line, count=1)
        line = Wire.MULTI_SPACE.sub(" ", line.strip())
        lines.append(line)
    return "\n".join(lines)


def parse_greeting(text: str) -> str:
    """校验欢迎语并返回版本号。

    Args:
        text: 清洗后的首个应答 (如 ``BIRD 2.0.7 ready.``)。

    Returns:
        str: 版本号字符串 (如 ``2.0.7``)。

    Raises:
        ConnectError: 欢迎语格式不符。
    """
    match = Wire.GREETING.search(text)
    if not match:
        raise ConnectError(f"欢迎语无效: {text.strip()!r}", greeting=text)
    return match.group("version")


class ResponseFramer:
    """把任意切分的字节块重组为一个个完整应答。

    每次 feed() 之后检查缓冲区中是否出现完整的终止行；
    终止行之后的多余字节保留给下一个应答 (通过 next_response() 取出)。
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self.state = FramerState.AWAITING
        self.reply_code: int | None = None
        self.error: Exception | None = None
        self._buffer = bytearray()
        self._scan_from = 0

    def feed(self, chunk: bytes) -> str | None:
        """追加一个字节块。

        Returns:
            str | None: 应答完整时返回清洗后的文本，否则返回 None。

        Raises:
            RuntimeError: 在 ERRORED 状态下继续喂数据。
        """
        if self.state == FramerState.ERRORED:
            raise RuntimeError("Framer 已处于错误状态，需先 reset()")
        self._buffer += chunk
        return self.next_response()

    def next_response(self) -> str | None:
        """在不追加数据的情况下，检查缓冲区中是否已有完整应答。"""
        if self.state == FramerState.ERRORED:
            return None

        match = Wire.TERMINAL_LINE.search(self._buffer, self._scan_from)
        if match is None:
            # 下次只从最后一个不完整的行开始扫描
            self._scan_from = self._buffer.rfind(Wire.LINE_END) + 1
            self.state = (
                FramerState.ACCUMULATING if self._buffer else FramerState.AWAITING
            )
            return None

        # Match 的分组引用可变缓冲区，必须在截断之前取出
        end = match.end()
        code = int(match.group(1))
        raw = bytes(self._buffer[:end])
        del self._buffer[:end]
        self._scan_from = 0
        self.reply_code = code
        self.state = FramerState.COMPLETE

        if self.reply_code >= ReplyCode.ERROR_MIN:
            logger.debug(f"守护进程返回错误应答码 {self.reply_code:04d}")
        logger.debug(f"应答完成: code={self.reply_code:04d}, {end} bytes")
        return clean_response(raw.decode(self.encoding, errors="replace"))

    def peek_line(self) -> str | None:
        """返回缓冲区中第一个完整行的原文 (不消费)，尚无换行时返回 None。"""
        end = self._buffer.find(Wire.LINE_END)
        if end < 0:
            return None
        return self._buffer[:end].decode(self.encoding, errors="replace")

    def fail(self, exc: Exception) -> None:
        """标记当前应答因传输错误而作废。"""
        self.state = FramerState.ERRORED
        self.error = exc

    def reset(self) -> None:
        self.state = FramerState.AWAITING
        self.reply_code = None
        self.error = None
        self._buffer.clear()
        self._scan_from = 0
