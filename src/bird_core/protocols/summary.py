# src/bird_core/protocols/summary.py
"""
show protocols - 摘要表解析

每个协议实例一行: ``name proto table state since info``。
同时提供 `show protocols all` 输出的分段器 (摘要行 + 其后的正文)。
"""

import logging
from collections.abc import Iterator

from ..exceptions import ParseError
from .constants import HEADER_PREFIX, SUMMARY_LINE, TIME_OF_DAY, Command
from .models import Protocol, ProtocolType

logger = logging.getLogger(__name__)


def build_show_protocols_command(show_all: bool = False) -> str:
    """构建 show protocols 命令 (名称过滤在客户端完成，不发给守护进程)。"""
    return Command.SHOW_PROTOCOLS_ALL if show_all else Command.SHOW_PROTOCOLS


def _content_lines(text: str) -> Iterator[str]:
    """跳过空行与表头"""
    for line in text.splitlines():
        line = line.strip()
        if not line or line.lower().startswith(HEADER_PREFIX):
            continue
        yield line


def parse_protocol_type(proto: str, name: str) -> ProtocolType:
    try:
        return ProtocolType(proto)
    except ValueError:
        raise ParseError(f"无法识别的协议类型 '{proto}'", name, "proto") from None


def parse_summary_line(line: str) -> Protocol:
    """解析一行摘要。

    ``since`` 之后若紧跟 ``HH:MM:SS`` 形式的时间，则并入 ``since``；
    剩余部分以单个空格拼接为 ``info``。

    Raises:
        ParseError: 列数不足或协议类型未知。
    """
    tokens = line.split()
    if len(tokens) < 5:
        raise ParseError(f"摘要行列数不足: {line!r}")

    name, proto, table, state, since = tokens[:5]
    rest = tokens[5:]
    if rest and TIME_OF_DAY.match(rest[0]):
        since = f"{since} {rest.pop(0)}"

    return Protocol(
        name=name,
        proto=parse_protocol_type(proto, name),
        table=table,
        state=state,
        since=since,
        info=" ".join(rest),
    )


def parse_protocols_summary(text: str) -> tuple[Protocol, ...]:
    """解析 `show protocols` 的完整应答。"""
    return tuple(parse_summary_line(line) for line in _content_lines(text))


def find_summary_line(text: str, name: str) -> str | None:
    """返回指定协议的摘要行原文，不存在时返回 None。"""
    for line in _content_lines(text):
        if line.split(maxsplit=1)[0] == name:
            return line
    return None


def iter_protocol_segments(text: str) -> Iterator[tuple[str, list[str]]]:
    """把 `show protocols all` 的应答切分为 (摘要行, 正文行列表)。

    以摘要形态的行 (``name proto table <state> ...``) 作为分隔符。
    任意协议类型的摘要行都会被识别，未知类型交由调用方报错，
    避免其正文被并入相邻协议。
    """
    summary: str | None = None
    body: list[str] = []
    for line in _content_lines(text):
        if SUMMARY_LINE.match(line):
            if summary is not None:
                yield summary, body
            summary, body = line, []
        elif summary is not None:
            body.append(line)
        else:
            logger.debug(f"忽略首个协议之前的行: {line!r}")
    if summary is not None:
        yield summary, body
