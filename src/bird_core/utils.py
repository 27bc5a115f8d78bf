# File: src/bird_core/utils.py
"""
BIRD 控制客户端 - 文本扫描工具箱

`show protocols all` 各子解析器共用的行扫描辅助函数。
所有函数均假定输入已经过 framing.clean_response() 清洗 (无缩进、单空格)。
"""

from collections.abc import Iterable, Sequence

from .exceptions import ParseError


def scan_labeled_fields(lines: Iterable[str], labels: Sequence[str]) -> dict[str, str]:
    """单次遍历各行，按行首前缀识别带标签的字段。

    同一标签出现多次时保留第一次的值；未出现的标签不会出现在结果中，
    调用方据此区分 "未打印" 与 "打印了但为空"。

    Args:
        lines: 块内的文本行。
        labels: 需要识别的标签 (含冒号，如 ``"State:"``)。

    Returns:
        dict[str, str]: 标签 -> 去除首尾空白后的值。
    """
    # 长标签优先，避免 "Neighbor AS:" 之类被短前缀抢先匹配
    ordered = sorted(labels, key=len, reverse=True)
    found: dict[str, str] = {}
    for line in lines:
        for label in ordered:
            if line.startswith(label):
                if label not in found:
                    found[label] = line[len(label) :].strip()
                break
    return found


def split_blocks(lines: Sequence[str], header: str) -> tuple[list[str], list[list[str]]]:
    """按以 ``header`` 开头的行把文本切成若干子块。

    Returns:
        tuple: (第一个 header 之前的行, [每个子块的行列表 (含 header 行)])
    """
    head: list[str] = []
    blocks: list[list[str]] = []
    for line in lines:
        if line.startswith(header):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
        else:
            head.append(line)
    return head, blocks


def parse_int(value: str, protocol: str | None, field: str) -> int:
    """解析非负整数，失败时抛出带上下文的 ParseError。"""
    token = value.strip()
    if not (token.isascii() and token.isdigit()):
        raise ParseError(f"字段 '{field}' 不是有效整数: {value!r}", protocol, field)
    return int(token)


def require(fields: dict[str, str], label: str, protocol: str | None) -> str:
    """获取必要字段，缺失则报错"""
    if label not in fields:
        raise ParseError(f"缺少必要字段 '{label}'", protocol, label.rstrip(":"))
    return fields[label]
