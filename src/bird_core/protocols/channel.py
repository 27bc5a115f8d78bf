# src/bird_core/protocols/channel.py
"""
show protocols all - Channel 块解析

Channel 块示例 (已清洗)::

    Channel ipv4
    State: UP
    Table: master4
    Preference: 100
    Input filter: ACCEPT
    Output filter: REJECT
    Routes: 5 imported, 3 exported, 5 preferred
    Route change stats: received rejected filtered ignored accepted
    Import updates: 10 2 --- 0 8
    ...

所有标签均可能缺失。
"""

from collections.abc import Sequence

from ..exceptions import ParseError
from ..utils import parse_int, scan_labeled_fields
from .constants import INTEGER, NOT_APPLICABLE, ChannelLabel
from .models import Channel, RouteChangeStats, RouteCounts


def parse_routes(text: str | None) -> RouteCounts:
    """解析 ``Routes:`` 字段。

    按位置提取文本中出现的所有整数 (imported, exported, preferred)，
    不依赖数字周围的措辞。字段缺失或数字不足时对应计数为 0。
    """
    if text is None:
        return RouteCounts()
    numbers = [int(n) for n in INTEGER.findall(text)]
    numbers += [0] * (3 - len(numbers))
    return RouteCounts(imported=numbers[0], exported=numbers[1], preferred=numbers[2])


def parse_route_change_stats(
    text: str | None, protocol: str | None = None, field: str = "Route change stats"
) -> RouteChangeStats:
    """解析一行路由变更统计 (received rejected filtered ignored accepted)。

    ``---`` 表示不适用 (None)，与 0 区分；不足 5 列时末尾字段为 None。

    Raises:
        ParseError: 出现既不是整数也不是 ``---`` 的列。
    """
    if text is None:
        return RouteChangeStats()

    values: list[int | None] = []
    for token in text.split()[:5]:
        if token == NOT_APPLICABLE:
            values.append(None)
        else:
            values.append(parse_int(token, protocol, field))
    values += [None] * (5 - len(values))

    received, rejected, filtered, ignored, accepted = values
    return RouteChangeStats(
        received=received,
        rejected=rejected,
        filtered=filtered,
        ignored=ignored,
        accepted=accepted,
    )


def parse_channel(lines: Sequence[str], protocol: str | None = None) -> Channel:
    """解析一个 Channel 块 (首行为 ``Channel <name>``)。"""
    if not lines or not lines[0].startswith(ChannelLabel.HEADER):
        raise ParseError("Channel 块缺少 'Channel <name>' 头部", protocol, "Channel")

    name = lines[0][len(ChannelLabel.HEADER) :].strip()
    fields = scan_labeled_fields(lines[1:], ChannelLabel.ALL)

    # 单值字段只取第一个词
    def _word(label: str) -> str | None:
        value = fields.get(label)
        if not value:
            return value
        return value.split(maxsplit=1)[0]

    def _stats(label: str) -> RouteChangeStats:
        return parse_route_change_stats(fields.get(label), protocol, label.rstrip(":"))

    preference = _word(ChannelLabel.PREFERENCE)
    next_hop = fields.get(ChannelLabel.BGP_NEXT_HOP)

    return Channel(
        name=name,
        state=_word(ChannelLabel.STATE),
        table=_word(ChannelLabel.TABLE),
        preference=(
            parse_int(preference, protocol, "Preference")
            if preference is not None
            else None
        ),
        input_filter=_word(ChannelLabel.INPUT_FILTER),
        output_filter=_word(ChannelLabel.OUTPUT_FILTER),
        import_limit=_word(ChannelLabel.IMPORT_LIMIT),
        action=_word(ChannelLabel.ACTION),
        routes=parse_routes(fields.get(ChannelLabel.ROUTES)),
        import_updates=_stats(ChannelLabel.IMPORT_UPDATES),
        import_withdraws=_stats(ChannelLabel.IMPORT_WITHDRAWS),
        export_updates=_stats(ChannelLabel.EXPORT_UPDATES),
        export_withdraws=_stats(ChannelLabel.EXPORT_WITHDRAWS),
        bgp_next_hop=tuple(next_hop.split()) if next_hop is not None else None,
    )
