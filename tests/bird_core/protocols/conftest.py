# tests/bird_core/protocols/conftest.py
"""
Pytest 配置文件，用于存放 protocols/ 目录测试的公共 Fixtures。
样本取自 BIRD 2.x 控制 Socket 的输出格式。
"""

import pytest

from bird_core.protocols.framing import clean_response

SHOW_PROTOCOLS_WIRE = (
    "2002-Name       Proto      Table      State  Since         Info\n"
    "1002-device1    Device     ---        up     2024-01-01 10:00:00  \n"
    " direct1    Direct     ---        up     2024-01-01 10:00:00  \n"
    " kernel1    Kernel     master4    up     2024-01-01 10:00:00  \n"
    " static1    Static     master4    up     2024-01-01 10:00:00  \n"
    " bgp1       BGP        ---        up     2024-01-01 10:00:05  Established   \n"
    " bgp_passive BGP       ---        start  2024-01-01 10:00:00  Passive\n"
    "0000 \n"
)

SHOW_PROTOCOLS_ALL_WIRE = (
    "2002-Name       Proto      Table      State  Since         Info\n"
    "1002-device1    Device     ---        up     2024-01-01 10:00:00  \n"
    "1006-\n"
    "1002-direct1    Direct     ---        up     2024-01-01 10:00:00  \n"
    "1006-  Channel ipv4\n"
    "         State:          UP\n"
    "         Table:          master4\n"
    "\n"
    "1002-kernel1    Kernel     master4    up     2024-01-01 10:00:00  \n"
    "1006-  Channel ipv4\n"
    "         State:          UP\n"
    "         Table:          master4\n"
    "         Preference:     10\n"
    "         Input filter:   ACCEPT\n"
    "         Output filter:  ACCEPT\n"
    "         Routes:         5 imported, 3 exported, 5 preferred\n"
    "         Route change stats:     received   rejected   filtered    ignored   accepted\n"
    "           Import updates:             10          2        ---          0          8\n"
    "           Import withdraws:            1          0        ---          0          1\n"
    "           Export updates:             20          1          4        ---         15\n"
    "           Export withdraws:            2        ---        ---        ---          2\n"
    "\n"
    "1002-static1    Static     master4    up     2024-01-01 10:00:00  \n"
    "1006-  Channel ipv4\n"
    "         State:          UP\n"
    "         Table:          master4\n"
    "         Preference:     200\n"
    "         Input filter:   ACCEPT\n"
    "         Output filter:  REJECT\n"
    "         Routes:         2 imported, 0 exported, 2 preferred\n"
    "\n"
    "1002-bgp1       BGP        ---        up     2024-01-01 10:00:05  Established   \n"
    "1006-  BGP state:          Established\n"
    "    Neighbor address: 192.0.2.2\n"
    "    Neighbor AS:      65002\n"
    "    Local AS:         65001\n"
    "    Neighbor ID:      192.0.2.2\n"
    "    Local capabilities\n"
    "      Multiprotocol\n"
    "        AF announced: ipv4 ipv6\n"
    "      Route refresh\n"
    "      Extended next hop\n"
    "        IPv6 nexthop: ipv4\n"
    "      Graceful restart\n"
    "      4-octet AS numbers\n"
    "      Enhanced refresh\n"
    "      Long-lived graceful restart\n"
    "    Neighbor capabilities\n"
    "      Multiprotocol\n"
    "        AF announced: ipv4\n"
    "      Route refresh\n"
    "      4-octet AS numbers\n"
    "    Session:          external AS4\n"
    "    Source address:   192.0.2.1\n"
    "    Hold timer:       140.960/240\n"
    "    Keepalive timer:  36.252/80\n"
    "    Send hold timer:  300.5/480\n"
    "  Channel ipv4\n"
    "    State:          UP\n"
    "    Table:          master4\n"
    "    Preference:     100\n"
    "    Input filter:   ACCEPT\n"
    "    Output filter:  ACCEPT\n"
    "    Import limit:   1000\n"
    "      Action:       restart\n"
    "    Routes:         7 imported, 2 exported, 6 preferred\n"
    "    Route change stats:     received   rejected   filtered    ignored   accepted\n"
    "      Import updates:             10          2        ---          0          8\n"
    "      Import withdraws:            0          0        ---          0          0\n"
    "      Export updates:             12          1          0        ---         11\n"
    "      Export withdraws:            0        ---        ---        ---          0\n"
    "    BGP Next hop:   192.0.2.1 fe80::1\n"
    "\n"
    "1002-bgp_passive BGP       ---        start  2024-01-01 10:00:00  Passive\n"
    "1006-  BGP state:          Passive\n"
    "    Neighbor range:   198.51.100.0/24\n"
    "    Neighbor AS:      65100\n"
    "    Local AS:         65001\n"
    "\n"
    "0000 \n"
)


@pytest.fixture(scope="module")
def show_protocols_wire() -> bytes:
    """`show protocols` 的原始应答字节"""
    return SHOW_PROTOCOLS_WIRE.encode()


@pytest.fixture(scope="module")
def show_protocols_all_wire() -> bytes:
    """`show protocols all` 的原始应答字节"""
    return SHOW_PROTOCOLS_ALL_WIRE.encode()


@pytest.fixture(scope="module")
def show_protocols_text() -> str:
    """清洗后的 `show protocols` 应答"""
    return clean_response(SHOW_PROTOCOLS_WIRE)


@pytest.fixture(scope="module")
def show_protocols_all_text() -> str:
    """清洗后的 `show protocols all` 应答"""
    return clean_response(SHOW_PROTOCOLS_ALL_WIRE)


@pytest.fixture(scope="module")
def kernel_channel_lines() -> list[str]:
    return [
        "Channel ipv4",
        "State: UP",
        "Table: master4",
        "Preference: 10",
        "Input filter: ACCEPT",
        "Output filter: ACCEPT",
        "Routes: 5 imported, 3 exported, 5 preferred",
        "Route change stats: received rejected filtered ignored accepted",
        "Import updates: 10 2 --- 0 8",
        "Import withdraws: 1 0 --- 0 1",
        "Export updates: 20 1 4 --- 15",
        "Export withdraws: 2 --- --- --- 2",
    ]


@pytest.fixture(scope="module")
def bgp_session_lines() -> list[str]:
    """清洗后的 BGP 会话正文 (不含 Channel 块)"""
    return [
        "BGP state: Established",
        "Neighbor address: 192.0.2.2",
        "Neighbor AS: 65002",
        "Local AS: 65001",
        "Neighbor ID: 192.0.2.2",
        "Local capabilities",
        "Multiprotocol",
        "AF announced: ipv4 ipv6",
        "Route refresh",
        "Extended next hop",
        "IPv6 nexthop: ipv4",
        "Graceful restart",
        "4-octet AS numbers",
        "Enhanced refresh",
        "Long-lived graceful restart",
        "Neighbor capabilities",
        "Multiprotocol",
        "AF announced: ipv4",
        "Route refresh",
        "4-octet AS numbers",
        "Session: external AS4",
        "Source address: 192.0.2.1",
        "Hold timer: 140.960/240",
        "Keepalive timer: 36.252/80",
        "Send hold timer: 300.5/480",
    ]
