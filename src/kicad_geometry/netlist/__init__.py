"""
Connectivity extraction.
"""

from .netlist import (
    DEFAULT_EXCLUDED_PREFIXES,
    DEFAULT_POWER_PREFIX,
    Net,
    Netlist,
    NetNode,
    build_wire_graph,
    collect_connection_points,
    extract_netlist,
    net_group_name,
)

__all__ = [
    "Net",
    "Netlist",
    "NetNode",
    "build_wire_graph",
    "collect_connection_points",
    "extract_netlist",
    "net_group_name",
    "DEFAULT_EXCLUDED_PREFIXES",
    "DEFAULT_POWER_PREFIX",
]
