"""DHCP hosts file handling.

- Validators for MAC, IP and domain syntax
- Host stanza rendering
- Hosts file parsing (with an explicit, caller-owned cache)
- Diff and write-back of managed host declarations

Usage:
    from enc2dhcp.dhcp import HostsFileParser, HostsFileCache, diff_hosts

    cache = HostsFileCache()
    current = HostsFileParser(cache).parse("/etc/dhcp/dhcpd.hosts")
    diff = diff_hosts(records, current)
"""

from .schema import (
    DHCP_KEYS,
    Ensure,
    ChangeType,
    HostRecord,
    InterfaceMapping,
    PxeRecord,
    HostChange,
    DiffResult,
)
from .validator import (
    validate_ip,
    validate_mac,
    validate_domain,
    normalize_mac,
    normalize_group,
)
from .renderer import render_host
from .parser import HostsFileParser, HostsFileCache, parse_lines
from .diff import diff_hosts, summarize_diff
from .writer import HostsFileWriter, WriteError

__all__ = [
    # Schema classes
    "DHCP_KEYS",
    "Ensure",
    "ChangeType",
    "HostRecord",
    "InterfaceMapping",
    "PxeRecord",
    "HostChange",
    "DiffResult",
    # Validators
    "validate_ip",
    "validate_mac",
    "validate_domain",
    "normalize_mac",
    "normalize_group",
    # Renderer
    "render_host",
    # Parser
    "HostsFileParser",
    "HostsFileCache",
    "parse_lines",
    # Reconciliation
    "diff_hosts",
    "summarize_diff",
    "HostsFileWriter",
    "WriteError",
]
