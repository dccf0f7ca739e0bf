"""Host stanza renderer.

Turns a host record into an ISC dhcpd host declaration:

    host node1.example.com {
      hardware ethernet aa:bb:cc:dd:ee:ff;
      fixed-address 10.0.0.5;
      option host-name "node1.example.com";
    }
"""
from collections.abc import Mapping
from typing import Any, Optional

from .schema import DEFAULT_PXE_GROUP

REQUIRED_FIELDS = ("name", "mac", "ip")


def _field(record: Any, key: str) -> Optional[str]:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def render_host(record: Any) -> Optional[str]:
    """
    Render a host declaration.

    Args:
        record: HostRecord, InterfaceMapping, PxeRecord or plain mapping

    Returns:
        The stanza text, or None when mandatory fields are missing
    """
    for key in REQUIRED_FIELDS:
        if not _field(record, key):
            return None

    hostname = _field(record, "hostname")

    # PXE-class entries are identified by name at boot time
    if _field(record, "group") == DEFAULT_PXE_GROUP and not hostname:
        return None

    lines = [
        f"host {_field(record, 'name')} {{",
        f"  hardware ethernet {_field(record, 'mac')};",
        f"  fixed-address {_field(record, 'ip')};",
    ]
    if hostname:
        lines.append(f'  option host-name "{hostname}";')
    lines.append("}")

    return "\n".join(lines).strip()
