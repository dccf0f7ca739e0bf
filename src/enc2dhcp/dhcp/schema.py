"""Schema definitions for DHCP host records.

Defines the host record, PXE record and reconciliation dataclasses.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


# Fields a managed host record may carry, in output order
DHCP_KEYS = ("mac", "ip", "name", "hostname", "group", "content")

# Group assigned to the primary interface when the ENC does not name one
DEFAULT_PXE_GROUP = "pxe"

# Group assigned to secondary interfaces when the ENC does not name one
DEFAULT_MAP_GROUP = "default"

# Interface indices scanned for secondary mappings (0 = unnumbered fields)
MAX_INTERFACES = 10


class Ensure(str, Enum):
    """Whether a host declaration should exist in the hosts file."""
    PRESENT = "present"
    ABSENT = "absent"


class ChangeType(str, Enum):
    """Type of change in a diff."""
    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"
    NO_CHANGE = "no_change"


@dataclass
class HostRecord:
    """A single `host <name> { ... }` declaration."""
    name: str
    mac: Optional[str] = None
    ip: Optional[str] = None
    hostname: Optional[str] = None
    group: Optional[str] = None
    content: Optional[str] = None
    ensure: Ensure = Ensure.PRESENT

    @property
    def key(self) -> str:
        """Lookup key: hostname if present, else the block name."""
        return self.hostname or self.name

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, dropping unset fields."""
        data = {
            k: getattr(self, k)
            for k in DHCP_KEYS
            if getattr(self, k) is not None
        }
        data["ensure"] = self.ensure.value
        return data


@dataclass
class InterfaceMapping:
    """An additional network interface of a PXE host."""
    index: int
    name: str
    mac: str
    ip: str
    group: str = DEFAULT_MAP_GROUP
    content: Optional[str] = None

    def to_host_record(self) -> HostRecord:
        return HostRecord(
            name=self.name,
            mac=self.mac,
            ip=self.ip,
            group=self.group,
            content=self.content,
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "index": self.index,
            "name": self.name,
            "mac": self.mac,
            "ip": self.ip,
            "group": self.group,
        }
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class PxeRecord:
    """PXE boot data derived from one ENC record."""
    name: Optional[str] = None
    hostname: Optional[str] = None
    mac: Optional[str] = None
    ip: Optional[str] = None
    group: Optional[str] = None
    content: Optional[str] = None
    ip_map: list[InterfaceMapping] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no PXE data was configured at all."""
        return all(getattr(self, k) is None for k in DHCP_KEYS) and not self.ip_map

    def host_records(self) -> list[HostRecord]:
        """
        Flatten into independent host records.

        The primary record comes first (only if it rendered), followed by
        every secondary interface that rendered, in interface order.
        """
        if self.content is None:
            return []

        records = [
            HostRecord(
                name=self.name,
                mac=self.mac,
                ip=self.ip,
                hostname=self.hostname,
                group=self.group,
                content=self.content,
                ensure=Ensure.PRESENT,
            )
        ]
        for mapping in self.ip_map:
            if mapping.content:
                records.append(mapping.to_host_record())
        return records

    def to_dict(self) -> dict[str, Any]:
        data = {
            k: getattr(self, k)
            for k in DHCP_KEYS
            if getattr(self, k) is not None
        }
        if self.ip_map:
            data["ip_map"] = [m.to_dict() for m in self.ip_map]
        return data


# --- Diff Results ---

@dataclass
class HostChange:
    """A single host declaration change."""
    key: str
    change_type: ChangeType
    current: Optional[HostRecord] = None
    desired: Optional[HostRecord] = None


@dataclass
class DiffResult:
    """Result of diffing managed records against the hosts file."""
    changes: list[HostChange] = field(default_factory=list)

    def of_type(self, change_type: ChangeType) -> list[HostChange]:
        return [c for c in self.changes if c.change_type == change_type]

    @property
    def no_change(self) -> bool:
        """Check if there are any changes."""
        return self.total_changes == 0

    @property
    def total_changes(self) -> int:
        """Total number of changes, ignoring unchanged records."""
        return sum(
            1 for c in self.changes if c.change_type != ChangeType.NO_CHANGE
        )
