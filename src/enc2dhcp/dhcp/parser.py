"""Parser for existing DHCP hosts files.

A permissive line scanner: it extracts `host` blocks it recognizes and
silently ignores everything else. No validation is performed here.
"""
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from ..utils.logging_config import timed
from .schema import HostRecord

logger = logging.getLogger(__name__)

HOST_START = re.compile(r"^host (?P<name>\S+) \{$")
HARDWARE_ETHERNET = re.compile(r"^hardware ethernet (?P<mac>\S+);$")
FIXED_ADDRESS = re.compile(r"^fixed-address (?P<ip>\S+);$")
HOST_NAME_OPTION = re.compile(r'^option host-name "(?P<hostname>\S+)";$')
BLOCK_END = re.compile(r"^\}$")

PathLike = Union[str, Path]


class HostsFileCache:
    """
    Parsed hosts files keyed by path.

    Owned by the caller and shared between parsers that should read each
    file only once. Entries live until invalidated or cleared.
    """

    def __init__(self):
        self._entries: dict[str, dict[str, HostRecord]] = {}

    @staticmethod
    def _key(path: PathLike) -> str:
        return str(Path(path).expanduser().resolve())

    def get(self, path: PathLike) -> Optional[dict[str, HostRecord]]:
        return self._entries.get(self._key(path))

    def put(self, path: PathLike, hosts: dict[str, HostRecord]) -> None:
        self._entries[self._key(path)] = hosts

    def invalidate(self, path: PathLike) -> None:
        """Drop the cached result for one file."""
        self._entries.pop(self._key(path), None)

    def clear(self) -> None:
        """Drop all cached results."""
        self._entries.clear()

    def __contains__(self, path: PathLike) -> bool:
        return self._key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def parse_lines(lines: Iterable[str]) -> dict[str, HostRecord]:
    """
    Scan hosts file lines into records.

    Returns:
        Dict mapping hostname (or block name when no host-name option is
        set) to HostRecord
    """
    hosts: dict[str, HostRecord] = {}
    host: Optional[HostRecord] = None

    for raw in lines:
        line = raw.strip()

        match = HOST_START.match(line)
        if match:
            host = HostRecord(name=match.group("name"))
            continue

        if host is None:
            continue

        mac_match = HARDWARE_ETHERNET.match(line)
        ip_match = FIXED_ADDRESS.match(line)
        hostname_match = HOST_NAME_OPTION.match(line)

        if mac_match:
            host.mac = mac_match.group("mac")
        elif ip_match:
            host.ip = ip_match.group("ip")
        elif hostname_match:
            host.hostname = hostname_match.group("hostname")
        elif BLOCK_END.match(line):
            hosts[host.key] = host
            host = None

    return hosts


class HostsFileParser:
    """Read hosts files, once per path for the lifetime of the cache."""

    def __init__(self, cache: Optional[HostsFileCache] = None):
        self.cache = cache if cache is not None else HostsFileCache()

    @timed("hosts_parse")
    def parse(self, path: PathLike) -> dict[str, HostRecord]:
        """
        Parse a hosts file.

        A missing or unreadable file yields an empty mapping.
        """
        cached = self.cache.get(path)
        if cached is not None:
            return cached

        hosts: dict[str, HostRecord] = {}
        file_path = Path(path)
        if file_path.is_file():
            try:
                with open(file_path, encoding="utf-8") as f:
                    hosts = parse_lines(f)
            except OSError as e:
                logger.warning(f"Cannot read hosts file {file_path}: {e}")
        else:
            logger.debug(f"Hosts file {file_path} does not exist")

        logger.debug(f"Parsed {len(hosts)} host(s) from {file_path}")
        self.cache.put(path, hosts)
        return hosts

    def find(self, path: PathLike, hostname: str) -> Optional[HostRecord]:
        """Find the record whose block name or host-name equals hostname."""
        for host in self.parse(path).values():
            if hostname in (host.name, host.hostname):
                return host
        return None
