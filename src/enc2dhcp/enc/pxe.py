"""PXE record derivation from ENC data.

Takes a normalized ENC record and produces the primary host declaration
plus up to ten interface mappings:

```yaml
pxe:
  mac: aa:bb:cc:dd:ee:ff    # primary (index 0)
  ip: 10.0.0.5
  group: pxe
  mac1: aa:bb:cc:dd:ee:01   # -> <short-hostname>-eth1
  ip1: 10.0.1.5
  group1: vlan101
```

Invalid mac/ip values are dropped with a warning rather than failing the
host, so a broken ENC entry just produces no stanza.
"""
import logging
from collections.abc import Mapping
from typing import Any, Optional

from ..dhcp.renderer import render_host
from ..dhcp.schema import (
    DEFAULT_MAP_GROUP,
    DEFAULT_PXE_GROUP,
    MAX_INTERFACES,
    InterfaceMapping,
    PxeRecord,
)
from ..dhcp.validator import (
    normalize_group,
    normalize_mac,
    validate_ip,
    validate_mac,
)

logger = logging.getLogger(__name__)


class PxeDeriver:
    """Derive PXE records from ENC records."""

    def derive(self, enc: Optional[Mapping[str, Any]]) -> PxeRecord:
        """
        Derive the PXE record for one host.

        Args:
            enc: ENC record as returned by EncLoader.load

        Returns:
            PxeRecord; empty when the ENC is empty or absent
        """
        if not enc:
            return PxeRecord()

        pxe = self._pxe_section(enc)

        # The pxe section wins over flat mac/ip
        if pxe.get("mac") is None:
            pxe["mac"] = enc.get("mac")
        if pxe.get("ip") is None:
            pxe["ip"] = enc.get("ip")

        hostname = enc.get("hostname")
        if hostname is not None:
            hostname = str(hostname).lower()

        mac = pxe.get("mac")
        ip = pxe.get("ip")
        group = pxe.get("group")

        invalid = []
        if mac is not None and not validate_mac(mac):
            invalid.append(f"mac {mac!r}")
            mac = None
        if ip is not None and not validate_ip(ip):
            invalid.append(f"ip {ip!r}")
            ip = None
        if invalid:
            logger.warning(f"{hostname}: invalid PXE data dropped: {', '.join(invalid)}")

        ip_map: list[InterfaceMapping] = []
        if mac and ip:
            if group is None:
                group = DEFAULT_PXE_GROUP
            mac = normalize_mac(mac)
            group = normalize_group(group)
            # Index 0 of the scan reads these back
            pxe["mac"] = mac
            pxe["group"] = group
            ip_map = self._scan_interfaces(pxe, hostname)

        record = PxeRecord(
            name=hostname,
            hostname=hostname,
            mac=mac,
            ip=ip,
            group=group,
        )
        record.content = render_host(record)
        record.ip_map = ip_map
        return record

    def _pxe_section(self, enc: Mapping[str, Any]) -> dict[str, Any]:
        section = enc.get("pxe")
        if not isinstance(section, Mapping):
            return {}
        return {str(k): v for k, v in section.items()}

    def _scan_interfaces(
        self,
        pxe: Mapping[str, Any],
        hostname: Optional[str],
    ) -> list[InterfaceMapping]:
        """
        Collect interface mappings in index order.

        Index 0 reads the unnumbered fields, index i reads mac{i}/ip{i}.
        The scan stops at the first index without a valid mac and ip, so
        interface numbering never has gaps.
        """
        short_name = (hostname or "").split(".")[0]
        mappings = []

        for index in range(MAX_INTERFACES):
            suffix = str(index) if index else ""
            mac = pxe.get(f"mac{suffix}")
            ip = pxe.get(f"ip{suffix}")

            if not (validate_mac(mac) and validate_ip(ip)):
                break

            group = pxe.get(f"group{suffix}")
            mapping = InterfaceMapping(
                index=index,
                name=f"{short_name}-eth{index}",
                mac=normalize_mac(mac),
                ip=ip,
                group=normalize_group(group if group is not None else DEFAULT_MAP_GROUP),
            )
            mapping.content = render_host(mapping)
            mappings.append(mapping)

        return mappings


def derive_pxe(enc: Optional[Mapping[str, Any]]) -> PxeRecord:
    """Derive a PXE record with a default deriver."""
    return PxeDeriver().derive(enc)
