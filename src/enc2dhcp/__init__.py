"""enc2dhcp - DHCP/PXE host declarations from ENC records.

Usage:
    from enc2dhcp import HostInventory, Settings

    inventory = HostInventory.from_settings(Settings.load())
    for record in inventory.instances():
        print(record.content)
"""

__version__ = "0.1.0"

from .config import Settings
from .enc import HostInventory, enumerate_instances, load_enc, derive_pxe
from .dhcp import HostsFileParser, HostsFileCache, render_host

__all__ = [
    "Settings",
    "HostInventory",
    "enumerate_instances",
    "load_enc",
    "derive_pxe",
    "HostsFileParser",
    "HostsFileCache",
    "render_host",
]
