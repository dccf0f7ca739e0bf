"""ENC record handling.

Loads per-host ENC records, derives PXE records from them and enumerates
the host declarations a directory of ENC files should produce.
"""

from .loader import EncLoader, load_enc, hostname_from_filename, ENC_EXTENSIONS
from .pxe import PxeDeriver, derive_pxe
from .classifier import ClassifierLookup
from .inventory import HostInventory, enumerate_instances

__all__ = [
    "EncLoader",
    "load_enc",
    "hostname_from_filename",
    "ENC_EXTENSIONS",
    "PxeDeriver",
    "derive_pxe",
    "ClassifierLookup",
    "HostInventory",
    "enumerate_instances",
]
