"""ENC record loading from YAML files.

One file per host, named after the host:

```yaml
# /var/lib/pxe/enc/node1.example.com.yaml
hostname: node1.example.com
pxe:
  mac: aa:bb:cc:dd:ee:ff
  ip: 10.0.0.5
  mac1: aa:bb:cc:dd:ee:01
  ip1: 10.0.1.5
  group1: vlan101
```
"""
import logging
import re
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..dhcp.validator import validate_domain

logger = logging.getLogger(__name__)

# Recognized ENC file extensions, in lookup order
ENC_EXTENSIONS = (".eyaml", ".yaml", ".yml")

FILENAME_HOSTNAME = re.compile(r"(?P<hostname>[^/]+)\.e?ya?ml$", re.IGNORECASE)


def hostname_from_filename(file_path: Union[str, Path]) -> Optional[str]:
    """node1.example.com.yaml -> node1.example.com"""
    match = FILENAME_HOSTNAME.search(Path(file_path).name)
    if not match:
        return None
    return match.group("hostname").lower()


def is_enc_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in ENC_EXTENSIONS


class EncLoader:
    """Load and normalize ENC records."""

    def load(self, file_path: Union[str, Path]) -> Optional[dict[str, Any]]:
        """
        Load one ENC record.

        The record's own `hostname` wins if it is a valid domain, otherwise
        the file name (without extension) is used if that is one.

        Returns:
            Record with keys as str and a lower-cased `hostname`, or None
            when no hostname can be resolved
        """
        enc = self._read(Path(file_path))

        hostname = enc.pop("hostname", None)
        if hostname is not None and not validate_domain(hostname):
            logger.debug(f"{file_path}: ignoring invalid hostname {hostname!r}")
            hostname = None

        if hostname is None:
            candidate = hostname_from_filename(file_path)
            if validate_domain(candidate):
                hostname = candidate

        if hostname is None:
            logger.debug(f"{file_path}: no valid hostname, skipping")
            return None

        enc["hostname"] = hostname.lower()
        return enc

    def find(self, hostname: str, directory: Union[str, Path]) -> dict[str, Any]:
        """
        Load the ENC record for a host from its conventional file name.

        Returns:
            The first loadable record, or {"hostname": hostname} if none
        """
        directory = Path(directory)
        for ext in ENC_EXTENSIONS:
            file_path = directory / f"{hostname}{ext}"
            if not file_path.is_file():
                continue
            enc = self.load(file_path)
            if enc:
                return enc

        return {"hostname": hostname}

    def _read(self, file_path: Path) -> dict[str, Any]:
        """Read a YAML mapping; anything unusable counts as an empty record."""
        try:
            with open(file_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            logger.warning(f"Cannot read ENC file {file_path}: {e}")
            return {}
        except yaml.YAMLError as e:
            logger.warning(f"Invalid YAML in ENC file {file_path}: {e}")
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"ENC file {file_path} is not a mapping, ignoring content")
            return {}

        return {str(k): v for k, v in data.items()}


def load_enc(file_path: Union[str, Path]) -> Optional[dict[str, Any]]:
    """Load one ENC record with a default loader."""
    return EncLoader().load(file_path)
