"""Runtime settings loaded from YAML configuration and the environment.

```yaml
# /etc/enc2dhcp/config.yaml
enc_dir: /var/lib/pxe/enc
hosts_file: /etc/dhcp/dhcpd.hosts
external_nodes: /usr/local/bin/enc
classifier_timeout: 30
```

Environment variables override file values:
    ENC2DHCP_ENC_DIR, ENC2DHCP_HOSTS_FILE, ENC2DHCP_EXTERNAL_NODES
"""
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENC_DIR = Path("/var/lib/pxe/enc")
DEFAULT_HOSTS_FILE = Path("/etc/dhcp/dhcpd.hosts")

ENV_OVERRIDES = {
    "ENC2DHCP_ENC_DIR": "enc_dir",
    "ENC2DHCP_HOSTS_FILE": "hosts_file",
    "ENC2DHCP_EXTERNAL_NODES": "external_nodes",
}


class ConfigError(Exception):
    """Error loading configuration."""
    pass


@dataclass
class Settings:
    """Where ENC records live and which hosts file they are synced to."""
    enc_dir: Path = DEFAULT_ENC_DIR
    hosts_file: Path = DEFAULT_HOSTS_FILE
    external_nodes: Optional[str] = None
    classifier_timeout: float = 30.0
    config_path: Optional[Path] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("enc_dir", "hosts_file", "config_path"):
            if data[key] is not None:
                data[key] = str(data[key])
        return data

    @classmethod
    def load(cls, config_path: Optional[Union[str, Path]] = None) -> "Settings":
        """
        Load settings.

        Args:
            config_path: Explicit config file; searched for when omitted

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
            ConfigError: If the config file is not a valid YAML mapping
        """
        if config_path is not None:
            path = Path(config_path).expanduser()
            if not path.is_file():
                raise FileNotFoundError(f"Config file not found: {path}")
        else:
            path = find_config()

        data: dict = {}
        if path is not None:
            data = _read_config(path)
            logger.debug(f"Loaded settings from {path}")

        for env_var, key in ENV_OVERRIDES.items():
            value = os.environ.get(env_var)
            if value:
                data[key] = value

        unknown = set(data) - {"enc_dir", "hosts_file", "external_nodes", "classifier_timeout"}
        for key in sorted(unknown):
            logger.warning(f"Ignoring unknown setting: {key}")

        try:
            timeout = float(data.get("classifier_timeout", 30.0))
        except (TypeError, ValueError):
            raise ConfigError(
                f"Invalid classifier_timeout: {data.get('classifier_timeout')!r}"
            )

        return cls(
            enc_dir=Path(data.get("enc_dir") or DEFAULT_ENC_DIR).expanduser(),
            hosts_file=Path(data.get("hosts_file") or DEFAULT_HOSTS_FILE).expanduser(),
            external_nodes=data.get("external_nodes") or None,
            classifier_timeout=timeout,
            config_path=path,
        )


def find_config() -> Optional[Path]:
    """Find the first existing config file on the search path."""
    search_paths = [
        Path.cwd() / "enc2dhcp.yaml",
        Path.home() / ".config" / "enc2dhcp" / "config.yaml",
        Path("/etc/enc2dhcp/config.yaml"),
    ]

    for path in search_paths:
        if path.is_file():
            return path
    return None


def _read_config(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data
