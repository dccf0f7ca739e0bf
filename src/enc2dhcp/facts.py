"""OS capability facts.

`is_init_systemd` tells the configuration framework whether the host's
init system is systemd. Only RedHat-family and Ubuntu releases are
recognized; anything else reports False.
"""
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")

# os-release ID -> operating system name
OS_NAMES = {
    "fedora": "Fedora",
    "rhel": "RedHat",
    "centos": "CentOS",
    "rocky": "Rocky",
    "almalinux": "AlmaLinux",
    "ol": "OracleLinux",
    "ubuntu": "Ubuntu",
    "debian": "Debian",
}

REDHAT_IDS = {"fedora", "rhel", "centos", "rocky", "almalinux", "ol"}
DEBIAN_IDS = {"debian", "ubuntu"}


def versioncmp(a: str, b: str) -> int:
    """
    Compare dotted version strings.

    Numeric parts compare as numbers, others as text.
    Returns -1, 0 or 1.
    """
    left = re.findall(r"\d+|[A-Za-z]+", a)
    right = re.findall(r"\d+|[A-Za-z]+", b)

    for x, y in zip(left, right):
        if x == y:
            continue
        if x.isdigit() and y.isdigit():
            return -1 if int(x) < int(y) else 1
        return -1 if x < y else 1

    if len(left) == len(right):
        return 0
    return -1 if len(left) < len(right) else 1


def _major(value: Any) -> int:
    match = re.match(r"\s*(\d+)", str(value or ""))
    return int(match.group(1)) if match else 0


def is_init_systemd(facts: Mapping[str, Any]) -> bool:
    """
    Check if the init system is systemd.

    Args:
        facts: Mapping with osfamily, operatingsystem,
            operatingsystemmajrelease and operatingsystemrelease
    """
    osfamily = str(facts.get("osfamily") or "").lower()
    osname = str(facts.get("operatingsystem") or "").lower()
    osmaj = _major(facts.get("operatingsystemmajrelease"))
    osrel = str(facts.get("operatingsystemrelease") or "")

    if osname == "fedora":
        return True
    if osfamily == "redhat" and osmaj >= 7:
        return True
    if osname == "ubuntu" and versioncmp(osrel, "15.04") >= 0:
        return True
    return False


def read_os_facts(path: Union[str, Path] = OS_RELEASE) -> dict[str, str]:
    """
    Build OS facts from an os-release file.

    Returns:
        Fact mapping; empty if the file cannot be read
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Cannot read {path}: {e}")
        return {}

    release = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        release[key.strip()] = value.strip().strip('"').strip("'")

    os_id = release.get("ID", "").lower()
    id_like = release.get("ID_LIKE", "").lower().split()
    version = release.get("VERSION_ID", "")

    if os_id in REDHAT_IDS or {"rhel", "fedora"} & set(id_like):
        family = "RedHat"
    elif os_id in DEBIAN_IDS or "debian" in id_like:
        family = "Debian"
    else:
        family = OS_NAMES.get(os_id, os_id.capitalize())

    return {
        "osfamily": family,
        "operatingsystem": OS_NAMES.get(os_id, os_id.capitalize()),
        "operatingsystemrelease": version,
        "operatingsystemmajrelease": version.split(".")[0] if version else "",
    }
