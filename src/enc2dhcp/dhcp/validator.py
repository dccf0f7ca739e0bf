"""Syntax validators for host identifiers.

All checks are syntax-only: no DNS resolution and no reachability tests.
"""
import ipaddress
import re
from typing import Any

MAC_PATTERN = re.compile(r"^([a-f0-9]{2}[:-]){5}[a-f0-9]{2}$")
DOMAIN_PATTERN = re.compile(r"^([a-z0-9]+(-[a-z0-9]+)*\.)+[a-z]{2,}$")
GROUP_INVALID_CHARS = re.compile(r"[^a-z0-9]")


def validate_ip(value: Any) -> bool:
    """Check for an IPv4 or IPv6 address literal."""
    if not value or not isinstance(value, str):
        return False
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def validate_mac(value: Any) -> bool:
    """Check for six colon- or hyphen-separated hex octets (any case)."""
    if not isinstance(value, str):
        return False
    return MAC_PATTERN.fullmatch(value.lower()) is not None


def validate_domain(value: Any) -> bool:
    """Check for a fully qualified domain name (any case)."""
    if not isinstance(value, str):
        return False
    return DOMAIN_PATTERN.fullmatch(value.lower()) is not None


def normalize_mac(mac: str) -> str:
    """aa-BB-cc-dd-ee-ff -> aa:bb:cc:dd:ee:ff"""
    return mac.lower().replace("-", ":")


def normalize_group(group: Any) -> str:
    """Lower-case a group tag and map anything outside [a-z0-9] to '_'."""
    return GROUP_INVALID_CHARS.sub("_", str(group).lower())
