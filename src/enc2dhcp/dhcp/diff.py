"""Diff engine for reconciling managed host records with a hosts file.

Computes the set of changes needed to bring the hosts file in line with
the records derived from ENC data.
"""
import logging
from collections.abc import Iterable
from typing import Optional

from .schema import (
    HostRecord,
    Ensure,
    ChangeType,
    HostChange,
    DiffResult,
)
from .validator import normalize_mac

logger = logging.getLogger(__name__)


def _same_host(desired: HostRecord, current: HostRecord) -> bool:
    """Compare the fields that end up in the rendered stanza."""
    return (
        desired.name == current.name
        and normalize_mac(desired.mac or "") == normalize_mac(current.mac or "")
        and desired.ip == current.ip
        and desired.hostname == current.hostname
    )


def diff_hosts(
    desired: Iterable[HostRecord],
    current: dict[str, HostRecord],
    purge: bool = False,
) -> DiffResult:
    """
    Calculate diff between managed records and the parsed hosts file.

    Args:
        desired: Records that should (or, with Ensure.ABSENT, should not) exist
        current: Parsed hosts file, keyed by hostname or block name
        purge: Also delete hosts file entries that are not desired

    Returns:
        DiffResult with one HostChange per desired record (plus purges)
    """
    result = DiffResult()
    seen: set[str] = set()

    for record in desired:
        if record.key in seen:
            logger.warning(f"Duplicate host record for {record.key}, keeping the first")
            continue
        seen.add(record.key)

        change = _diff_host(record, current.get(record.key))
        if change:
            result.changes.append(change)

    if purge:
        for key, host in current.items():
            if key not in seen:
                result.changes.append(
                    HostChange(key=key, change_type=ChangeType.DELETE, current=host)
                )

    return result


def _diff_host(
    desired: HostRecord,
    current: Optional[HostRecord],
) -> Optional[HostChange]:
    """Calculate the change for a single record, or None if nothing applies."""
    if desired.ensure == Ensure.ABSENT:
        if current is None:
            return None
        return HostChange(
            key=desired.key,
            change_type=ChangeType.DELETE,
            current=current,
            desired=desired,
        )

    if current is None:
        change_type = ChangeType.CREATE
    elif _same_host(desired, current):
        change_type = ChangeType.NO_CHANGE
    else:
        change_type = ChangeType.MODIFY

    return HostChange(
        key=desired.key,
        change_type=change_type,
        current=current,
        desired=desired,
    )


def summarize_diff(diff: DiffResult) -> str:
    """Generate a human-readable summary of the diff."""
    if diff.no_change:
        return "No changes needed - hosts file is in sync"

    lines = [f"{diff.total_changes} change(s):"]
    for change in diff.changes:
        if change.change_type == ChangeType.CREATE:
            lines.append(f"  + {change.key} ({change.desired.mac}, {change.desired.ip})")
        elif change.change_type == ChangeType.MODIFY:
            lines.append(
                f"  ~ {change.key}: {change.current.mac}, {change.current.ip}"
                f" -> {change.desired.mac}, {change.desired.ip}"
            )
        elif change.change_type == ChangeType.DELETE:
            lines.append(f"  - {change.key}")

    return "\n".join(lines)
