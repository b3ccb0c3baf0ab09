"""Pure rules for audit log entries.

An entry records what changed on an entity. Debug entries are never stored
and an update that changed nothing is not worth a row.
"""

from typing import Any

from moneta.domain.models import LogOperation, LogType

IGNORED_FIELDS = frozenset({"created_at", "updated_at"})


def build_detail(before: dict[str, Any] | None, after: dict[str, Any] | None) -> dict[str, Any]:
    """Describe an entity change field by field.

    Args:
        before: Entity before the operation (None on create).
        after: Entity after the operation (None on delete).

    Returns:
        Mapping of changed field to {"from": old, "to": new}. Timestamps are skipped.
    """
    before = before or {}
    after = after or {}
    detail: dict[str, Any] = {}

    for field in sorted(set(before) | set(after)):
        if field in IGNORED_FIELDS:
            continue
        old = before.get(field)
        new = after.get(field)
        if old != new:
            detail[field] = {"from": old, "to": new}

    return detail


def should_persist(log_type: LogType, operation: LogOperation, detail: dict[str, Any]) -> bool:
    """Decide whether an audit entry is stored.

    Args:
        log_type: Severity of the entry.
        operation: Operation that produced it.
        detail: Field-level change description.

    Returns:
        False for debug entries and for updates with no changes, True otherwise.
    """
    if LogType(log_type) == LogType.DEBUG:
        return False
    if LogOperation(operation) == LogOperation.UPDATE and not detail:
        return False
    return True
