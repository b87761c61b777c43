"""Audit capture at flush time.

AuditedSession is the sync session class behind every AsyncSession the
Database hands out. Its ``before_flush`` listener writes one
AuditTrailModel row per inserted, updated or deleted instance of an
audited model (``__audited__ = True``), in the same transaction as the
change.

Actor and client IP are read from request-scoped context variables
(keyhold.core.request_context); outside a request they are None.
Columns listed in a model's ``__audit_redacted__`` are masked.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import event, inspect
from sqlalchemy.orm import Session, UOWTransaction

from keyhold.core.request_context import get_actor, get_client_ip
from keyhold.domain.entities import AuditAction
from keyhold.infrastructure.persistence.models.audit_trail import AuditTrailModel

REDACTED = "***"
IGNORED_COLUMNS = frozenset({"updated_at"})


class AuditedSession(Session):
    """Session whose flushes are audited."""


def _to_json(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _present(obj: Any, key: str, value: Any) -> Any:
    if key in getattr(obj, "__audit_redacted__", frozenset()) and value is not None:
        return REDACTED
    return _to_json(value)


def _snapshot(obj: Any) -> dict[str, Any]:
    state = inspect(obj)
    return {
        attr.key: _present(obj, attr.key, state.attrs[attr.key].value)
        for attr in state.mapper.column_attrs
    }


def _changes(obj: Any) -> tuple[dict[str, Any], dict[str, Any], list[str]]:
    state = inspect(obj)
    old_values: dict[str, Any] = {}
    new_values: dict[str, Any] = {}
    affected: list[str] = []
    for attr in state.mapper.column_attrs:
        if attr.key in IGNORED_COLUMNS:
            continue
        history = state.attrs[attr.key].history
        if not history.has_changes():
            continue
        old = history.deleted[0] if history.deleted else None
        new = history.added[0] if history.added else None
        if old == new:
            continue
        old_values[attr.key] = _present(obj, attr.key, old)
        new_values[attr.key] = _present(obj, attr.key, new)
        affected.append(attr.key)
    return old_values, new_values, affected


def _audit_row(
    obj: Any,
    action: AuditAction,
    old_values: dict[str, Any],
    new_values: dict[str, Any],
    affected: list[str],
) -> AuditTrailModel:
    actor = get_actor()
    return AuditTrailModel(
        action=action.value,
        table_name=obj.__tablename__,
        timestamp=datetime.now(UTC),
        username=actor.username if actor else None,
        full_name=actor.full_name if actor else None,
        old_values=old_values,
        new_values=new_values,
        affected_columns=affected,
        ip_address=get_client_ip(),
        message=f"{action.value} {obj.__tablename__} {_to_json(obj.id)}",
    )


def _is_audited(obj: Any) -> bool:
    return bool(getattr(type(obj), "__audited__", False))


@event.listens_for(AuditedSession, "before_flush")
def capture_audit_trail(
    session: Session, flush_context: UOWTransaction, instances: object
) -> None:
    rows = []
    for obj in session.new:
        if _is_audited(obj):
            snapshot = _snapshot(obj)
            rows.append(_audit_row(obj, AuditAction.CREATE, {}, snapshot, sorted(snapshot)))
    for obj in session.dirty:
        if _is_audited(obj) and session.is_modified(obj, include_collections=False):
            old_values, new_values, affected = _changes(obj)
            if affected:
                rows.append(
                    _audit_row(obj, AuditAction.UPDATE, old_values, new_values, affected)
                )
    for obj in session.deleted:
        if _is_audited(obj):
            rows.append(_audit_row(obj, AuditAction.DELETE, _snapshot(obj), {}, []))
    session.add_all(rows)
