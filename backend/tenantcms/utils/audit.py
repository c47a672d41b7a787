from typing import Optional

from flask import g, has_request_context

from tenantcms.models.audit_log import AuditLog


def current_actor_id() -> Optional[str]:
    if not has_request_context():
        return None
    session = getattr(g, "session", None)
    return session.user_id if session else None


def log_action(
    *,
    tenant_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None,
    actor_id: Optional[str] = None,
):
    """
    Stage an audit row in the current transaction.

    Tenant-less actions (e.g. editing a SUPER_ADMIN account) are not recorded.
    """
    if not tenant_id or not entity_id:
        return None

    return AuditLog.record(
        tenant_id=tenant_id,
        actor_id=actor_id or current_actor_id(),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        payload=payload,
    )
