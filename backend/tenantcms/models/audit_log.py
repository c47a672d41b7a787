from sqlalchemy import event

from tenantcms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class AuditLog(BaseModel, TenantMixin):
    """Append-only record of a mutation inside a tenant."""

    __tablename__ = "audit_logs"

    __table_args__ = (
        db.Index("ix_audit_cursor", "tenant_id", "created_at", "id"),
        db.Index("ix_audit_actor_action", "tenant_id", "actor_id", "action"),
    )

    # Null for system actions (seed, CI callback)
    actor_id = db.Column(db.String(36), nullable=True, index=True)
    action = db.Column(db.String(50), nullable=False, index=True)

    entity_type = db.Column(db.String(50), nullable=False, index=True)
    entity_id = db.Column(db.String(36), nullable=False, index=True)

    payload = db.Column(db.JSON, nullable=False, default=dict)

    @classmethod
    def record(cls, *, tenant_id, actor_id, action, entity_type, entity_id, payload=None):
        log = cls()
        log.tenant_id = tenant_id
        log.actor_id = actor_id
        log.action = action
        log.entity_type = entity_type
        log.entity_id = str(entity_id)
        log.payload = payload or {}
        db.session.add(log)
        return log


@event.listens_for(AuditLog, "before_update")
@event.listens_for(AuditLog, "before_delete")
def prevent_audit_mutation(mapper, connection, target):
    raise RuntimeError(f"Audit log {target.id} is immutable")
