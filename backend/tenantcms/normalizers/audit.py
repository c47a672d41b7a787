from .common import serialize_datetime


def normalize_audit_log(log):
    return {
        "id": log.id,
        "tenant_id": log.tenant_id,
        "actor_id": log.actor_id,
        "action": log.action,
        "entity_type": log.entity_type,
        "entity_id": log.entity_id,
        "payload": log.payload or {},
        "created_at": serialize_datetime(log.created_at),
    }
