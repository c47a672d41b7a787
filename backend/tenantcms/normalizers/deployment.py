from .common import serialize_datetime


def normalize_deployment(deployment):
    return {
        "id": deployment.id,
        "tenant_id": deployment.tenant_id,
        "status": deployment.status,
        "triggered_by": deployment.triggered_by,
        "started_at": serialize_datetime(deployment.started_at),
        "finished_at": serialize_datetime(deployment.finished_at),
        "build_log": deployment.build_log,
        "duration": deployment.duration,
        "created_at": serialize_datetime(deployment.created_at),
    }
