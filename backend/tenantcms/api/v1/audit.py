from flask import g, jsonify, request

from tenantcms.auth.policy import can_manage_users
from tenantcms.errors import Forbidden, ValidationError
from tenantcms.models.audit_log import AuditLog
from tenantcms.normalizers.audit import normalize_audit_log
from tenantcms.normalizers.pagination import normalize_pagination
from tenantcms.utils.decorators import session_required
from tenantcms.utils.pagination import apply_cursor, cursor_args, paginate_cursor
from . import v1_bp


@v1_bp.route("/audit", methods=["GET"])
@session_required
def list_audit_logs():
    tenant_id = request.args.get("tenant_id") or g.session.tenant_id
    if not tenant_id:
        raise ValidationError("tenant_id: is required")
    if not can_manage_users(g.session, tenant_id):
        raise Forbidden()

    cursor, direction, limit = cursor_args()

    query = AuditLog.for_tenant(tenant_id)

    # Optional filters
    if action := request.args.get("action"):
        query = query.filter(AuditLog.action == action)

    if entity_type := request.args.get("entity_type"):
        query = query.filter(AuditLog.entity_type == entity_type)

    if entity_id := request.args.get("entity_id"):
        query = query.filter(AuditLog.entity_id == entity_id)

    if actor_id := request.args.get("actor_id"):
        query = query.filter(AuditLog.actor_id == actor_id)

    query = apply_cursor(query, model=AuditLog, cursor=cursor, direction=direction)
    logs, meta = paginate_cursor(query, model=AuditLog, limit=limit, direction=direction, cursor=cursor)

    return jsonify(normalize_pagination(logs, normalize_audit_log, cursor=meta)), 200
