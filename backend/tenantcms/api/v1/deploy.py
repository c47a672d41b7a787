from flask import current_app, g, jsonify, request

from tenantcms.auth.policy import can_access_tenant, require_tenant
from tenantcms.errors import NotFound, ValidationError
from tenantcms.extensions import db
from tenantcms.models.deployment import Deployment
from tenantcms.normalizers.deployment import normalize_deployment
from tenantcms.normalizers.pagination import normalize_pagination
from tenantcms.schemas.common import parse_body
from tenantcms.schemas.deployments import BuildCallback, DeployRequest
from tenantcms.services.deployments import verify_webhook_secret
from tenantcms.utils.decorators import session_required
from tenantcms.utils.pagination import apply_cursor, cursor_args, paginate_cursor
from . import v1_bp


def deployment_manager():
    return current_app.extensions["deployments"]


@v1_bp.route("/deploy", methods=["POST"])
@session_required
def trigger_deploy():
    data = parse_body(DeployRequest)
    require_tenant(g.session, data.tenant_id)

    deployment = deployment_manager().trigger_deploy(data.tenant_id, g.session.user_id)
    return jsonify({"success": True, "deployment_id": deployment.id}), 202


@v1_bp.route("/deploy/callback", methods=["POST"])
def build_callback():
    # secret first: an unauthenticated caller learns nothing about the body
    verify_webhook_secret(request.headers.get("X-Webhook-Secret"))

    data = parse_body(BuildCallback)
    deployment = deployment_manager().handle_build_callback(
        data.deployment_id,
        data.status,
        build_log=data.build_log,
        duration=data.duration,
    )
    return jsonify({"success": True, "deployment": normalize_deployment(deployment)}), 200


@v1_bp.route("/deployments", methods=["GET"])
@session_required
def list_deployments():
    tenant_id = request.args.get("tenant_id") or g.session.tenant_id
    if not tenant_id:
        raise ValidationError("tenant_id: is required")
    require_tenant(g.session, tenant_id)

    cursor, direction, limit = cursor_args()

    query = Deployment.for_tenant(tenant_id)
    if status := request.args.get("status"):
        query = query.filter(Deployment.status == status)

    query = apply_cursor(query, model=Deployment, cursor=cursor, direction=direction)
    items, meta = paginate_cursor(query, model=Deployment, limit=limit, direction=direction, cursor=cursor)

    return jsonify(normalize_pagination(items, normalize_deployment, cursor=meta)), 200


@v1_bp.route("/deployments/<deployment_id>", methods=["GET"])
@session_required
def get_deployment(deployment_id):
    deployment = db.session.get(Deployment, deployment_id)
    if deployment is None or not can_access_tenant(g.session, deployment.tenant_id):
        raise NotFound("Deployment not found")
    return jsonify({"deployment": normalize_deployment(deployment)}), 200
