from flask import g, jsonify

from tenantcms.application.tenants.create_tenant import create_tenant as create_tenant_service
from tenantcms.application.tenants.queries import get_visible_tenant, tenant_counts, visible_tenants
from tenantcms.application.tenants.update_tenant import update_tenant as update_tenant_service
from tenantcms.auth.policy import can_view_secrets
from tenantcms.normalizers.tenant import normalize_tenant
from tenantcms.schemas.common import parse_body
from tenantcms.schemas.tenants import TenantCreate, TenantUpdate
from tenantcms.utils.decorators import session_required, super_admin_required
from . import v1_bp


def _serialize(tenant, counts=None):
    return normalize_tenant(
        tenant,
        include_api_key=can_view_secrets(g.session, tenant.id),
        counts=counts,
    )


@v1_bp.route("/tenants", methods=["GET"])
@session_required
def list_tenants():
    tenants = visible_tenants(g.session)
    counts = tenant_counts([t.id for t in tenants])
    return jsonify({
        "tenants": [_serialize(t, counts[t.id]) for t in tenants]
    }), 200


@v1_bp.route("/tenants", methods=["POST"])
@super_admin_required
def create_tenant():
    data = parse_body(TenantCreate)
    tenant = create_tenant_service(data=data, actor_id=g.session.user_id)
    return jsonify({"success": True, "tenant": _serialize(tenant)}), 201


@v1_bp.route("/tenants/<tenant_id>", methods=["GET"])
@session_required
def get_tenant(tenant_id):
    tenant = get_visible_tenant(g.session, tenant_id)
    counts = tenant_counts([tenant.id])[tenant.id]
    return jsonify({"tenant": _serialize(tenant, counts)}), 200


@v1_bp.route("/tenants/<tenant_id>", methods=["PUT"])
@super_admin_required
def update_tenant(tenant_id):
    data = parse_body(TenantUpdate)
    tenant = update_tenant_service(tenant_id=tenant_id, data=data, actor_id=g.session.user_id)
    return jsonify({"success": True, "tenant": _serialize(tenant)}), 200
