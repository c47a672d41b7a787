from sqlalchemy import func

from tenantcms.auth.policy import can_access_tenant, is_super_admin
from tenantcms.errors import NotFound
from tenantcms.extensions import db
from tenantcms.models.page import Page
from tenantcms.models.tenant import Tenant
from tenantcms.models.user import User


def visible_tenants(session):
    """SUPER_ADMIN sees every tenant by name; everyone else only their own."""
    if is_super_admin(session):
        return Tenant.query.order_by(Tenant.name.asc()).all()
    if session.tenant_id:
        return Tenant.query.filter_by(id=session.tenant_id).all()
    return []


def get_visible_tenant(session, tenant_id):
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is None or not can_access_tenant(session, tenant.id):
        raise NotFound("Tenant not found")
    return tenant


def tenant_counts(tenant_ids):
    """{tenant_id: {"pages": n, "users": n}} in two grouped queries."""
    counts = {tid: {"pages": 0, "users": 0} for tid in tenant_ids}
    if not tenant_ids:
        return counts

    for model, key in ((Page, "pages"), (User, "users")):
        rows = (
            db.session.query(model.tenant_id, func.count(model.id))
            .filter(model.tenant_id.in_(list(tenant_ids)))
            .group_by(model.tenant_id)
            .all()
        )
        for tenant_id, count in rows:
            counts[tenant_id][key] = count

    return counts
