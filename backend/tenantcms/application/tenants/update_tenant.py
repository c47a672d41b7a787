from typing import Optional

from tenantcms.errors import Conflict, NotFound, ValidationError
from tenantcms.extensions import db
from tenantcms.models.tenant import Tenant
from tenantcms.schemas.tenants import TenantUpdate
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional

ALLOWED_UPDATE_FIELDS = ("name", "domain", "domains", "settings", "is_active", "github_repo")


def update_tenant(*, tenant_id: str, data: TenantUpdate, actor_id: Optional[str]) -> Tenant:
    """Partial update. Deactivation (`is_active=False`) is the removal path."""
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFound("Tenant not found")

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No valid fields provided for update")

    if "domain" in fields and fields["domain"] != tenant.domain:
        taken = Tenant.query.filter(Tenant.domain == fields["domain"], Tenant.id != tenant.id).first()
        if taken:
            raise Conflict("A tenant with this domain already exists")

    changed = []
    with transactional("A tenant with this domain already exists"):
        for field in ALLOWED_UPDATE_FIELDS:
            if field not in fields:
                continue
            value = fields[field]
            if field == "settings":
                value = {k: v for k, v in value.items() if v is not None}
            if getattr(tenant, field) != value:
                setattr(tenant, field, value)
                changed.append(field)

        log_action(
            tenant_id=tenant.id,
            action="tenant.update",
            entity_type="tenant",
            entity_id=tenant.id,
            payload={"fields": changed},
            actor_id=actor_id,
        )

    return tenant
