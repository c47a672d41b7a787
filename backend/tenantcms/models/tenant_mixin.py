from sqlalchemy.orm import declared_attr

from tenantcms.extensions import db


class TenantMixin:
    """Rows owned by exactly one tenant."""

    @declared_attr
    def tenant_id(cls):
        return db.Column(
            db.String(36),
            db.ForeignKey("tenants.id"),
            nullable=False,
            index=True,
        )

    @classmethod
    def for_tenant(cls, tenant_id):
        return cls.query.filter(cls.tenant_id == tenant_id)
