import enum
from tenantcms.extensions import db
from .base import BaseModel, utc_now
from .tenant_mixin import TenantMixin


class DeploymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    BUILDING = "BUILDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class Deployment(BaseModel, TenantMixin):
    __tablename__ = "deployments"

    __table_args__ = (
        db.Index("ix_deployment_cursor", "tenant_id", "created_at", "id"),
    )

    status = db.Column(db.String(20), nullable=False, default=DeploymentStatus.PENDING.value, index=True)
    triggered_by = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    started_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utc_now)
    finished_at = db.Column(db.DateTime(timezone=True), nullable=True)
    build_log = db.Column(db.Text, nullable=True)
    duration = db.Column(db.Integer, nullable=True)

    tenant = db.relationship("Tenant", back_populates="deployments")

    @property
    def is_terminal(self):
        return self.status in (DeploymentStatus.SUCCESS.value, DeploymentStatus.FAILED.value)
