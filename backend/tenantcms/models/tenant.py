from tenantcms.extensions import db
from .base import BaseModel


class Tenant(BaseModel):
    __tablename__ = "tenants"

    # Basic info
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    domain = db.Column(db.String(255), unique=True, nullable=False, index=True)
    domains = db.Column(db.JSON, nullable=False, default=list)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Secret used by the static-site generator against the public API
    api_key = db.Column(db.String(64), unique=True, nullable=False, index=True)

    # Display settings (logo, primary_color, description, ...)
    settings = db.Column(db.JSON, nullable=False, default=dict)

    # "owner/repo" of the site's build workflow
    github_repo = db.Column(db.String(255), nullable=True)

    pages = db.relationship("Page", back_populates="tenant", lazy="dynamic")
    users = db.relationship("User", back_populates="tenant", lazy="dynamic")
    deployments = db.relationship("Deployment", back_populates="tenant", lazy="dynamic")

    def setting(self, key, default=None):
        return (self.settings or {}).get(key, default)
