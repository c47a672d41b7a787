import enum
from tenantcms.extensions import db
from .base import BaseModel
from .tenant_mixin import TenantMixin


class PageStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


NEWS_TEMPLATE = "news"


class Page(BaseModel, TenantMixin):
    __tablename__ = 'pages'

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)

    # JSON-encoded document; shape depends on the template
    content = db.Column(db.Text, nullable=False, default="{}")
    seo = db.Column(db.JSON(none_as_null=True), default=dict)

    status = db.Column(db.String(20), nullable=False, default=PageStatus.DRAFT.value, index=True)
    template = db.Column(db.String(50), nullable=False, default="default", index=True)
    order = db.Column(db.Integer, nullable=False, default=0)

    parent_id = db.Column(db.String(36), db.ForeignKey("pages.id"), nullable=True, index=True)
    author_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    published_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    __table_args__ = (
        db.UniqueConstraint("tenant_id", "slug", name="uq_page_slug_per_tenant"),
    )

    tenant = db.relationship("Tenant", back_populates="pages")
    author = db.relationship("User", foreign_keys=[author_id])
    parent = db.relationship("Page", remote_side="Page.id", back_populates="children")
    children = db.relationship("Page", back_populates="parent")

    @property
    def is_published(self):
        return self.status == PageStatus.PUBLISHED.value
