from tenantcms.auth.policy import can_access_tenant
from tenantcms.errors import Forbidden, NotFound, ValidationError
from tenantcms.extensions import db
from tenantcms.models.page import Page, PageStatus, NEWS_TEMPLATE

PUBLISHED = PageStatus.PUBLISHED.value


def get_page_in_scope(session, page_id):
    """A page outside the caller's tenant is reported exactly like a missing one."""
    page = db.session.get(Page, page_id)
    if page is None or not can_access_tenant(session, page.tenant_id):
        raise NotFound("Page not found")
    return page


def slug_taken(tenant_id, slug, exclude_id=None):
    query = Page.for_tenant(tenant_id).filter(Page.slug == slug)
    if exclude_id is not None:
        query = query.filter(Page.id != exclude_id)
    return db.session.query(query.exists()).scalar()


def ordered(query):
    return query.order_by(Page.order.asc(), Page.title.asc())


def list_pages(session, *, tenant_id=None, status=None, template=None):
    tenant_id = tenant_id or session.tenant_id
    if not tenant_id:
        raise ValidationError("tenant_id: is required")
    if not can_access_tenant(session, tenant_id):
        raise Forbidden()

    query = Page.for_tenant(tenant_id)
    if status:
        query = query.filter(Page.status == status)
    if template:
        query = query.filter(Page.template == template)
    return ordered(query).all()


# -------------------------------------------------
# Public reads (tenant already resolved from the API key)
# -------------------------------------------------
def public_pages(tenant, *, slug=None, template=None, status=None):
    query = Page.for_tenant(tenant.id).filter(
        Page.status == (status or PUBLISHED),
    )
    if slug:
        query = query.filter(Page.slug == slug)
    if template:
        query = query.filter(Page.template == template)
    return ordered(query).all()


def navigation(tenant):
    """Top-level published pages; children are filtered when normalized."""
    query = Page.for_tenant(tenant.id).filter(
        Page.status == PUBLISHED,
        Page.parent_id.is_(None),
    )
    return ordered(query).all()


def published_news(tenant, *, slug=None, limit=20):
    query = Page.for_tenant(tenant.id).filter(
        Page.template == NEWS_TEMPLATE,
        Page.status == PUBLISHED,
    )
    if slug:
        query = query.filter(Page.slug == slug)
        limit = 1
    return (
        query.order_by(Page.published_at.desc(), Page.id.desc())
        .limit(limit)
        .all()
    )
