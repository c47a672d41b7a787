from tenantcms.auth.policy import can_edit_pages
from tenantcms.domain.content import encode_content
from tenantcms.domain.invariants.page import assert_valid_parent
from tenantcms.errors import Conflict, Forbidden, NotFound, ValidationError
from tenantcms.extensions import db
from tenantcms.models.base import utc_now
from tenantcms.models.page import Page, PageStatus
from tenantcms.models.tenant import Tenant
from tenantcms.schemas.pages import PageCreate
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional
from .auto_deploy import maybe_auto_deploy
from .queries import slug_taken

SLUG_TAKEN = "A page with this slug already exists"


def resolve_parent(page, parent_id):
    if not parent_id:
        return None
    parent = db.session.get(Page, parent_id)
    if parent is None:
        raise ValidationError("parent_id: parent page not found")
    assert_valid_parent(page, parent)
    return parent


def create_page(*, session, data: PageCreate) -> Page:
    if not can_edit_pages(session, data.tenant_id):
        raise Forbidden()

    if db.session.get(Tenant, data.tenant_id) is None:
        raise NotFound("Tenant not found")

    if slug_taken(data.tenant_id, data.slug):
        raise Conflict(SLUG_TAKEN)

    page = Page()
    page.tenant_id = data.tenant_id
    page.title = data.title
    page.slug = data.slug
    page.description = data.description
    page.content = encode_content(data.content)
    page.seo = data.seo
    page.status = data.status
    page.template = data.template
    page.order = data.order
    page.author_id = session.user_id

    parent = resolve_parent(page, data.parent_id)
    page.parent_id = parent.id if parent else None

    if page.status == PageStatus.PUBLISHED.value:
        page.published_at = utc_now()

    with transactional(SLUG_TAKEN):
        db.session.add(page)
        db.session.flush()
        log_action(
            tenant_id=page.tenant_id,
            action="page.create",
            entity_type="page",
            entity_id=page.id,
            payload={"title": page.title, "slug": page.slug, "status": page.status},
        )

    if page.is_published:
        maybe_auto_deploy(page.tenant_id, session.user_id)

    return page
