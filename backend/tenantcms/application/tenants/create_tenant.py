import logging
from typing import Optional

from tenantcms.domain.content import encode_content
from tenantcms.errors import Conflict, ValidationError
from tenantcms.extensions import db
from tenantcms.models.base import utc_now
from tenantcms.models.page import Page, PageStatus
from tenantcms.models.tenant import Tenant
from tenantcms.schemas.tenants import TenantCreate
from tenantcms.utils.api_keys import generate_api_key
from tenantcms.utils.audit import log_action
from tenantcms.utils.text import slugify
from tenantcms.utils.transaction import transactional

logger = logging.getLogger(__name__)

INDEX_SLUG = "index"
HOME_TEMPLATE = "home"


def create_tenant(*, data: TenantCreate, actor_id: Optional[str]) -> Tenant:
    """
    Create a tenant, then its index page.

    The index page is written in a second transaction; if it fails the
    tenant stays and the failure is logged.
    """
    slug = slugify(data.slug or data.name)
    if not slug:
        raise ValidationError("slug: could not derive a slug from the name")

    if Tenant.query.filter_by(slug=slug).first():
        raise Conflict("A tenant with this slug already exists")

    if Tenant.query.filter_by(domain=data.domain).first():
        raise Conflict("A tenant with this domain already exists")

    tenant = Tenant()
    tenant.name = data.name
    tenant.slug = slug
    tenant.domain = data.domain
    tenant.domains = list(data.domains)
    tenant.settings = data.settings_dict()
    tenant.github_repo = data.github_repo
    tenant.is_active = True
    tenant.api_key = generate_api_key()

    with transactional("A tenant with this slug or domain already exists"):
        db.session.add(tenant)
        db.session.flush()
        log_action(
            tenant_id=tenant.id,
            action="tenant.create",
            entity_type="tenant",
            entity_id=tenant.id,
            payload={"slug": tenant.slug, "domain": tenant.domain},
            actor_id=actor_id,
        )

    logger.info("Tenant %s created (%s)", tenant.slug, tenant.domain)

    try:
        create_index_page(tenant, author_id=actor_id)
    except Exception:
        logger.exception("Index page for tenant %s could not be created", tenant.slug)

    return tenant


def create_index_page(tenant: Tenant, *, author_id: Optional[str]) -> Page:
    description = tenant.setting("description") or f"Welcome to {tenant.name}"

    page = Page()
    page.tenant_id = tenant.id
    page.slug = INDEX_SLUG
    page.title = "Home"
    page.description = description
    page.content = encode_content({
        "html": f"<h1>Welcome to {tenant.name}!</h1><p>This is the home page.</p>",
    })
    page.seo = {}
    page.status = PageStatus.PUBLISHED.value
    page.template = HOME_TEMPLATE
    page.author_id = author_id
    page.published_at = utc_now()

    with transactional():
        db.session.add(page)

    return page
