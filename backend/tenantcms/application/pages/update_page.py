from tenantcms.auth.policy import can_edit_pages
from tenantcms.domain.content import encode_content
from tenantcms.errors import Conflict, Forbidden, ValidationError
from tenantcms.models.base import utc_now
from tenantcms.models.page import Page, PageStatus
from tenantcms.schemas.pages import PageUpdate
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional
from .auto_deploy import maybe_auto_deploy
from .create_page import SLUG_TAKEN, resolve_parent
from .queries import slug_taken

PLAIN_FIELDS = ("title", "slug", "description", "seo", "template", "order")


def update_page(*, session, page: Page, data: PageUpdate) -> Page:
    """
    Apply a partial update to a page the caller can already see.

    Design rules:
    - Only keys present in the body are applied; an empty body is rejected
    - published_at is stamped on the move into PUBLISHED, never reset
    - updated_at is stamped on every successful update
    """
    if not can_edit_pages(session, page.tenant_id):
        raise Forbidden()

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No valid fields provided for update")

    if "slug" in fields and fields["slug"] != page.slug:
        if slug_taken(page.tenant_id, fields["slug"], exclude_id=page.id):
            raise Conflict(SLUG_TAKEN)

    was_published = page.is_published

    with transactional(SLUG_TAKEN):
        for field in PLAIN_FIELDS:
            if field in fields:
                setattr(page, field, fields[field])

        if "content" in fields:
            page.content = encode_content(fields["content"])

        if "parent_id" in fields:
            parent = resolve_parent(page, fields["parent_id"])
            page.parent_id = parent.id if parent else None

        if "status" in fields:
            if fields["status"] == PageStatus.PUBLISHED.value and not was_published:
                page.published_at = utc_now()
            page.status = fields["status"]

        page.touch()

        log_action(
            tenant_id=page.tenant_id,
            action="page.update",
            entity_type="page",
            entity_id=page.id,
            payload={"fields": sorted(fields)},
        )

    if was_published or page.is_published:
        maybe_auto_deploy(page.tenant_id, session.user_id)

    return page
