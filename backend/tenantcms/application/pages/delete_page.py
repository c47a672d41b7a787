from tenantcms.auth.policy import can_edit_pages
from tenantcms.errors import Forbidden
from tenantcms.extensions import db
from tenantcms.models.page import Page
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional
from .auto_deploy import maybe_auto_deploy


def delete_page(*, session, page: Page) -> None:
    """Delete a page; its children move to the top level."""
    if not can_edit_pages(session, page.tenant_id):
        raise Forbidden()

    was_published = page.is_published
    tenant_id = page.tenant_id

    with transactional():
        for child in list(page.children):
            child.parent_id = None
            child.touch()

        log_action(
            tenant_id=tenant_id,
            action="page.delete",
            entity_type="page",
            entity_id=page.id,
            payload={"slug": page.slug, "title": page.title},
        )
        db.session.delete(page)

    if was_published:
        maybe_auto_deploy(tenant_id, session.user_id)
