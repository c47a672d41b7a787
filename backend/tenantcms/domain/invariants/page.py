from tenantcms.errors import ValidationError

# Longest ancestor chain walked before giving up; guards against a cycle
# that slipped into storage before this check existed.
MAX_PAGE_DEPTH = 64


def assert_valid_parent(page, parent):
    """
    Guards the page tree.

    A page may not be its own parent or ancestor, and the parent must belong
    to the same tenant.
    """
    if parent is None:
        return

    if parent.tenant_id != page.tenant_id:
        raise ValidationError("parent_id: parent page not found")

    if page.id is not None and parent.id == page.id:
        raise ValidationError("parent_id: a page cannot be its own parent")

    node = parent
    for _ in range(MAX_PAGE_DEPTH):
        node = node.parent
        if node is None:
            return
        if page.id is not None and node.id == page.id:
            raise ValidationError("parent_id: a page cannot be nested under its own descendant")

    raise ValidationError("parent_id: page hierarchy too deep")
