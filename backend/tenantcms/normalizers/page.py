from tenantcms.domain.content import decode_content, unwrap_news
from tenantcms.models.page import PageStatus
from .common import serialize_datetime


def _ordered(pages):
    return sorted(pages, key=lambda p: (p.order, p.title))


def normalize_page_link(page, include_order=False):
    data = {"slug": page.slug, "title": page.title}
    if include_order:
        data["order"] = page.order
    return data


def published_children(page):
    return _ordered(c for c in page.children if c.status == PageStatus.PUBLISHED.value)


def normalize_page(page, admin=False):
    """
    Page as JSON.

    The admin shape mirrors the row; the public shape decodes the content
    document and links the parent and published children.
    """
    data = {
        "id": page.id,
        "slug": page.slug,
        "title": page.title,
        "description": page.description,
        "content": decode_content(page.content),
        "seo": page.seo or {},
        "template": page.template,
        "order": page.order,
        "published_at": serialize_datetime(page.published_at),
        "updated_at": serialize_datetime(page.updated_at),
    }

    if admin:
        data.update({
            "tenant_id": page.tenant_id,
            "status": page.status,
            "parent_id": page.parent_id,
            "author_id": page.author_id,
            "created_at": serialize_datetime(page.created_at),
        })
        return data

    data["parent"] = normalize_page_link(page.parent) if page.parent else None
    data["children"] = [
        normalize_page_link(child, include_order=True) for child in published_children(page)
    ]
    return data


def normalize_menu_item(page):
    children = published_children(page)
    item = normalize_page_link(page, include_order=True)
    if children:
        item["children"] = [normalize_page_link(c, include_order=True) for c in children]
    return item


def normalize_news_item(page):
    content = unwrap_news(page.content)
    return {
        "id": page.id,
        "slug": page.slug,
        "title": page.title,
        "excerpt": page.description or "",
        "image": content["image"],
        "html": content["html"],
        "author": (page.author.name if page.author and page.author.name else None) or "Editorial",
        "published_at": serialize_datetime(page.published_at),
        "updated_at": serialize_datetime(page.updated_at),
    }
