from flask import Blueprint, g, jsonify, request

from tenantcms.application.pages.queries import navigation, public_pages, published_news
from tenantcms.errors import NotFound
from tenantcms.middleware.api_key_middleware import api_key_middleware
from tenantcms.normalizers.page import normalize_menu_item, normalize_news_item, normalize_page
from tenantcms.normalizers.tenant import normalize_public_tenant
from tenantcms.utils.pagination import parse_limit

public_bp = Blueprint("public", __name__)
api_key_middleware(public_bp)


@public_bp.route("/pages", methods=["GET"])
def pages():
    tenant = g.current_tenant
    slug = request.args.get("slug")

    rows = public_pages(
        tenant,
        slug=slug,
        template=request.args.get("template"),
        status=request.args.get("status"),
    )

    if slug and not rows:
        raise NotFound("Page not found")

    items = [normalize_page(p) for p in rows]
    return jsonify({
        "tenant": normalize_public_tenant(tenant),
        "pages": items[0] if slug else items,
    }), 200


@public_bp.route("/menu", methods=["GET"])
def menu():
    rows = navigation(g.current_tenant)
    return jsonify({"menu": [normalize_menu_item(p) for p in rows]}), 200


@public_bp.route("/news", methods=["GET"])
def news():
    tenant = g.current_tenant
    slug = request.args.get("slug")
    limit = parse_limit(request.args.get("limit"))

    rows = published_news(tenant, slug=slug, limit=limit)
    if slug and not rows:
        raise NotFound("News not found")

    items = [normalize_news_item(p) for p in rows]
    return jsonify({
        "tenant": normalize_public_tenant(tenant, include_settings=False),
        "news": items[0] if slug else items,
        "total": len(items),
    }), 200
