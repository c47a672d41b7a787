from flask import g, jsonify, request

from tenantcms.application.pages.create_page import create_page as create_page_service
from tenantcms.application.pages.delete_page import delete_page as delete_page_service
from tenantcms.application.pages.queries import get_page_in_scope, list_pages as list_pages_query
from tenantcms.application.pages.update_page import update_page as update_page_service
from tenantcms.normalizers.page import normalize_page
from tenantcms.schemas.common import parse_body
from tenantcms.schemas.pages import PageCreate, PageUpdate
from tenantcms.utils.decorators import session_required
from tenantcms.utils.optimistic_lock import enforce_optimistic_lock
from . import v1_bp


@v1_bp.route("/pages", methods=["GET"])
@session_required
def list_pages():
    pages = list_pages_query(
        g.session,
        tenant_id=request.args.get("tenant_id"),
        status=request.args.get("status"),
        template=request.args.get("template"),
    )
    return jsonify({"pages": [normalize_page(p, admin=True) for p in pages]}), 200


@v1_bp.route("/pages", methods=["POST"])
@session_required
def create_page():
    data = parse_body(PageCreate)
    page = create_page_service(session=g.session, data=data)
    return jsonify({"success": True, "page": normalize_page(page, admin=True)}), 201


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@session_required
def get_page(page_id):
    page = get_page_in_scope(g.session, page_id)
    return jsonify({"page": normalize_page(page, admin=True)}), 200


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
@session_required
def update_page(page_id):
    page = get_page_in_scope(g.session, page_id)
    enforce_optimistic_lock(page)

    data = parse_body(PageUpdate)
    page = update_page_service(session=g.session, page=page, data=data)
    return jsonify({"success": True, "page": normalize_page(page, admin=True)}), 200


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
@session_required
def delete_page(page_id):
    page = get_page_in_scope(g.session, page_id)
    delete_page_service(session=g.session, page=page)
    return jsonify({"success": True}), 200
