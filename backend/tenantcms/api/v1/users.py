from flask import g, jsonify, request

from tenantcms.application.users.create_user import create_user as create_user_service
from tenantcms.application.users.delete_user import delete_user as delete_user_service
from tenantcms.application.users.queries import get_user as get_user_query
from tenantcms.application.users.queries import get_user_in_scope, list_users as list_users_query
from tenantcms.application.users.update_user import update_user as update_user_service
from tenantcms.auth.policy import is_super_admin
from tenantcms.normalizers.user import normalize_user
from tenantcms.schemas.common import parse_body
from tenantcms.schemas.users import UserCreate, UserUpdate
from tenantcms.utils.decorators import session_required
from . import v1_bp


@v1_bp.route("/users", methods=["GET"])
@session_required
def list_users():
    users = list_users_query(g.session, tenant_id=request.args.get("tenant_id"))
    include_tenant = is_super_admin(g.session)
    return jsonify({
        "users": [normalize_user(u, include_tenant=include_tenant) for u in users]
    }), 200


@v1_bp.route("/users", methods=["POST"])
@session_required
def create_user():
    data = parse_body(UserCreate)
    user = create_user_service(session=g.session, data=data)
    return jsonify({"success": True, "user": normalize_user(user)}), 201


@v1_bp.route("/users/<user_id>", methods=["GET"])
@session_required
def get_user(user_id):
    user = get_user_query(g.session, user_id)
    return jsonify({"user": normalize_user(user)}), 200


@v1_bp.route("/users/<user_id>", methods=["PUT"])
@session_required
def update_user(user_id):
    user = get_user_in_scope(g.session, user_id)
    data = parse_body(UserUpdate)
    user = update_user_service(session=g.session, user=user, data=data)
    return jsonify({"success": True, "user": normalize_user(user)}), 200


@v1_bp.route("/users/<user_id>", methods=["DELETE"])
@session_required
def delete_user(user_id):
    user = get_user_in_scope(g.session, user_id)
    delete_user_service(session=g.session, user=user)
    return jsonify({"success": True}), 200
