from flask import g, jsonify

from tenantcms.application.auth.login import login as login_user
from tenantcms.auth.session import clear_session, issue_session
from tenantcms.normalizers.user import normalize_user
from tenantcms.schemas.auth import LoginRequest
from tenantcms.schemas.common import parse_body
from tenantcms.utils.decorators import session_required
from . import v1_bp


@v1_bp.route("/auth/login", methods=["POST"])
def login():
    data = parse_body(LoginRequest)
    user = login_user(email=data.email, password=data.password)

    response = jsonify({"success": True, "user": normalize_user(user)})
    issue_session(response, user)
    return response, 200


@v1_bp.route("/auth/logout", methods=["POST"])
def logout():
    response = jsonify({"success": True})
    clear_session(response)
    return response, 200


@v1_bp.route("/auth/session", methods=["GET"])
@session_required
def current_session():
    return jsonify(g.session.to_dict()), 200
