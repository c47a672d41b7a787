from flask import current_app, g, jsonify, request

from tenantcms.auth.policy import require_tenant
from tenantcms.errors import NotFound, ValidationError
from tenantcms.extensions import db
from tenantcms.models.tenant import Tenant
from tenantcms.utils.decorators import session_required
from tenantcms.utils.media import delete_file, normalize_media_key, save_file, tenant_of_key
from . import v1_bp


def media_store():
    return current_app.extensions["media_store"]


@v1_bp.route("/upload", methods=["POST"])
@session_required
def upload_media():
    file = request.files.get("file")
    if file is None or not file.filename:
        raise ValidationError("file: no file provided")

    tenant_id = request.form.get("tenant_id")
    if not tenant_id:
        raise ValidationError("tenant_id: is required")

    require_tenant(g.session, tenant_id)

    if db.session.get(Tenant, tenant_id) is None:
        raise NotFound("Tenant not found")

    stored = save_file(media_store(), tenant_id, file)
    return jsonify({"success": True, **stored}), 201


@v1_bp.route("/upload", methods=["DELETE"])
@session_required
def delete_media():
    url = request.args.get("url")
    if not url:
        raise ValidationError("url: is required")

    key = normalize_media_key(media_store().key_from_url(url))
    tenant_id = tenant_of_key(key)
    if not tenant_id:
        raise ValidationError("url: not a media URL")

    require_tenant(g.session, tenant_id)

    try:
        deleted = delete_file(media_store(), key)
    except ValueError as exc:
        raise ValidationError("url: not a media URL") from exc
    if not deleted:
        raise NotFound("File not found")
    return jsonify({"success": True}), 200
