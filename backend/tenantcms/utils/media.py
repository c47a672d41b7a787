import os
import posixpath
import re
import time
import unicodedata
import uuid

from flask import current_app

from tenantcms.errors import ValidationError

ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
DEFAULT_EXTENSION = "jpg"
MAX_NAME_LENGTH = 50


def sanitize_filename(filename):
    """Base name without extension, folded to ``[a-z0-9-]`` and truncated."""
    stem = os.path.splitext(os.path.basename(filename or ""))[0]
    stem = stem.lower().replace("ł", "l")
    stem = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii")
    stem = re.sub(r"[^a-z0-9]", "-", stem)
    stem = re.sub(r"-+", "-", stem)
    return stem[:MAX_NAME_LENGTH]


def file_extension(filename):
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext:
            return ext
    return DEFAULT_EXTENSION


def build_media_key(tenant_id, filename, now_ms=None):
    """``{tenant_id}/{epoch_ms}-{uuid8}-{sanitized}.{ext}``, returned with the bare file name."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    file_name = f"{timestamp}-{uuid.uuid4().hex[:8]}-{sanitize_filename(filename)}.{file_extension(filename)}"
    return f"{tenant_id}/{file_name}", file_name


def validate_upload(content_type, size):
    if content_type not in ALLOWED_CONTENT_TYPES:
        allowed = ", ".join(sorted(ALLOWED_CONTENT_TYPES))
        raise ValidationError(f"Invalid file type. Allowed: {allowed}")

    max_size = current_app.config["MAX_UPLOAD_SIZE"]
    if size > max_size:
        raise ValidationError(f"File too large. Maximum size: {max_size // (1024 * 1024)}MB")


def save_file(store, tenant_id, file):
    """Validate a werkzeug `FileStorage` and hand it to `store`."""
    body = file.read()
    content_type = file.mimetype or file.content_type
    validate_upload(content_type, len(body))

    key, file_name = build_media_key(tenant_id, file.filename)
    url = store.put(key, body, content_type)
    current_app.logger.info("Stored media %s (%d bytes)", key, len(body))

    return {
        "url": url,
        "file_name": file_name,
        "original_name": file.filename,
        "size": len(body),
        "type": content_type,
    }


def normalize_media_key(key):
    """Canonical ``{tenant_id}/{file}`` key, or None for anything that could leave its prefix."""
    if not key or key.startswith("/") or "\\" in key:
        return None
    normalized = posixpath.normpath(key)
    if normalized != key or ".." in normalized.split("/"):
        return None
    return normalized


def tenant_of_key(key):
    key = normalize_media_key(key)
    return key.split("/", 1)[0] if key and "/" in key else None


def delete_file(store, key):
    return store.delete(key)
