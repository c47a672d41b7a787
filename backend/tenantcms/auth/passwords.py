from flask import current_app, has_app_context
from werkzeug.security import generate_password_hash, check_password_hash

DEFAULT_METHOD = "scrypt"


def hash_password(password: str) -> str:
    """One-way salted hash. The method (and its cost) is fixed per deployment."""
    method = DEFAULT_METHOD
    if has_app_context():
        method = current_app.config.get("PASSWORD_HASH_METHOD", DEFAULT_METHOD)
    return generate_password_hash(password, method=method)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return check_password_hash(password_hash, password)
    except (ValueError, TypeError):
        # unknown method or malformed hash
        return False
