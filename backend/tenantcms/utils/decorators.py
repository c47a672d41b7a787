from functools import wraps

from flask import g

from tenantcms.auth.policy import is_super_admin
from tenantcms.auth.session import get_session
from tenantcms.errors import Forbidden, Unauthenticated


def session_required(fn):
    """Resolve the session cookie into `g.session` or answer 401."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        session = get_session()
        if session is None:
            raise Unauthenticated()
        g.session = session
        return fn(*args, **kwargs)
    return wrapper


def super_admin_required(fn):
    @wraps(fn)
    @session_required
    def wrapper(*args, **kwargs):
        if not is_super_admin(g.session):
            raise Forbidden()
        return fn(*args, **kwargs)
    return wrapper
