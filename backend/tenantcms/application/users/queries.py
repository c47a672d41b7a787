from tenantcms.auth.policy import can_manage_users, is_super_admin
from tenantcms.errors import Forbidden, NotFound
from tenantcms.extensions import db
from tenantcms.models.user import Role, User


def get_user_in_scope(session, user_id):
    """Users of other tenants (and SUPER_ADMIN accounts) are invisible to tenant users."""
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    if not is_super_admin(session) and (user.tenant_id is None or user.tenant_id != session.tenant_id):
        raise NotFound("User not found")
    return user


def get_user(session, user_id):
    user = get_user_in_scope(session, user_id)
    if user.id != session.user_id and not can_manage_users(session, user.tenant_id):
        raise Forbidden()
    return user


def list_users(session, *, tenant_id=None):
    query = User.query

    if is_super_admin(session):
        if tenant_id:
            query = query.filter(User.tenant_id == tenant_id)
    elif session.role == Role.ADMIN.value and session.tenant_id:
        if tenant_id and tenant_id != session.tenant_id:
            raise Forbidden()
        query = query.filter(User.tenant_id == session.tenant_id)
    else:
        raise Forbidden()

    return query.order_by(User.created_at.desc(), User.email.asc()).all()
