"""
Role/tenant authorization matrix.

Every function here is a pure function of the session and the target's
tenant/role. No I/O, no request state, no configuration toggles.
"""
from typing import Optional

from tenantcms.errors import Forbidden
from tenantcms.models.user import Role

PAGE_EDITOR_ROLES = {Role.ADMIN.value, Role.EDITOR.value}
PRIVILEGED_ROLES = {Role.SUPER_ADMIN.value, Role.ADMIN.value}


def is_super_admin(session) -> bool:
    return session is not None and session.role == Role.SUPER_ADMIN.value


def can_access_tenant(session, tenant_id: Optional[str]) -> bool:
    if session is None:
        return False
    if is_super_admin(session):
        return True
    return tenant_id is not None and session.tenant_id == tenant_id


def require_tenant(session, tenant_id: Optional[str]):
    if not can_access_tenant(session, tenant_id):
        raise Forbidden()
    return session


def can_edit_pages(session, tenant_id: Optional[str]) -> bool:
    if is_super_admin(session):
        return True
    return can_access_tenant(session, tenant_id) and session.role in PAGE_EDITOR_ROLES


def can_manage_users(session, tenant_id: Optional[str]) -> bool:
    if is_super_admin(session):
        return True
    return can_access_tenant(session, tenant_id) and session.role == Role.ADMIN.value


def can_view_secrets(session, tenant_id: Optional[str]) -> bool:
    """API keys are shown to super admins and the tenant's own admins."""
    return can_manage_users(session, tenant_id)


def can_assign_role(session, role: Optional[str]) -> bool:
    if role is None:
        return True
    if role in PRIVILEGED_ROLES:
        return is_super_admin(session)
    return session is not None


def can_edit_user(
    session,
    user_id: str,
    tenant_id: Optional[str],
    role: str,
    new_role: Optional[str] = None,
    changes_active: bool = False,
) -> bool:
    if session is None:
        return False

    if new_role == role:
        new_role = None

    is_self = session.user_id == user_id
    if is_self and (new_role is not None or changes_active):
        return False

    if is_super_admin(session):
        return True

    if not can_assign_role(session, new_role):
        return False

    if is_self:
        return True

    return can_manage_users(session, tenant_id) and role not in PRIVILEGED_ROLES


def can_delete_user(session, user_id: str, tenant_id: Optional[str], role: str) -> bool:
    if session is None or session.user_id == user_id:
        return False
    if is_super_admin(session):
        return True
    return can_manage_users(session, tenant_id) and role not in PRIVILEGED_ROLES
