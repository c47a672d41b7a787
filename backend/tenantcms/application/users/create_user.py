from tenantcms.auth.policy import can_assign_role, can_manage_users
from tenantcms.errors import Conflict, Forbidden, NotFound
from tenantcms.extensions import db
from tenantcms.models.tenant import Tenant
from tenantcms.models.user import User
from tenantcms.schemas.users import UserCreate
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional

EMAIL_TAKEN = "A user with this email already exists"


def create_user(*, session, data: UserCreate) -> User:
    if not can_manage_users(session, data.tenant_id):
        raise Forbidden()

    if not can_assign_role(session, data.role):
        raise Forbidden("You cannot assign this role")

    if db.session.get(Tenant, data.tenant_id) is None:
        raise NotFound("Tenant not found")

    if User.query.filter_by(email=data.email).first():
        raise Conflict(EMAIL_TAKEN)

    user = User()
    user.email = data.email
    user.name = data.name
    user.role = data.role
    user.tenant_id = data.tenant_id
    user.is_active = True
    user.set_password(data.password)

    with transactional(EMAIL_TAKEN):
        db.session.add(user)
        db.session.flush()
        log_action(
            tenant_id=user.tenant_id,
            action="user.create",
            entity_type="user",
            entity_id=user.id,
            payload={"email": user.email, "role": user.role},
        )

    return user
