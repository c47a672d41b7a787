from tenantcms.auth.policy import can_delete_user
from tenantcms.errors import Forbidden
from tenantcms.extensions import db
from tenantcms.models.user import User
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional


def delete_user(*, session, user: User) -> None:
    if user.id == session.user_id:
        raise Forbidden("You cannot delete your own account")

    if not can_delete_user(session, user.id, user.tenant_id, user.role):
        raise Forbidden()

    with transactional():
        log_action(
            tenant_id=user.tenant_id,
            action="user.delete",
            entity_type="user",
            entity_id=user.id,
            payload={"email": user.email, "role": user.role},
        )
        db.session.delete(user)
