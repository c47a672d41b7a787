from tenantcms.auth.policy import can_edit_user
from tenantcms.errors import Conflict, Forbidden, ValidationError
from tenantcms.models.user import User
from tenantcms.schemas.users import UserUpdate
from tenantcms.utils.audit import log_action
from tenantcms.utils.transaction import transactional
from .create_user import EMAIL_TAKEN

PLAIN_FIELDS = ("email", "name", "role", "is_active")


def update_user(*, session, user: User, data: UserUpdate) -> User:
    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No valid fields provided for update")

    changes_active = "is_active" in fields and fields["is_active"] != user.is_active
    if not can_edit_user(
        session,
        user.id,
        user.tenant_id,
        user.role,
        new_role=fields.get("role"),
        changes_active=changes_active,
    ):
        raise Forbidden()

    if fields.get("role") not in (None, user.role) and user.tenant_id is None:
        raise ValidationError("role: a tenant is required for this role")

    if "email" in fields and fields["email"] != user.email:
        taken = User.query.filter(User.email == fields["email"], User.id != user.id).first()
        if taken:
            raise Conflict(EMAIL_TAKEN)

    with transactional(EMAIL_TAKEN):
        for field in PLAIN_FIELDS:
            if field in fields:
                setattr(user, field, fields[field])

        if "password" in fields:
            user.set_password(fields["password"])

        log_action(
            tenant_id=user.tenant_id,
            action="user.update",
            entity_type="user",
            entity_id=user.id,
            payload={"fields": sorted(fields)},
        )

    return user
