from .common import serialize_datetime


def normalize_user(user, include_tenant=False):
    # password_hash never leaves the model
    data = {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "tenant_id": user.tenant_id,
        "is_active": user.is_active,
        "last_login_at": serialize_datetime(user.last_login_at),
        "created_at": serialize_datetime(user.created_at),
    }
    if include_tenant:
        data["tenant"] = (
            {"name": user.tenant.name, "domain": user.tenant.domain} if user.tenant else None
        )
    return data
