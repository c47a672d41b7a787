from .common import serialize_datetime


def normalize_tenant(tenant, *, include_api_key=False, counts=None):
    data = {
        "id": tenant.id,
        "name": tenant.name,
        "slug": tenant.slug,
        "domain": tenant.domain,
        "domains": tenant.domains or [],
        "settings": tenant.settings or {},
        "is_active": tenant.is_active,
        "github_repo": tenant.github_repo,
        "created_at": serialize_datetime(tenant.created_at),
        "updated_at": serialize_datetime(tenant.updated_at),
    }
    if include_api_key:
        data["api_key"] = tenant.api_key
    if counts is not None:
        data["counts"] = counts
    return data


def normalize_public_tenant(tenant, include_settings=True):
    data = {"name": tenant.name, "domain": tenant.domain}
    if include_settings:
        data["settings"] = tenant.settings or {}
    return data
