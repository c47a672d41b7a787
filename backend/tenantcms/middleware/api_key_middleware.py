from flask import current_app, g, request

from tenantcms.errors import Unauthenticated
from tenantcms.models.tenant import Tenant

API_KEY_HEADER = "X-API-Key"


def api_key_middleware(bp):
    """
    Resolve `X-API-Key` to an active tenant for every request on `bp`.

    Unknown keys and inactive tenants get the same answer.
    """
    @bp.before_request
    def load_tenant_from_api_key():
        api_key = request.headers.get(API_KEY_HEADER)
        if not api_key:
            raise Unauthenticated("Missing API key")

        tenant = Tenant.query.filter_by(api_key=api_key).first()
        if tenant is None or not tenant.is_active:
            raise Unauthenticated("Invalid API key")

        g.current_tenant = tenant

    @bp.after_request
    def add_cache_headers(response):
        if response.status_code == 200:
            max_age = current_app.config.get("PUBLIC_CACHE_SECONDS", 60)
            response.headers["Cache-Control"] = f"public, max-age={max_age}"
            response.vary.add(API_KEY_HEADER)
        return response
