"""
Signed session credential.

The session is a HS256 JWT issued by flask-jwt-extended and carried in the
http-only ``session`` cookie. Its subject is the user id; the role and tenant
scope travel as additional claims so authorization never needs a lookup.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from flask import current_app
from flask_jwt_extended import (
    create_access_token,
    get_jwt,
    set_access_cookies,
    unset_jwt_cookies,
    verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    name: Optional[str]
    role: str
    tenant_id: Optional[str]
    expires: datetime

    def to_dict(self):
        return {
            "user": {
                "id": self.user_id,
                "email": self.email,
                "name": self.name,
                "role": self.role,
                "tenant_id": self.tenant_id,
            },
            "expires": self.expires.isoformat(),
        }


def create_session_token(user) -> str:
    return create_access_token(
        identity=user.id,
        additional_claims={
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "tenant_id": user.tenant_id,
        },
    )


def issue_session(response, user):
    """Attach a fresh session cookie for `user` to `response`."""
    token = create_session_token(user)
    max_age = int(current_app.config["JWT_ACCESS_TOKEN_EXPIRES"].total_seconds())
    set_access_cookies(response, token, max_age=max_age)
    return response


def clear_session(response):
    unset_jwt_cookies(response)
    return response


def get_session() -> Optional[Session]:
    """
    Resolve the caller's session from the request cookie.

    Missing, malformed, tampered and expired tokens all resolve to None.
    """
    try:
        verify_jwt_in_request(optional=True)
        claims = get_jwt()
    except (JWTExtendedException, PyJWTError):
        return None

    if not claims:
        return None

    try:
        return Session(
            user_id=str(claims["sub"]),
            email=claims["email"],
            name=claims.get("name"),
            role=claims["role"],
            tenant_id=claims.get("tenant_id"),
            expires=datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        return None
