from datetime import timezone

from dateutil.parser import parse, ParserError
from flask import request

from tenantcms.errors import Conflict, ValidationError


def normalize_ts(ts):
    """Treat naive datetimes as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity):
    """
    Honour an ``If-Unmodified-Since`` request header.

    Without the header the write proceeds unconditionally.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, OverflowError, ValueError) as exc:
        raise ValidationError("If-Unmodified-Since: invalid timestamp") from exc

    if entity.updated_at is None:
        return

    # HTTP dates carry whole seconds only
    server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        raise Conflict("Resource has been modified since it was read")
