from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple, TypedDict, Type, Any

from flask import request
from sqlalchemy.orm import Query
from sqlalchemy.sql import or_, and_

from tenantcms.errors import ValidationError

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


class CursorMeta(TypedDict):
    has_more: bool
    next_cursor: Optional[str]
    prev_cursor: Optional[str]


def parse_limit(raw: Optional[str], *, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    """Parse a `limit` query value, clamped into 1..maximum."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("limit: must be an integer")
    if value <= 0:
        raise ValidationError("limit: must be greater than zero")
    return min(value, maximum)


def cursor_args() -> Tuple[Optional[str], str, int]:
    """Read (cursor, direction, limit) from the query string."""
    return (
        request.args.get("cursor"),
        request.args.get("direction", "next"),
        parse_limit(request.args.get("limit")),
    )


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    """
    Encode a cursor as ``ISO8601|<id>``.

    Timestamps are written without an offset so they compare the same way the
    database stores them.
    """
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")

    return f"{created_at.replace(tzinfo=None).isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    if not cursor or "|" not in cursor:
        raise ValidationError("cursor: invalid format")

    ts_str, row_id = cursor.split("|", 1)
    try:
        created_at = datetime.fromisoformat(ts_str)
    except ValueError as exc:
        raise ValidationError("cursor: invalid format") from exc
    return created_at.replace(tzinfo=None), row_id


def apply_cursor(
    query: Query,
    *,
    model: Type[Any],
    cursor: Optional[str],
    direction: str = "next",
) -> Query:
    """
    Filter `query` to the rows after (``next``) or before (``prev``) `cursor`.

    Ordering contract: ORDER BY created_at DESC, id DESC.
    """
    if not cursor:
        return query

    cursor_ts, cursor_id = decode_cursor(cursor)

    if direction == "next":
        return query.filter(
            or_(
                model.created_at < cursor_ts,
                and_(model.created_at == cursor_ts, model.id < cursor_id),
            )
        )

    if direction == "prev":
        return query.filter(
            or_(
                model.created_at > cursor_ts,
                and_(model.created_at == cursor_ts, model.id > cursor_id),
            )
        )

    raise ValidationError("direction: must be 'next' or 'prev'")


def paginate_cursor(
    query: Query,
    *,
    model: Type[Any],
    limit: int,
    direction: str = "next",
    cursor: Optional[str] = None,
) -> tuple[list[Any], CursorMeta]:
    """
    Execute a cursor-paginated query. Items are always returned newest first.

    ``prev`` pages are read oldest first so the LIMIT keeps the rows closest
    to the cursor, then reversed. Fetches limit + 1 rows to detect
    continuation.
    """
    if limit <= 0:
        raise ValidationError("limit: must be greater than zero")

    if direction == "prev":
        ordering = (model.created_at.asc(), model.id.asc())
    else:
        ordering = (model.created_at.desc(), model.id.desc())

    rows = query.order_by(*ordering).limit(limit + 1).all()

    has_more = len(rows) > limit
    items = rows[:limit]
    if direction == "prev":
        items.reverse()

    next_cursor: Optional[str] = None
    prev_cursor: Optional[str] = None

    if items:
        first, last = items[0], items[-1]
        if direction == "prev":
            next_cursor = encode_cursor(last.created_at, last.id)
            if has_more:
                prev_cursor = encode_cursor(first.created_at, first.id)
        else:
            if has_more:
                next_cursor = encode_cursor(last.created_at, last.id)
            if cursor:
                prev_cursor = encode_cursor(first.created_at, first.id)

    return items, {
        "has_more": has_more,
        "next_cursor": next_cursor,
        "prev_cursor": prev_cursor,
    }
