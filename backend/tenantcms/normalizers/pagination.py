from typing import Any, Callable, Dict, List

from tenantcms.utils.pagination import CursorMeta


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    cursor: CursorMeta,
) -> Dict[str, Any]:
    """`{"items": [...], "pagination": {...}}` for a newest-first cursor page."""
    return {
        "items": [normalize_fn(item) for item in items],
        "pagination": dict(cursor),
    }
