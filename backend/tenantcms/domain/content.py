"""
Page content documents.

Content is stored as JSON text whose shape depends on the template
(``{"html": ..., "image": ..., "json": ...}`` for most pages). Older writers
sometimes encoded an already-encoded string, so decoding unwraps until it
reaches a structure and falls back to an empty document instead of raising.
"""
import json
from typing import Any, Dict, Optional

MAX_DECODE_DEPTH = 8


def decode_content(raw: Any) -> Dict[str, Any]:
    value = raw
    for _ in range(MAX_DECODE_DEPTH):
        if not isinstance(value, (str, bytes)):
            break
        try:
            value = json.loads(value)
        except (TypeError, ValueError):
            return {}
    return value if isinstance(value, dict) else {}


def encode_content(content: Any) -> str:
    """
    Serialize submitted content for storage.

    Pre-encoded documents are decoded first; a bare string that is not JSON is
    taken as the HTML body.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8", "replace")
    if isinstance(content, str):
        decoded = decode_content(content)
        content = decoded if decoded or content.strip() in ("", "{}") else {"html": content}
    return json.dumps(content or {}, ensure_ascii=False, separators=(",", ":"))


def unwrap_news(raw: Any) -> Dict[str, Optional[str]]:
    content = decode_content(raw)
    return {
        "image": content.get("image") or None,
        "html": content.get("html") or "",
    }
