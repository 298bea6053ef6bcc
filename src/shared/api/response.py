"""Response parsing for the marketplace backend.

Parses backend responses into payloads and human-readable error messages.
Handles the shapes the backend is known to produce:

- Envelope: {"success": bool, "message": "...", "data": ...}
- Bare JSON documents (orders, payments on some routes)
- Plain text bodies (image upload returns the object key)
- Validation errors: {"detail": [{"loc": [...], "msg": "..."}]}
- Domain errors: {"error": "msg"} or {"error": {"field": "msg"}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


def extract_error_detail(response: httpx.Response) -> str:
    """Extract a human-readable error message from an error response."""
    try:
        body = response.json()
    except ValueError:
        text = response.text or ""
        return text[:300] or f"HTTP {response.status_code}"

    if not isinstance(body, dict):
        return str(body)[:300]

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(f"{k}: {v}" for k, v in error.items())
        return str(error)

    for key in ("message", "detail"):
        if body.get(key):
            return str(body[key])

    return str(body)[:300]


def unwrap_envelope(body: Any) -> tuple[bool, str | None, Any]:
    """Split an optional ``{success, message, data}`` envelope.

    Returns ``(success, message, data)``. Documents without a ``success`` key
    are passed through untouched as successful data.
    """
    if isinstance(body, dict) and "success" in body:
        return bool(body["success"]), body.get("message"), body.get("data")
    return True, None, body
