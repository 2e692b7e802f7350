"""Response envelope and pagination helpers shared by every virtual service.

The envelope is the single wire contract between the virtualization layer and
its callers: `{"success": bool, "data": T | None, "message"?: str}`.
"""

from __future__ import annotations

import math
from typing import Any, Sequence


def domain_build_envelope(data: Any = None, success: bool = True, message: str | None = None) -> dict[str, Any]:
    """Wrap one payload in the standard response envelope.

    Args:
        data: Payload carried by the envelope, or None on failure.
        success: Whether the call succeeded.
        message: Optional human-readable message.

    Returns:
        dict[str, Any]: Envelope with `success`, `data` and optional `message`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    envelope: dict[str, Any] = {"success": bool(success), "data": data}
    if message is not None:
        envelope["message"] = message
    return envelope


def domain_build_error_envelope(message: str) -> dict[str, Any]:
    """Build a failure envelope with no data and a required message.

    Args:
        message: Human-readable failure message.

    Returns:
        dict[str, Any]: Failure envelope.

    Raises:
        ValueError: Raised when message is blank.
    """

    if not message or not message.strip():
        raise ValueError("message must not be blank")
    return domain_build_envelope(data=None, success=False, message=message)


def domain_is_envelope(payload: Any) -> bool:
    """Return whether a payload already has the envelope shape."""

    return (
        isinstance(payload, dict)
        and isinstance(payload.get("success"), bool)
        and ("data" in payload or "message" in payload)
    )


def domain_build_paginated(
    items: Sequence[Any],
    page: int = 1,
    limit: int = 10,
    total: int | None = None,
) -> dict[str, Any]:
    """Slice one page out of a sequence and describe the page geometry.

    Args:
        items: Full ordered sequence to paginate.
        page: One-based page number.
        limit: Page size.
        total: Optional total override; defaults to `len(items)`.

    Returns:
        dict[str, Any]: `{data, total, page, limit, totalPages}` payload.

    Raises:
        ValueError: Raised when page or limit is lower than 1.
    """

    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")

    resolved_total = len(items) if total is None else total
    start_index = (page - 1) * limit
    return {
        "data": list(items[start_index : start_index + limit]),
        "total": resolved_total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(resolved_total / limit),
    }
