"""Content negotiation for POST requests.

Maps each case of the :data:`~jsonreq.models.Body` union to the outgoing
``Content-Type`` and wire bytes, and merges caller headers over the
computed defaults.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from jsonreq.models import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    Absent,
    Body,
    RawText,
    Structured,
)


def negotiate(body: Body) -> tuple[str, Optional[bytes]]:
    """Select the content type and wire representation of *body*.

    * :class:`~jsonreq.models.Absent` -- ``application/json`` with no body.
    * :class:`~jsonreq.models.RawText` -- form-encoded, text sent verbatim.
    * :class:`~jsonreq.models.Structured` -- ``application/json``, compact
      JSON serialisation of the value.

    Returns:
        A ``(content_type, content)`` pair; ``content`` is ``None`` for an
        absent body.
    """
    if isinstance(body, RawText):
        return FORM_CONTENT_TYPE, body.text.encode("utf-8")
    if isinstance(body, Structured):
        return JSON_CONTENT_TYPE, serialize_json(body.value)
    if isinstance(body, Absent):
        return JSON_CONTENT_TYPE, None
    raise TypeError(f"Unknown body kind: {body!r}")


def serialize_json(value: Any) -> bytes:
    """Canonical compact JSON encoding used on the wire."""
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return text.encode("utf-8")


def build_headers(
    headers: Optional[Mapping[str, str]] = None,
    content_type: Optional[str] = None,
) -> dict[str, str]:
    """Merge caller *headers* over the defaults.

    ``Accept: application/json`` (and ``Content-Type`` when given) are
    applied first. A caller header with the same name, compared
    case-insensitively, replaces the computed one and keeps the caller's
    spelling.

    Example::

        >>> build_headers({"content-type": "text/plain"}, "application/json")
        {'Accept': 'application/json', 'content-type': 'text/plain'}
    """
    merged: dict[str, str] = {"Accept": JSON_CONTENT_TYPE}
    if content_type is not None:
        merged["Content-Type"] = content_type

    for name, value in (headers or {}).items():
        for existing in [k for k in merged if k.lower() == name.lower()]:
            del merged[existing]
        merged[name] = value
    return merged
