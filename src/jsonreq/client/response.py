"""Response parsing -- raw payload to JSON value.

The whole body is decoded as UTF-8 and parsed as one JSON document. No
schema is applied: objects, arrays, and bare scalars are all accepted, and
the HTTP status code plays no part in the decision. The ``NaN`` and
``Infinity`` tokens that :mod:`json` tolerates are rejected, as is nesting
too deep to decode.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

from jsonreq.exceptions import ParseFailure
from jsonreq.models import RawResponse


def parse_response(response: RawResponse) -> Any:
    """Parse the body of *response* as JSON.

    Args:
        response: The raw response returned by the dispatcher.

    Returns:
        The decoded value (``dict``, ``list``, ``str``, ``int``,
        ``float``, ``bool``, or ``None``).

    Raises:
        ParseFailure: If the body is not UTF-8 or not a single well-formed
            JSON document (an empty body included).
    """
    return parse_text(_decode(response))


def strict_loads(text: str) -> Any:
    """:func:`json.loads` without the ``NaN`` / ``Infinity`` extensions.

    Raises:
        ValueError: If *text* is not one well-formed JSON document.
        RecursionError: If nesting is deeper than the interpreter allows.
    """
    return json.loads(text, parse_constant=_reject_constant)


def _reject_constant(token: str) -> NoReturn:
    raise ValueError(f"{token} is not a JSON value")


def parse_text(text: str) -> Any:
    """Parse an already-decoded JSON document."""
    try:
        return strict_loads(text)
    except (ValueError, RecursionError) as exc:
        snippet = text[:80].replace("\n", " ")
        raise ParseFailure(f"Response is not valid JSON ({exc}): {snippet!r}") from exc


def _decode(response: RawResponse) -> str:
    try:
        return response.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseFailure(
            f"Response body is not UTF-8 (HTTP {response.status_code}): {exc}"
        ) from exc
