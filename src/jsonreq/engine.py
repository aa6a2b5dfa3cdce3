"""The two canonical operations and the local loader.

Every convenience call shape in :mod:`jsonreq.api` builds a
:class:`~jsonreq.models.RequestConfig` and ends up in exactly one of:

* :func:`fetch` -- GET, with query parameters appended to the URL.
* :func:`submit` -- POST, with the body negotiated into a content type
  and wire bytes.

Both walk the same stages::

    Built -> Encoded -> Dispatched -> Parsed -> (Persisted) -> Returned

and short-circuit to a :class:`~jsonreq.models.Failure` as soon as a stage
fails. Network and parse failures never raise across this boundary.
Persistence is a side channel: a write failure is reported on
:attr:`Success.persist_error <jsonreq.models.Success.persist_error>` and
the parsed value is still returned.

:func:`load` reads a local JSON file with the same result convention.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jsonreq.client.dispatcher import Dispatcher
from jsonreq.client.negotiation import build_headers, negotiate
from jsonreq.client.query import encode_query
from jsonreq.client.response import parse_response
from jsonreq.exceptions import IOFailure, NetworkFailure, ParseFailure
from jsonreq.models import (
    Failure,
    HTTPMethod,
    OutgoingRequest,
    RequestConfig,
    Result,
    Success,
)
from jsonreq.output import get_output
from jsonreq.storage import read_json, save_json


def fetch(config: RequestConfig, dispatcher: Dispatcher) -> Result:
    """Send a GET request described by *config* and parse the JSON response.

    ``config.body`` is ignored. Query parameters, when present, are
    appended to ``config.url``.

    Args:
        config: The request description.
        dispatcher: The transport owner that performs the round trip.

    Returns:
        :class:`~jsonreq.models.Success` with the parsed value, or
        :class:`~jsonreq.models.Failure` tagged ``network`` or ``parse``.
    """
    outgoing = OutgoingRequest(
        method=HTTPMethod.GET,
        url=encode_query(config.url, config.query_params),
        headers=build_headers(config.headers),
    )
    return _round_trip(config, outgoing, dispatcher)


def submit(config: RequestConfig, dispatcher: Dispatcher) -> Result:
    """Send a POST request described by *config* and parse the JSON response.

    ``config.query_params`` is ignored. A request without a body is still
    sent, as an empty POST with ``Content-Type: application/json``.

    Args:
        config: The request description.
        dispatcher: The transport owner that performs the round trip.

    Returns:
        :class:`~jsonreq.models.Success` with the parsed value, or
        :class:`~jsonreq.models.Failure` tagged ``network`` or ``parse``.
    """
    content_type, content = negotiate(config.body)
    outgoing = OutgoingRequest(
        method=HTTPMethod.POST,
        url=config.url,
        headers=build_headers(config.headers, content_type),
        content=content,
    )
    return _round_trip(config, outgoing, dispatcher)


def load(path: Union[str, Path]) -> Result:
    """Read and parse a local JSON file.

    Returns:
        :class:`~jsonreq.models.Success` with the parsed value, or
        :class:`~jsonreq.models.Failure` tagged ``io`` (missing or
        unreadable file) or ``parse`` (invalid JSON).
    """
    try:
        value = read_json(path)
    except (IOFailure, ParseFailure) as exc:
        get_output().debug(str(exc))
        return Failure.from_error(exc)
    return Success(value=value)


def _round_trip(
    config: RequestConfig,
    outgoing: OutgoingRequest,
    dispatcher: Dispatcher,
) -> Result:
    try:
        raw = dispatcher.send(outgoing)
        value = parse_response(raw)
    except (NetworkFailure, ParseFailure) as exc:
        get_output().debug(f"{outgoing.method.value} {outgoing.url}: {exc}")
        return Failure.from_error(exc)

    if config.persist_target is None:
        return Success(value=value)
    return _persist(value, config.persist_target)


def _persist(value: Any, target: Path) -> Success:
    output = get_output()
    try:
        path = save_json(value, target)
    except IOFailure as exc:
        output.warning(f"Response not saved: {exc}")
        return Success(value=value, persist_error=str(exc))
    output.debug(f"Saved response to {path}")
    return Success(value=value, persisted_to=path)
