"""Request pipeline stages for jsonreq.

Each stage is a small, separately testable unit that the canonical
operations in :mod:`jsonreq.engine` chain together:

* :func:`~jsonreq.client.query.encode_query` -- append query parameters
  to the URL (GET only).
* :func:`~jsonreq.client.negotiation.negotiate` -- choose the content type
  and wire bytes for a request body (POST only).
* :class:`~jsonreq.client.dispatcher.Dispatcher` -- own the shared
  :class:`httpx.Client` and perform the network round trip.
* :func:`~jsonreq.client.response.parse_response` -- turn the response
  payload into a JSON value.

Example::

    from jsonreq.client import Dispatcher

    with Dispatcher() as dispatcher:
        raw = dispatcher.send(outgoing)
"""

from jsonreq.client.dispatcher import Dispatcher
from jsonreq.client.negotiation import build_headers, negotiate
from jsonreq.client.query import encode_query
from jsonreq.client.response import parse_response

__all__ = ["Dispatcher", "build_headers", "encode_query", "negotiate", "parse_response"]
