"""Network round trip over a shared :class:`httpx.Client`.

This module provides :class:`Dispatcher`, the only component that touches
the network. It owns one :class:`httpx.Client` for its whole lifetime:

- **Lazy creation** -- the client is built on first use from
  :class:`~jsonreq.models.ClientSettings` (timeout, TLS verification,
  redirect policy) and reused by every later call.
- **Concurrent use** -- creation is guarded by a lock and
  :class:`httpx.Client` itself may be shared between threads, so one
  dispatcher can serve any number of call sites.
- **Injection** -- tests and embedders may pass their own client (for
  example one built over :class:`httpx.MockTransport`); an injected
  client is never closed by the dispatcher.
- **Error mapping** -- every transport-level error becomes a
  :class:`~jsonreq.exceptions.NetworkFailure`. HTTP status codes are not
  inspected: a 4xx or 5xx response is returned like any other.

No explicit shutdown is required; :meth:`Dispatcher.close` releases the
connection pool early.
"""

from __future__ import annotations

import threading
from typing import Optional

import httpx

from jsonreq.exceptions import NetworkFailure
from jsonreq.models import ClientSettings, OutgoingRequest, RawResponse
from jsonreq.output import get_output


class Dispatcher:
    """Sends :class:`~jsonreq.models.OutgoingRequest` values and returns raw responses.

    Args:
        settings: Transport settings for the client created on first use.
            Ignored when *client* is given.
        client: An existing :class:`httpx.Client` to use instead of
            creating one.

    Example::

        with Dispatcher(ClientSettings(timeout=5)) as dispatcher:
            raw = dispatcher.send(
                OutgoingRequest(method=HTTPMethod.GET, url="https://api.example.com/")
            )
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._client = client
        self._owns_client = client is None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def client(self) -> httpx.Client:
        """The shared :class:`httpx.Client`, created on first access."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(
                        timeout=self._settings.timeout,
                        verify=self._settings.verify_ssl,
                        follow_redirects=self._settings.follow_redirects,
                    )
        return self._client

    def send(self, request: OutgoingRequest) -> RawResponse:
        """Perform one synchronous HTTP exchange.

        The whole response body is read into memory.

        Args:
            request: Method, absolute URL, final header set, and optional
                body bytes.

        Returns:
            The status metadata and undecoded body.

        Raises:
            NetworkFailure: On DNS, connect, TLS, reset, timeout, or an
                unusable URL.
        """
        output = get_output()
        method = request.method.value
        output.debug(f"{method} {request.url}")

        try:
            response = self.client.request(
                method,
                request.url,
                headers=request.headers,
                content=request.content,
            )
        except httpx.InvalidURL as exc:
            raise NetworkFailure(f"Invalid URL {request.url!r}: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkFailure(
                f"{method} {request.url} failed: {type(exc).__name__}: {exc}"
            ) from exc

        output.debug(
            f"HTTP {response.status_code} {response.reason_phrase or ''} "
            f"({len(response.content)} bytes)"
        )
        return RawResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase or "",
            headers=dict(response.headers),
            content=response.content,
        )

    def close(self) -> None:
        """Close the client if this dispatcher created it."""
        with self._lock:
            if self._client is not None and self._owns_client:
                self._client.close()
                self._client = None
