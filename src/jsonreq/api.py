"""Convenience call shapes over the canonical operations.

Every shape here builds one :class:`~jsonreq.models.RequestConfig` via
:func:`build_config` and forwards it to :func:`~jsonreq.engine.fetch` or
:func:`~jsonreq.engine.submit`; no shape performs I/O of its own.

Two result conventions are offered:

* :meth:`Requests.get`, :meth:`Requests.post`, and
  :meth:`Requests.load_local_json` return the parsed value, or ``None`` on
  any failure. The reason is printed as a warning on stderr.
* :meth:`Requests.fetch` and :meth:`Requests.submit` return the full
  :class:`~jsonreq.models.Success` / :class:`~jsonreq.models.Failure`
  result for callers that need to know which stage failed.

The module-level :func:`get`, :func:`post`, :func:`fetch`, :func:`submit`,
and :func:`load_local_json` delegate to a process-wide :class:`Requests`
created on first use (see :func:`get_default_client`).

Example::

    import jsonreq

    user = jsonreq.get("https://api.example.com/users/1")
    jsonreq.get("https://api.example.com/users", params={"page": "2"}, save=True)
    jsonreq.post("https://api.example.com/login", {}, "user=a&pass=b")
    jsonreq.post(
        "https://api.example.com/users",
        body={"name": "A", "age": 1},
        save=True,
        path="out/resp.json",
    )
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from jsonreq import engine
from jsonreq.client.dispatcher import Dispatcher
from jsonreq.exceptions import InvalidUsageError
from jsonreq.models import (
    DEFAULT_SAVE_PATH,
    Absent,
    Body,
    ClientSettings,
    RawText,
    RequestConfig,
    Result,
    Structured,
)
from jsonreq.output import get_output

PathArg = Union[str, Path, None]


# ------------------------------------------------------------------ #
# Normalisation
# ------------------------------------------------------------------ #


def as_body(body: Any) -> Body:
    """Normalise a caller-supplied body into the :data:`~jsonreq.models.Body` union.

    * ``None`` -- :class:`~jsonreq.models.Absent`
    * an ``Absent`` / ``RawText`` / ``Structured`` instance -- unchanged
    * ``str`` -- :class:`~jsonreq.models.RawText` (sent form-encoded)
    * anything else -- :class:`~jsonreq.models.Structured` (sent as JSON)

    Wrap a string in ``Structured(value=...)`` to send it as a JSON string.

    Raises:
        InvalidUsageError: If the value cannot be serialised as JSON.
    """
    if body is None:
        return Absent()
    if isinstance(body, (Absent, RawText, Structured)):
        return body
    if isinstance(body, str):
        return RawText(text=body)
    try:
        return Structured(value=body)
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid request body: {exc}") from exc


def resolve_persist_target(save: bool = False, path: PathArg = None) -> Optional[Path]:
    """Map the ``save`` flag and optional ``path`` to a persistence target.

    ``save=False`` never persists, whatever *path* says. ``save=True``
    without a path always targets :data:`~jsonreq.models.DEFAULT_SAVE_PATH`.
    """
    if not save:
        return None
    return Path(path) if path else Path(DEFAULT_SAVE_PATH)


def build_config(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    query_params: Optional[Mapping[str, str]] = None,
    body: Any = None,
    save: bool = False,
    path: PathArg = None,
) -> RequestConfig:
    """Build the immutable request description shared by every call shape.

    Raises:
        InvalidUsageError: If *url* is empty or not absolute, a header is
            not an ASCII string, or a parameter is not a string.
    """
    try:
        return RequestConfig(
            url=url,
            headers=dict(headers) if headers is not None else None,
            query_params=dict(query_params) if query_params is not None else None,
            body=as_body(body),
            persist_target=resolve_persist_target(save, path),
        )
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid request: {exc}") from exc


# ------------------------------------------------------------------ #
# Facade
# ------------------------------------------------------------------ #


class Requests:
    """Request facade bound to one :class:`~jsonreq.client.dispatcher.Dispatcher`.

    Args:
        settings: Transport settings for a dispatcher created here.
            Ignored when *dispatcher* is given.
        dispatcher: An existing dispatcher (and therefore HTTP client) to
            share.

    Example::

        with Requests(ClientSettings(timeout=5)) as http:
            items = http.get("https://api.example.com/items", params={"q": "a b"})
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        self._dispatcher = dispatcher or Dispatcher(settings)

    def __enter__(self) -> Requests:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def close(self) -> None:
        self._dispatcher.close()

    # -- canonical operations ------------------------------------------ #

    def fetch(self, config: RequestConfig) -> Result:
        """Run :func:`jsonreq.engine.fetch` on this facade's dispatcher."""
        return engine.fetch(config, self._dispatcher)

    def submit(self, config: RequestConfig) -> Result:
        """Run :func:`jsonreq.engine.submit` on this facade's dispatcher."""
        return engine.submit(config, self._dispatcher)

    # -- convenience shapes -------------------------------------------- #

    def get(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[Mapping[str, str]] = None,
        *,
        save: bool = False,
        path: PathArg = None,
    ) -> Any:
        """Send a GET request and return the parsed JSON, or ``None`` on failure.

        Args:
            url: Absolute endpoint URL.
            headers: Extra headers; a caller ``Accept`` replaces the default.
            params: Query parameters appended to *url*.
            save: Write the response to *path* (or ``data/data.json``).
            path: Destination used when *save* is true.

        Raises:
            InvalidUsageError: If *url* is empty or not absolute, or a
                header is not an ASCII string. Network, parse and
                persistence problems never raise.
        """
        config = build_config(url, headers=headers, query_params=params, save=save, path=path)
        return _value_or_none(self.fetch(config))

    def post(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        *,
        save: bool = False,
        path: PathArg = None,
    ) -> Any:
        """Send a POST request and return the parsed JSON, or ``None`` on failure.

        A ``str`` body is sent verbatim as
        ``application/x-www-form-urlencoded``; any other value is sent as
        ``application/json``. See :func:`as_body`.

        Args:
            url: Absolute endpoint URL.
            headers: Extra headers; a caller ``Content-Type`` or ``Accept``
                replaces the computed one.
            body: Request body, or ``None`` for an empty POST.
            save: Write the response to *path* (or ``data/data.json``).
            path: Destination used when *save* is true.

        Raises:
            InvalidUsageError: If *url* is empty or not absolute, a header
                is not an ASCII string, or *body* has no JSON form.
                Network, parse and persistence problems never raise.
        """
        config = build_config(url, headers=headers, body=body, save=save, path=path)
        return _value_or_none(self.submit(config))

    def load_local_json(self, path: Union[str, Path]) -> Any:
        """Parse a local JSON file, returning ``None`` if it is missing or invalid."""
        return _value_or_none(engine.load(path))


def _value_or_none(result: Result) -> Any:
    if not result.ok:
        get_output().warning(str(result))
    return result.value_or_none()


# ------------------------------------------------------------------ #
# Process-wide default facade
# ------------------------------------------------------------------ #

_default: Optional[Requests] = None
_default_lock = threading.Lock()


def get_default_client() -> Requests:
    """Return the process-wide :class:`Requests`, creating it on first use.

    The facade (and its HTTP client) is created once with
    :func:`~jsonreq.config.resolve_settings` and reused by every
    module-level call. No teardown is required.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                from jsonreq.config import resolve_settings

                _default = Requests(resolve_settings())
    return _default


def set_default_client(client: Requests) -> None:
    """Install *client* as the process-wide facade."""
    global _default
    with _default_lock:
        _default = client


def reset_default_client() -> None:
    """Close and drop the process-wide facade."""
    global _default
    with _default_lock:
        if _default is not None:
            _default.close()
        _default = None


def get(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
    *,
    save: bool = False,
    path: PathArg = None,
) -> Any:
    """Module-level :meth:`Requests.get` on the default facade."""
    return get_default_client().get(url, headers, params, save=save, path=path)


def post(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    body: Any = None,
    *,
    save: bool = False,
    path: PathArg = None,
) -> Any:
    """Module-level :meth:`Requests.post` on the default facade."""
    return get_default_client().post(url, headers, body, save=save, path=path)


def fetch(config: RequestConfig) -> Result:
    return get_default_client().fetch(config)


def submit(config: RequestConfig) -> Result:
    return get_default_client().submit(config)


def load_local_json(path: Union[str, Path]) -> Any:
    """Parse a local JSON file, returning ``None`` if it is missing or invalid."""
    return _value_or_none(engine.load(path))
