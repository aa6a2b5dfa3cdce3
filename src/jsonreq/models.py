"""Canonical Pydantic models shared across all jsonreq modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Request description** -- built by the convenience layer and consumed by
the canonical operations:
    :class:`Absent`, :class:`RawText`, :class:`Structured` (the three cases
    of the :data:`Body` union) and :class:`RequestConfig`.

**Wire models** -- exchanged with the dispatcher:
    :class:`HTTPMethod`, :class:`OutgoingRequest`, and :class:`RawResponse`.

**Outcomes** -- returned by :func:`~jsonreq.engine.fetch` and
:func:`~jsonreq.engine.submit`:
    :class:`FailureKind`, :class:`Success`, :class:`Failure`, and the
    :data:`Result` union.

:class:`ClientSettings` holds the transport settings persisted by
:mod:`jsonreq.config`.

All request and outcome models are frozen: a :class:`RequestConfig` is
built fresh per call and discarded after dispatch.
"""

from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import Annotated, Any, ClassVar, Literal, NoReturn, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jsonreq.exceptions import IOFailure, JsonreqError, NetworkFailure, ParseFailure

DEFAULT_SAVE_PATH = "data/data.json"
"""Target used when persistence is requested without an explicit path.

Callers depend on this literal; it must not change between versions.
"""

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


# --- Request body ---


class Absent(BaseModel):
    """No request body. Sent as a body-less request with a JSON content type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["absent"] = "absent"


class RawText(BaseModel):
    """An opaque string body sent verbatim as form-encoded data.

    The caller is responsible for pre-encoding form pairs, e.g.
    ``RawText(text="x=1&y=2")``.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["raw_text"] = "raw_text"
    text: str


class Structured(BaseModel):
    """A JSON value (object, array, or scalar) serialised before sending."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["structured"] = "structured"
    value: Any = None

    @field_validator("value")
    @classmethod
    def require_json_compatible(cls, value: Any) -> Any:
        try:
            json.dumps(value, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Body is not JSON-serialisable: {exc}") from exc
        return value


Body = Annotated[Union[Absent, RawText, Structured], Field(discriminator="kind")]
"""Tagged union of the three request body shapes, discriminated on ``kind``."""


# --- Request description ---


class RequestConfig(BaseModel):
    """Immutable description of a single request.

    Every convenience call shape in :mod:`jsonreq.api` normalises into
    one of these before reaching :func:`~jsonreq.engine.fetch` or
    :func:`~jsonreq.engine.submit`.

    ``query_params`` is only honoured by ``fetch``; ``body`` is only
    honoured by ``submit``. A ``persist_target`` of ``None`` means the
    response is not written anywhere.

    Example::

        RequestConfig(
            url="https://api.example.com/items",
            headers={"X-Trace": "1"},
            body=Structured(value={"name": "A"}),
            persist_target=Path("out/resp.json"),
        )
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(min_length=1, description="Absolute request URL")
    headers: Optional[dict[str, str]] = None
    query_params: Optional[dict[str, str]] = None
    body: Body = Field(default_factory=Absent)
    persist_target: Optional[Path] = None

    @field_validator("url")
    @classmethod
    def require_absolute(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"URL must be absolute: {value!r}")
        return value

    @field_validator("headers")
    @classmethod
    def require_ascii_headers(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        for name, header_value in (value or {}).items():
            if not (name.isascii() and header_value.isascii()):
                raise ValueError(f"Header {name!r} must be ASCII")
        return value


# --- Wire models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods issued by the dispatcher."""

    GET = "GET"
    POST = "POST"


class OutgoingRequest(BaseModel):
    """A finished request ready to be put on the wire."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    content: Optional[bytes] = None


class RawResponse(BaseModel):
    """Status metadata plus the undecoded response body."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    reason_phrase: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes = b""


# --- Outcomes ---


class FailureKind(str, enum.Enum):
    """Which stage of the pipeline failed."""

    NETWORK = "network"
    PARSE = "parse"
    IO = "io"


_KIND_TO_ERROR: dict[FailureKind, type[JsonreqError]] = {
    FailureKind.NETWORK: NetworkFailure,
    FailureKind.PARSE: ParseFailure,
    FailureKind.IO: IOFailure,
}


class Success(BaseModel):
    """A parsed response value.

    Persistence is best-effort: when the value could not be written,
    ``persisted_to`` stays ``None`` and ``persist_error`` explains why, but
    the call is still a success.
    """

    model_config = ConfigDict(frozen=True)

    ok: ClassVar[bool] = True

    value: Any = None
    persisted_to: Optional[Path] = None
    persist_error: Optional[str] = None

    def unwrap(self) -> Any:
        """Return the parsed value."""
        return self.value

    def value_or_none(self) -> Any:
        return self.value


class Failure(BaseModel):
    """A failed call, tagged with the stage that failed."""

    model_config = ConfigDict(frozen=True)

    ok: ClassVar[bool] = False

    kind: FailureKind
    message: str

    @classmethod
    def from_error(cls, exc: JsonreqError) -> Failure:
        """Build a failure from one of the pipeline exceptions.

        Args:
            exc: A :class:`~jsonreq.exceptions.NetworkFailure`,
                :class:`~jsonreq.exceptions.ParseFailure`, or
                :class:`~jsonreq.exceptions.IOFailure`.

        Raises:
            TypeError: If *exc* is not one of the three pipeline failures.
        """
        for kind, error_type in _KIND_TO_ERROR.items():
            if isinstance(exc, error_type):
                return cls(kind=kind, message=str(exc))
        raise TypeError(f"Not a pipeline failure: {type(exc).__name__}")

    @property
    def exit_code(self) -> int:
        return _KIND_TO_ERROR[self.kind].exit_code

    def raise_error(self) -> NoReturn:
        """Re-raise this failure as its typed exception."""
        raise _KIND_TO_ERROR[self.kind](self.message)

    def unwrap(self) -> NoReturn:
        self.raise_error()

    def value_or_none(self) -> None:
        return None

    def __str__(self) -> str:
        return f"{self.kind.value} failure: {self.message}"


Result = Union[Success, Failure]
"""Outcome of a canonical operation."""


# --- Settings ---


class ClientSettings(BaseModel):
    """Transport settings applied to the shared HTTP client.

    Loaded by :func:`~jsonreq.config.load_settings` from the user's config
    file and environment, with explicit arguments taking precedence.
    """

    timeout: Optional[float] = Field(
        default=30.0, description="Transport timeout in seconds (None disables)"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    follow_redirects: bool = Field(
        default=False, description="Follow 3xx redirects automatically"
    )
