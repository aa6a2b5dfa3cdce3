"""jsonreq -- a small JSON-over-HTTP request facade.

Issue GET and POST requests, encode query parameters and bodies, parse the
JSON response, and optionally save it to disk, all through two canonical
operations that every convenience call shape normalises into.

Typical use::

    import jsonreq

    data = jsonreq.get("https://api.example.com/items", params={"page": "2"})
    jsonreq.post("https://api.example.com/items", body={"name": "A"}, save=True)

Modules:
    api: Convenience call shapes and the process-wide default facade.
    engine: The canonical ``fetch`` / ``submit`` operations.
    client: Query encoding, content negotiation, dispatch, and parsing.
    storage: Response persistence and the local JSON loader.
    models: Pydantic models shared across the package.
    config: XDG-aware settings and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from jsonreq.api import (  # noqa: E402
    Requests,
    build_config,
    fetch,
    get,
    get_default_client,
    load_local_json,
    post,
    reset_default_client,
    submit,
)
from jsonreq.models import (  # noqa: E402
    DEFAULT_SAVE_PATH,
    Absent,
    ClientSettings,
    Failure,
    FailureKind,
    RawText,
    RequestConfig,
    Structured,
    Success,
)

__all__ = [
    "DEFAULT_SAVE_PATH",
    "Absent",
    "ClientSettings",
    "Failure",
    "FailureKind",
    "RawText",
    "RequestConfig",
    "Requests",
    "Structured",
    "Success",
    "build_config",
    "fetch",
    "get",
    "get_default_client",
    "load_local_json",
    "post",
    "reset_default_client",
    "submit",
]
