"""Shared test fixtures for jsonreq.

Provides reusable fixtures for isolating configuration, silencing output,
and building a dispatcher over :class:`httpx.MockTransport` so that no
test ever touches the network. These fixtures are automatically
discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from jsonreq.api import Requests, reset_default_client
from jsonreq.client.dispatcher import Dispatcher
from jsonreq.output import OutputFormat, OutputManager, reset_output, set_output


Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals() -> None:
    """Reset the global OutputManager and the default facade after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once pytest or CliRunner restores the
    real streams.
    """
    yield
    reset_output()
    reset_default_client()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    JSONREQ_* environment variables, and changes the working directory to
    tmp_path so that default-path persistence lands there.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("jsonreq.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
    for var in ["JSONREQ_TIMEOUT", "JSONREQ_VERIFY_SSL", "JSONREQ_FOLLOW_REDIRECTS"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless JSON OutputManager for the test."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Transport fixtures
# ---------------------------------------------------------------------------


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """Build an httpx.Response carrying *data* as JSON."""
    return httpx.Response(status_code, json=data)


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler or (lambda request: json_response({"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def echo_json(request: httpx.Request) -> httpx.Response:
    """Echo a JSON request body back as the response."""
    return httpx.Response(200, json=json.loads(request.content))


@pytest.fixture
def make_requests() -> Callable[[Handler], Requests]:
    """Factory for a :class:`Requests` facade over a mock transport."""
    created: list[Requests] = []

    def _make(handler: Handler) -> Requests:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        facade = Requests(dispatcher=Dispatcher(client=client))
        created.append(facade)
        return facade

    yield _make
    for facade in created:
        facade.dispatcher.client.close()
