"""End-to-end tests for the ``jsonreq`` command line.

Each test drives the Typer app through :class:`typer.testing.CliRunner`
with the facade built over :class:`httpx.MockTransport`, so the request
commands run their full pipeline without touching the network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import httpx
import pytest
from typer.testing import CliRunner

from conftest import Recorder, json_response

from jsonreq import __version__
from jsonreq.api import Requests
from jsonreq.app import app
from jsonreq.client.dispatcher import Dispatcher
from jsonreq.config import load_settings, save_settings
from jsonreq.models import ClientSettings


runner = CliRunner()

URL = "https://api.example.com/items"


@pytest.fixture
def mock_http(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., list]:
    """Route the request commands through a mock transport.

    Returns an installer taking a handler; the returned list collects the
    :class:`ClientSettings` each command resolved.
    """
    seen_settings: list[ClientSettings] = []

    def _install(handler) -> list[ClientSettings]:
        client = httpx.Client(transport=httpx.MockTransport(handler))

        def _factory(settings: ClientSettings) -> Requests:
            seen_settings.append(settings)
            return Requests(dispatcher=Dispatcher(settings, client=client))

        monkeypatch.setattr("jsonreq.commands.request.Requests", _factory)
        return seen_settings

    return _install


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRootOptions:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "get" in result.output
        assert "post" in result.output

    def test_transport_flags_reach_settings(self, mock_http) -> None:
        seen = mock_http(lambda request: json_response({}))
        result = runner.invoke(
            app, ["--quiet", "--timeout", "4", "--insecure", "-L", "get", URL]
        )
        assert result.exit_code == 0
        assert seen[0] == ClientSettings(timeout=4.0, verify_ssl=False, follow_redirects=True)

    def test_unset_flags_keep_stored_settings(self, mock_http) -> None:
        save_settings(ClientSettings(timeout=9.0, verify_ssl=False))
        seen = mock_http(lambda request: json_response({}))
        result = runner.invoke(app, ["--quiet", "get", URL])
        assert result.exit_code == 0
        assert seen[0].timeout == 9.0
        assert seen[0].verify_ssl is False


# ---------------------------------------------------------------------------
# get
# ---------------------------------------------------------------------------


class TestGetCommand:
    def test_prints_json_response(self, mock_http) -> None:
        mock_http(lambda request: json_response({"items": [1, 2]}))
        result = runner.invoke(app, ["--json", "--quiet", "get", URL])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"items": [1, 2]}

    def test_headers_and_params(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(
            app,
            ["--quiet", "get", URL, "-H", "X-Trace: 1", "-p", "q=a b", "--param", "page=2"],
        )
        assert result.exit_code == 0
        request = recorder.last
        assert request.method == "GET"
        assert str(request.url) == f"{URL}?q=a+b&page=2"
        assert request.headers["X-Trace"] == "1"
        assert request.headers["Accept"] == "application/json"

    def test_save_uses_default_path(self, mock_http, isolated_config: Path) -> None:
        mock_http(lambda request: json_response({"saved": True}))
        result = runner.invoke(app, ["--json", "get", URL, "--save"])
        assert result.exit_code == 0
        saved = isolated_config / "data" / "data.json"
        assert json.loads(saved.read_text(encoding="utf-8")) == {"saved": True}
        assert "Saved response to" in result.output

    def test_to_implies_save(self, mock_http, isolated_config: Path) -> None:
        mock_http(lambda request: json_response([1]))
        result = runner.invoke(app, ["--quiet", "get", URL, "--to", "out/resp.json"])
        assert result.exit_code == 0
        assert (isolated_config / "out" / "resp.json").is_file()
        assert not (isolated_config / "data").exists()

    def test_persist_failure_still_succeeds(self, mock_http, isolated_config: Path) -> None:
        (isolated_config / "blocker").write_text("x", encoding="utf-8")
        mock_http(lambda request: json_response({"a": 1}))
        result = runner.invoke(app, ["--json", "get", URL, "--to", "blocker/out.json"])
        assert result.exit_code == 0
        assert "Response not saved" in result.output

    def test_network_failure_exit_code(self, mock_http) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        mock_http(refuse)
        result = runner.invoke(app, ["get", URL])
        assert result.exit_code == 6
        assert "network failure" in result.output

    def test_parse_failure_exit_code(self, mock_http) -> None:
        mock_http(lambda request: httpx.Response(200, text="<html>nope</html>"))
        result = runner.invoke(app, ["get", URL])
        assert result.exit_code == 7
        assert "parse failure" in result.output

    def test_error_status_body_is_still_returned(self, mock_http) -> None:
        mock_http(lambda request: json_response({"error": "missing"}, status_code=404))
        result = runner.invoke(app, ["--json", "--quiet", "get", URL])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"error": "missing"}

    @pytest.mark.parametrize(
        "args",
        [
            ["get", "not-a-url"],
            ["get", URL, "-H", "no-colon"],
            ["get", URL, "-p", "novalue"],
        ],
    )
    def test_usage_errors(self, mock_http, args: list[str]) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, args)
        assert result.exit_code == 2
        assert recorder.requests == []


# ---------------------------------------------------------------------------
# post
# ---------------------------------------------------------------------------


class TestPostCommand:
    def test_raw_form_body(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, ["--quiet", "post", URL, "-d", "user=a&pass=b"])
        assert result.exit_code == 0
        request = recorder.last
        assert request.method == "POST"
        assert request.content == b"user=a&pass=b"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"

    def test_json_body(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, ["--quiet", "post", URL, "-j", '{"name": "A", "age": 1}'])
        assert result.exit_code == 0
        assert json.loads(recorder.last.content) == {"name": "A", "age": 1}
        assert recorder.last.headers["Content-Type"] == "application/json"

    def test_empty_post(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, ["--quiet", "post", URL])
        assert result.exit_code == 0
        assert recorder.last.content == b""
        assert recorder.last.headers["Content-Type"] == "application/json"

    def test_caller_content_type_wins(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(
            app, ["--quiet", "post", URL, "-H", "Content-Type: text/plain", "-d", "hi"]
        )
        assert result.exit_code == 0
        assert recorder.last.headers["Content-Type"] == "text/plain"

    def test_both_bodies_rejected(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, ["post", URL, "-d", "a=1", "-j", "{}"])
        assert result.exit_code == 2
        assert recorder.requests == []

    def test_invalid_json_body_rejected(self, mock_http) -> None:
        mock_http(Recorder())
        result = runner.invoke(app, ["post", URL, "-j", "{oops"])
        assert result.exit_code == 2
        assert "--json-body" in result.output

    @pytest.mark.parametrize("raw", ["NaN", '{"a": Infinity}', "[" * 100_000])
    def test_non_json_body_is_usage_error(self, mock_http, raw: str) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, ["post", URL, "-j", raw])
        assert result.exit_code == 2
        assert recorder.requests == []

    def test_non_ascii_header_is_usage_error(self, mock_http) -> None:
        recorder = Recorder()
        mock_http(recorder)
        result = runner.invoke(app, ["post", URL, "-H", "X-Name: caf\u00e9"])
        assert result.exit_code == 2
        assert recorder.requests == []


# ---------------------------------------------------------------------------
# load
# ---------------------------------------------------------------------------


class TestLoadCommand:
    def test_prints_file(self, isolated_config: Path) -> None:
        (isolated_config / "data.json").write_text('{"a": 1}', encoding="utf-8")
        result = runner.invoke(app, ["--json", "load", "data.json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"a": 1}

    def test_plain_output(self, isolated_config: Path) -> None:
        (isolated_config / "data.json").write_text('{"a": 1}', encoding="utf-8")
        result = runner.invoke(app, ["--plain", "load", "data.json"])
        assert result.exit_code == 0
        assert result.output == "a\t1\n"

    def test_missing_file_exit_code(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["load", "missing.json"])
        assert result.exit_code == 8

    def test_invalid_file_exit_code(self, isolated_config: Path) -> None:
        (isolated_config / "bad.json").write_text("nope", encoding="utf-8")
        result = runner.invoke(app, ["load", "bad.json"])
        assert result.exit_code == 7


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_show_defaults(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--json", "--quiet", "config", "show"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "timeout": 30.0,
            "verify_ssl": True,
            "follow_redirects": False,
        }

    def test_set_timeout(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "timeout", "10"])
        assert result.exit_code == 0
        assert load_settings().timeout == 10.0

    def test_set_timeout_none(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "timeout", "none"])
        assert result.exit_code == 0
        assert load_settings().timeout is None

    def test_set_boolean(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "verify_ssl", "false"])
        assert result.exit_code == 0
        assert load_settings().verify_ssl is False

    def test_set_unknown_key(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "save_path", "x.json"])
        assert result.exit_code == 2

    def test_set_invalid_value(self, isolated_config: Path) -> None:
        result = runner.invoke(app, ["config", "set", "follow_redirects", "maybe"])
        assert result.exit_code == 2
        assert load_settings() == ClientSettings()

    def test_reset(self, isolated_config: Path) -> None:
        save_settings(ClientSettings(timeout=1.0))
        result = runner.invoke(app, ["config", "reset"])
        assert result.exit_code == 0
        assert load_settings() == ClientSettings()


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_jsonreq_error_exit_code(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from jsonreq import app as app_module
        from jsonreq.exceptions import ConfigError

        def boom() -> None:
            raise ConfigError("bad settings", exit_code=3)

        monkeypatch.setattr(app_module, "app", boom)
        monkeypatch.setattr("jsonreq.app.signal.signal", lambda *args: None)
        with pytest.raises(SystemExit) as exc_info:
            app_module.main()
        assert exc_info.value.code == 3

    def test_unexpected_error_writes_crash_log(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from jsonreq import app as app_module

        def boom() -> None:
            raise RuntimeError("kaboom")

        monkeypatch.setattr(app_module, "app", boom)
        monkeypatch.setattr("jsonreq.app.signal.signal", lambda *args: None)
        with pytest.raises(SystemExit) as exc_info:
            app_module.main()
        assert exc_info.value.code == 1

        logs = list((isolated_config / "share" / "jsonreq" / "crashes").glob("jsonreq-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: kaboom" in logs[0].read_text(encoding="utf-8")
