"""Request commands -- ``jsonreq get``, ``jsonreq post``, ``jsonreq load``.

Each command turns its options into a :class:`~jsonreq.models.RequestConfig`,
runs the matching canonical operation on a :class:`~jsonreq.api.Requests`
facade built from the resolved settings, and renders the parsed response
on stdout. A failed call prints the reason on stderr and exits with the
failure kind's exit code (network 6, parse 7, io 8).
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from jsonreq.api import Requests, build_config
from jsonreq.client.response import strict_loads
from jsonreq.engine import load
from jsonreq.exceptions import InvalidUsageError, JsonreqError
from jsonreq.models import ClientSettings, Result, Structured
from jsonreq.output import error, format_response, info


def parse_header(raw: str) -> tuple[str, str]:
    """Split a ``Name: value`` header option."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise InvalidUsageError(f"Header must look like 'Name: value', got {raw!r}")
    return name.strip(), value.strip()


def parse_param(raw: str) -> tuple[str, str]:
    """Split a ``key=value`` query parameter option."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise InvalidUsageError(f"Query parameter must look like 'key=value', got {raw!r}")
    return key, value


def _collect(items: Optional[list[str]], parser: Any) -> Optional[dict[str, str]]:
    if not items:
        return None
    return dict(parser(item) for item in items)


def _parse_json_body(raw: str) -> Structured:
    try:
        return Structured(value=strict_loads(raw))
    except (ValueError, RecursionError) as exc:
        raise InvalidUsageError(f"--json-body is not valid JSON: {exc}") from exc


def _settings_from(ctx: typer.Context) -> ClientSettings:
    from jsonreq.config import resolve_settings

    overrides = (ctx.obj or {}).get("settings", {})
    return resolve_settings(**overrides)


def _report(result: Result) -> None:
    """Render a result, or exit with the failure's exit code."""
    if not result.ok:
        error(str(result))
        raise typer.Exit(code=result.exit_code)
    format_response(result.value)
    if result.persisted_to is not None:
        info(f"Saved response to {result.persisted_to}")


def _usage_error(exc: JsonreqError) -> typer.Exit:
    error(str(exc))
    return typer.Exit(code=exc.exit_code)


def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Absolute URL to GET."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header 'Name: value' (repeatable)."
    ),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter 'key=value' (repeatable)."
    ),
    save: bool = typer.Option(
        False, "--save", "-s", help="Write the response to data/data.json (or --to)."
    ),
    to: Optional[str] = typer.Option(
        None, "--to", help="Write the response to this path (implies --save)."
    ),
) -> None:
    """Send a GET request and print the JSON response.

    Example::

        jsonreq get https://api.example.com/items -p page=2 -H 'X-Trace: 1'
        jsonreq get https://api.example.com/items --save
    """
    try:
        config = build_config(
            url,
            headers=_collect(header, parse_header),
            query_params=_collect(param, parse_param),
            save=save or to is not None,
            path=to,
        )
        settings = _settings_from(ctx)
    except JsonreqError as exc:
        raise _usage_error(exc) from None

    with Requests(settings) as http:
        result = http.fetch(config)
    _report(result)


def post_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Absolute URL to POST to."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header 'Name: value' (repeatable)."
    ),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Raw form-encoded body, sent verbatim."
    ),
    json_body: Optional[str] = typer.Option(
        None, "--json-body", "-j", help="JSON document sent as application/json."
    ),
    save: bool = typer.Option(
        False, "--save", "-s", help="Write the response to data/data.json (or --to)."
    ),
    to: Optional[str] = typer.Option(
        None, "--to", help="Write the response to this path (implies --save)."
    ),
) -> None:
    """Send a POST request and print the JSON response.

    Without ``--data`` or ``--json-body`` an empty POST is sent.

    Example::

        jsonreq post https://api.example.com/login -d 'user=a&pass=b'
        jsonreq post https://api.example.com/users -j '{"name": "A"}' --to out/resp.json
    """
    try:
        if data is not None and json_body is not None:
            raise InvalidUsageError("Use either --data or --json-body, not both.")
        body: Any = data if data is not None else None
        if json_body is not None:
            body = _parse_json_body(json_body)
        config = build_config(
            url,
            headers=_collect(header, parse_header),
            body=body,
            save=save or to is not None,
            path=to,
        )
        settings = _settings_from(ctx)
    except JsonreqError as exc:
        raise _usage_error(exc) from None

    with Requests(settings) as http:
        result = http.submit(config)
    _report(result)


def load_command(
    path: str = typer.Argument(help="Local JSON file to read."),
) -> None:
    """Parse a local JSON file and print it.

    Example::

        jsonreq --plain load data/data.json
    """
    _report(load(path))
