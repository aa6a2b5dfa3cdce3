"""Config commands -- view and modify the stored transport settings.

Provides the ``jsonreq config`` sub-command group. Settings live in the
jsonreq config directory and provide the defaults for ``timeout``,
``verify_ssl``, and ``follow_redirects``; ``JSONREQ_*`` environment
variables and CLI flags override them per invocation.
"""

from __future__ import annotations

from typing import Any

import typer

from jsonreq.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored settings.

    Example::

        jsonreq --json config show
    """
    from jsonreq.config import load_settings, settings_path
    from jsonreq.exceptions import ConfigError

    try:
        settings = load_settings()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    info(f"Settings file: {settings_path()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Setting name, e.g. 'timeout'."),
    value: str = typer.Argument(help="New value ('none' clears the timeout)."),
) -> None:
    """Change one stored setting.

    The value is coerced to the field's type and the result is validated
    before it is saved.

    Example::

        jsonreq config set timeout 10
        jsonreq config set verify_ssl false
    """
    from pydantic import ValidationError

    from jsonreq.config import load_settings, save_settings
    from jsonreq.models import ClientSettings

    if key not in ClientSettings.model_fields:
        error(f"Unknown setting: {key}")
        raise typer.Exit(code=2)

    data = load_settings().model_dump()
    data[key] = _coerce(key, value)
    try:
        settings = ClientSettings.model_validate(data)
    except ValidationError as exc:
        error(f"Invalid value for {key}: {exc}")
        raise typer.Exit(code=2) from None

    save_settings(settings)
    success(f"Set {key} = {getattr(settings, key)}")


@config_app.command("reset")
def config_reset() -> None:
    """Restore the default settings."""
    from jsonreq.config import save_settings
    from jsonreq.models import ClientSettings

    save_settings(ClientSettings())
    success("Settings reset to defaults.")


def _coerce(key: str, value: str) -> Any:
    lowered = value.strip().lower()
    if key == "timeout" and lowered in ("none", "off", ""):
        return None
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    return value
