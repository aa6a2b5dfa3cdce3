"""Local JSON files: response persistence and the local loader.

* :func:`save_json` -- write a parsed value as pretty-printed UTF-8 JSON,
  creating parent directories and overwriting any existing file.
* :func:`read_json` -- load and parse a local JSON file.
* :func:`atomic_write` -- temp-file-then-rename write shared with
  :mod:`jsonreq.config`.

Both public helpers raise :class:`~jsonreq.exceptions.IOFailure` when the
file system refuses the operation and :func:`read_json` raises
:class:`~jsonreq.exceptions.ParseFailure` on malformed content. Concurrent
writers to the same path are not coordinated: the last rename wins.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from jsonreq.client.response import strict_loads
from jsonreq.exceptions import IOFailure, ParseFailure

PathLike = Union[str, "os.PathLike[str]"]


def atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up and the original exception propagates.

    The file keeps the owner-only mode of the temporary file unless *mode*
    is given.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def dump_pretty(value: Any) -> str:
    """Serialise *value* as indented, human-readable JSON with a trailing newline."""
    return json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False) + "\n"


def save_json(value: Any, target: PathLike) -> Path:
    """Persist a parsed value as pretty-printed JSON.

    Args:
        value: Any JSON-compatible value (dict, list, str, number, bool, None).
        target: Destination file. Missing parent directories are created.

    Returns:
        The path that was written.

    Raises:
        IOFailure: If a directory cannot be created, the file cannot be
            written, or *value* has no JSON form (for example ``nan``).
    """
    path = Path(target)
    try:
        text = dump_pretty(value)
    except (TypeError, ValueError) as exc:
        raise IOFailure(f"Could not serialise response for {path}: {exc}") from exc
    try:
        atomic_write(path, text, mode=_umask_mode())
    except OSError as exc:
        raise IOFailure(f"Could not write {path}: {exc}") from exc
    return path


def read_json(source: PathLike) -> Any:
    """Load a local file and parse it as a single JSON document.

    Raises:
        IOFailure: If the file is missing or unreadable.
        ParseFailure: If the contents are not valid UTF-8 JSON.
    """
    path = Path(source)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseFailure(f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise IOFailure(f"Could not read {path}: {exc}") from exc
    try:
        return strict_loads(text)
    except (ValueError, RecursionError) as exc:
        raise ParseFailure(f"{path} is not valid JSON: {exc}") from exc


def _umask_mode() -> int:
    """Mode a plain ``open(path, "w")`` would create, i.e. 0o666 minus the umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
