from __future__ import annotations

from pathlib import Path
from typing import Optional

from diagnostics import Diagnostics


def _check_raw_path(raw: str) -> Path:
    if not raw.strip():
        raise ValueError("Empty input path.")
    if "\x00" in raw:
        raise ValueError("NUL byte in path is not allowed.")

    candidate = Path(raw).expanduser()
    if ".." in candidate.parts:
        raise ValueError("Path traversal ('..') is not allowed.")
    return candidate


def _confine(path: Path, root: Path) -> None:
    base = root.resolve(strict=True)
    if not path.is_relative_to(base):
        raise ValueError(f"Input path must be within root: {base}")


def safe_input_path(raw: str, *, root: Path | None = None) -> Path:
    """
    Turn a user-supplied path into an absolute path to an existing file.

    Raises ValueError for empty input, NUL bytes, '..' segments or a path
    escaping `root`; FileNotFoundError / IsADirectoryError otherwise.
    """
    resolved = _check_raw_path(raw).resolve()
    if root is not None:
        _confine(resolved, root)

    if resolved.is_file():
        return resolved
    if resolved.exists():
        raise IsADirectoryError(f"Not a file: {resolved}")
    raise FileNotFoundError(f"File not found: {resolved}")


def read_source(path: Path, diagnostics: Diagnostics) -> Optional[str]:
    """
    Read a markup file as UTF-8 text.

    A missing file is recorded as an error and yields None instead of raising.
    Undecodable content raises UnicodeDecodeError.
    """
    path = Path(path)
    if not path.is_file():
        diagnostics.error("File not found!")
        return None

    with path.open(encoding="utf-8", newline="") as f:
        return f.read()
