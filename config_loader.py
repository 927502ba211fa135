# config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any

try:
    import yaml  # PyYAML
except ImportError as e:
    raise SystemExit(
        "Missing dependency: PyYAML\n"
        "Install with: python -m pip install pyyaml"
    ) from e


class CruinneConfig:
    """
    Immutable-ish container for converter configuration.

    head_level shifts every heading uniformly: '=' renders as <h{head_level}>.
    """

    def __init__(
        self,
        *,
        head_level: int,
        code_block_class: str,
        code_language_prefix: str,
    ):
        self.head_level = head_level
        self.code_block_class = code_block_class
        self.code_language_prefix = code_language_prefix

    def __repr__(self) -> str:
        return (
            f"CruinneConfig(head_level={self.head_level!r}, "
            f"code_block_class={self.code_block_class!r}, "
            f"code_language_prefix={self.code_language_prefix!r})"
        )


# ---------------- Defaults ---------------------------------------------------

DEFAULT_CONFIG = CruinneConfig(
    head_level=2,
    code_block_class="prettyprint",
    code_language_prefix="language-",
)

# ---------------- Loader -----------------------------------------------------


def _as_int(value: Any, name: str) -> int:
    # bool is an int subclass; "head_level: yes" is a mistake, not 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    return value


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    return value


def load_config(path: Path) -> CruinneConfig:
    """
    Load YAML config and return a CruinneConfig instance.

    Example config.yml:

      head_level: 1
      code_block_class: prettyprint
      code_language_prefix: language-
    """
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise TypeError("Config root must be a mapping")

    return CruinneConfig(
        head_level=_as_int(
            raw.get("head_level", DEFAULT_CONFIG.head_level),
            "head_level",
        ),
        code_block_class=_as_str(
            raw.get("code_block_class", DEFAULT_CONFIG.code_block_class),
            "code_block_class",
        ),
        code_language_prefix=_as_str(
            raw.get("code_language_prefix", DEFAULT_CONFIG.code_language_prefix),
            "code_language_prefix",
        ),
    )
