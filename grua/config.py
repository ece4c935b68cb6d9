"""Read-only JSON config helpers.

Supplies the UI theme, Pygments style, refresh interval, file-type filter, and
untracked-file policy. All access is defensive: malformed or missing config
falls back to defaults. grua never writes this file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "grua"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_STYLE = "monokai"
DEFAULT_REFRESH_SECONDS = 10.0
MIN_REFRESH_SECONDS = 0.5


@dataclass(frozen=True)
class ReviewConfig:
    """Effective settings for one review session."""

    theme: str | None = None
    style: str = DEFAULT_STYLE
    no_color: bool = False
    refresh_seconds: float = DEFAULT_REFRESH_SECONDS
    extensions: tuple[str, ...] = ()
    show_untracked: bool = True


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _string_value(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _refresh_value(value: object) -> float | None:
    """Accept positive numbers only; booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value <= 0:
        return None
    return max(MIN_REFRESH_SECONDS, float(value))


def _extensions_value(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())


def load_review_config(
    *,
    theme: str | None = None,
    style: str | None = None,
    no_color: bool = False,
    refresh_seconds: float | None = None,
    show_untracked: bool | None = None,
) -> ReviewConfig:
    """Merge config-file values with explicit overrides (non-``None`` wins)."""
    data = load_config()

    file_show_untracked = data.get("show_untracked")
    if show_untracked is None:
        show_untracked = file_show_untracked if isinstance(file_show_untracked, bool) else True

    return ReviewConfig(
        theme=theme or _string_value(data, "theme"),
        style=style or _string_value(data, "style") or DEFAULT_STYLE,
        no_color=bool(no_color or data.get("no_color") is True),
        refresh_seconds=(
            _refresh_value(refresh_seconds)
            or _refresh_value(data.get("refresh_seconds"))
            or DEFAULT_REFRESH_SECONDS
        ),
        extensions=_extensions_value(data.get("extensions")),
        show_untracked=show_untracked,
    )


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_REFRESH_SECONDS",
    "DEFAULT_STYLE",
    "ReviewConfig",
    "load_config",
    "load_review_config",
]
