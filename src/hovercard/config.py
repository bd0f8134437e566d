"""Hover popup options and their TOML loader."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from hovercard.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL,
    DEFAULT_FADE_DELAY_MS,
    DEFAULT_FADE_SPEED,
    DEFAULT_HOVER_DELAY_MS,
    DEFAULT_POPUP_WIDTH,
)

LOGGER = logging.getLogger("hovercard.config")

_PROJECT_FILENAME = "pyproject.toml"
_TOOL_SECTION = "hovercard"


@dataclass(frozen=True, slots=True)
class HoverOptions:
    """User-facing options of the subreddit hover popup.

    Delays are stored in milliseconds as the options screen presents them;
    ``open_delay``/``fade_delay`` expose them in seconds for the timers.
    """

    require_direct_link: bool = True
    hover_delay_ms: int = DEFAULT_HOVER_DELAY_MS
    fade_delay_ms: int = DEFAULT_FADE_DELAY_MS
    fade_speed: float = DEFAULT_FADE_SPEED
    width: int = DEFAULT_POPUP_WIDTH
    cache_ttl: float = DEFAULT_CACHE_TTL
    cache_max_entries: int | None = DEFAULT_CACHE_MAX_ENTRIES
    base_url: str = DEFAULT_BASE_URL

    @property
    def open_delay(self) -> float:
        return self.hover_delay_ms / 1000.0

    @property
    def fade_delay(self) -> float:
        return self.fade_delay_ms / 1000.0

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "HoverOptions":
        """Coerce a raw mapping into options.

        Strings such as ``"800"`` are accepted for numeric values; unknown keys
        are ignored and invalid values fall back to the defaults.
        """

        defaults = cls()
        if not config:
            return defaults

        def _coerce_bool(value: Any, fallback: bool) -> bool:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in {"1", "true", "yes", "on"}:
                    return True
                if lowered in {"0", "false", "no", "off"}:
                    return False
            return fallback

        def _coerce_int(value: Any, fallback: int | None) -> int | None:
            try:
                numeric = int(float(value))
            except (TypeError, ValueError):
                return fallback
            return max(0, numeric)

        def _coerce_float(value: Any, fallback: float) -> float:
            try:
                numeric = float(value)
            except (TypeError, ValueError):
                return fallback
            return max(0.0, numeric)

        max_entries: int | None = defaults.cache_max_entries
        if "cache_max_entries" in config:
            raw = config.get("cache_max_entries")
            if raw is None or raw == 0 or raw == "0":
                max_entries = None
            else:
                max_entries = _coerce_int(raw, defaults.cache_max_entries)

        base_url = config.get("base_url", defaults.base_url)
        if not isinstance(base_url, str) or not base_url.strip():
            base_url = defaults.base_url

        return cls(
            require_direct_link=_coerce_bool(config.get("require_direct_link"), defaults.require_direct_link),
            hover_delay_ms=_coerce_int(config.get("hover_delay"), defaults.hover_delay_ms) or 0,
            fade_delay_ms=_coerce_int(config.get("fade_delay"), defaults.fade_delay_ms) or 0,
            fade_speed=_coerce_float(config.get("fade_speed"), defaults.fade_speed),
            width=_coerce_int(config.get("width"), defaults.width) or defaults.width,
            cache_ttl=_coerce_float(config.get("cache_ttl"), defaults.cache_ttl),
            cache_max_entries=max_entries,
            base_url=base_url.strip(),
        )

    def with_overrides(self, **overrides: Any) -> "HoverOptions":
        known = {field.name for field in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown hover options: {sorted(unknown)}")
        return replace(self, **overrides)


def _load_toml_mapping(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    if isinstance(data, ABCMapping):
        return dict(data)
    return None


def load_hover_options(path: Path | None = None) -> HoverOptions:
    """Load options from ``[tool.hovercard]`` in ``pyproject.toml`` or a plain TOML file.

    A plain file may hold the options at top level or under a ``[hovercard]``
    table. Missing files yield the defaults.
    """

    if path is None:
        return HoverOptions()
    candidate = Path(path).expanduser()
    if candidate.is_dir():
        candidate = candidate / _PROJECT_FILENAME
    try:
        payload = _load_toml_mapping(candidate)
    except tomllib.TOMLDecodeError as exc:
        LOGGER.warning("Ignoring malformed options file %s: %s", candidate, exc)
        return HoverOptions()
    if not payload:
        return HoverOptions()

    section: Any
    if candidate.name == _PROJECT_FILENAME:
        tool = payload.get("tool")
        section = tool.get(_TOOL_SECTION) if isinstance(tool, ABCMapping) else None
    else:
        section = payload.get(_TOOL_SECTION, payload)
    if not isinstance(section, ABCMapping):
        return HoverOptions()
    options = HoverOptions.from_mapping(section)
    LOGGER.debug("Loaded hover options from %s: %s", candidate, options)
    return options
