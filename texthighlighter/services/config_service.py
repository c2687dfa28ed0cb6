"""
Configuration service for TextHighlighter.

Holds the drawing constants of the highlight engine (canvas margin,
highlight insets, underline offset divisor) and the default selection
opacity. Values are stored as JSON in ~/.config/texthighlighter/config.json
following the XDG Base Directory Specification; a missing or corrupted file
falls back to the defaults below.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from texthighlighter.services.logging_service import get_logger

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "texthighlighter"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    # Alpha applied to the widget's selection color when an engine is attached
    "selection_opacity": 0.4,
    # Extra pixels added to the canvas width and height
    "canvas_margin": 100,
    # Highlight blocks start this many pixels below the glyph box...
    "highlight_inset_top": 1,
    # ...and are this many pixels shorter than it
    "highlight_height_reduction": 2,
    # Underline offset is round(-line_height / underline_divisor)
    "underline_divisor": 6.0,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# key -> predicate the loaded value must satisfy
_VALIDATORS = {
    "selection_opacity": lambda v: _is_number(v) and 0.0 <= v <= 1.0,
    "canvas_margin": lambda v: isinstance(v, int) and not isinstance(v, bool) and v >= 0,
    "highlight_inset_top": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "highlight_height_reduction": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "underline_divisor": lambda v: _is_number(v) and v > 0,
}


class ConfigService:
    """
    Service for managing highlighter configuration.

    Handles loading, saving, and accessing configuration values.
    Invalid values are reported and replaced with their defaults.
    """

    def __init__(self, config_path: Optional[Path] = None, persist: bool = True) -> None:
        """
        Initialize the ConfigService.

        Args:
            config_path: Optional path to config file. Defaults to
                        ~/.config/texthighlighter/config.json
            persist: When False, nothing is read from or written to disk.
        """
        self._logger = get_logger(__name__)
        self._config_path = config_path or DEFAULT_CONFIG_FILE
        self._persist = persist
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

        if persist:
            self._load()

    @classmethod
    def in_memory(cls) -> "ConfigService":
        """Defaults only, never touching the filesystem."""
        return cls(persist=False)

    def _load(self) -> None:
        """Load configuration from file, using defaults if needed."""
        if not self._config_path.exists():
            self._logger.info(
                f"Config file not found at {self._config_path}. Using defaults."
            )
            self._save_to_file()
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                loaded_config = json.load(f)

            if not isinstance(loaded_config, dict):
                raise ValueError("Config file does not contain a valid JSON object")

            for key, value in loaded_config.items():
                self._apply(key, value)
            self._logger.info(f"Configuration loaded from {self._config_path}")

        except (json.JSONDecodeError, ValueError) as e:
            self._logger.warning(
                f"Config file corrupted or invalid: {e}. Recreating with defaults."
            )
            self._config = copy.deepcopy(DEFAULT_CONFIG)
            self._save_to_file()

        except (OSError, PermissionError) as e:
            self._logger.warning(
                f"Could not read config file: {e}. Using defaults."
            )

    def _apply(self, key: str, value: Any) -> None:
        validator = _VALIDATORS.get(key)
        if validator is not None and not validator(value):
            self._logger.warning(
                f"Invalid value {value!r} for '{key}', using default {DEFAULT_CONFIG[key]!r}"
            )
            value = DEFAULT_CONFIG[key]
        self._config[key] = value

    def _save_to_file(self) -> None:
        """Save current configuration to file."""
        if not self._persist:
            return
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)

            with open(self._config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2)

            self._logger.debug(f"Configuration saved to {self._config_path}")

        except (OSError, PermissionError) as e:
            self._logger.error(f"Could not save config file: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value, or ``default`` if the key is unknown."""
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value (in memory only).

        Note:
            Call save() to persist changes to disk.
        """
        self._apply(key, value)
        self._logger.debug(f"Config key '{key}' set to '{self._config[key]}'")

    def save(self) -> None:
        """Persist current configuration to disk."""
        self._save_to_file()

    # ─── Engine Settings ──────────────────────────────────────────────────

    @property
    def selection_opacity(self) -> float:
        return float(self.get("selection_opacity"))

    @property
    def canvas_margin(self) -> int:
        return int(self.get("canvas_margin"))

    @property
    def highlight_inset_top(self) -> int:
        return int(self.get("highlight_inset_top"))

    @property
    def highlight_height_reduction(self) -> int:
        return int(self.get("highlight_height_reduction"))

    @property
    def underline_divisor(self) -> float:
        return float(self.get("underline_divisor"))
