"""
Settings Module for sudoku16

Provides the configuration value handed to the Solver and the Generator,
and persistent storage for it using JSON. Settings are stored in
sudoku16.json in the working directory unless another path is given.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from .techniques import SolvingTechnique, default_techniques

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("sudoku16.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "techniques": sorted(t.name for t in default_techniques()),
    "puzzle_format": 4,
    "lower_priority": True,
}


@dataclass(frozen=True)
class Settings:
    """
    Solver configuration.

    Attributes:
        techniques: Enabled solving techniques
        puzzle_format: Character scheme for puzzle text (see sudoku16.io)
        lower_priority: Lower the process priority during solving passes
    """
    techniques: FrozenSet[SolvingTechnique] = field(default_factory=default_techniques)
    puzzle_format: int = 4
    lower_priority: bool = True

    @classmethod
    def with_techniques(cls, techniques: Iterable[SolvingTechnique], **kwargs: Any) -> "Settings":
        """Build settings enabling exactly the given techniques."""
        return cls(techniques=frozenset(techniques), **kwargs)

    @classmethod
    def all_techniques(cls, **kwargs: Any) -> "Settings":
        """Build settings enabling every known technique."""
        return cls(techniques=frozenset(SolvingTechnique), **kwargs)

    def is_using(self, technique: SolvingTechnique) -> bool:
        return technique in self.techniques

    def is_using_all_techniques(self) -> bool:
        return self.is_using_all(*SolvingTechnique)

    def is_using_all(self, *techniques: SolvingTechnique) -> bool:
        return all(t in self.techniques for t in techniques)

    def evolve(self, **changes: Any) -> "Settings":
        """Copy with some fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "techniques": sorted(t.name for t in self.techniques),
            "puzzle_format": self.puzzle_format,
            "lower_priority": self.lower_priority,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """
        Build settings from a (possibly partial) dictionary.

        Unknown technique names are skipped with a warning.
        """
        merged = DEFAULT_SETTINGS.copy()
        merged.update(data)

        techniques = set()
        for name in merged["techniques"]:
            technique = SolvingTechnique.from_name(name)
            if technique is None:
                logger.warning(f"Ignoring unknown technique in settings: {name}")
                continue
            techniques.add(technique)

        return cls(
            techniques=frozenset(techniques),
            puzzle_format=int(merged["puzzle_format"]),
            lower_priority=bool(merged["lower_priority"]),
        )


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from a JSON file.

    Args:
        path: Settings file (default: sudoku16.json)

    Returns:
        Settings value. Returns defaults if file missing or invalid.
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    if not settings_file.exists():
        logger.debug("Settings file not found, using defaults")
        return Settings()

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings root must be an object")

        result = Settings.from_dict(data)
        logger.debug(f"Settings loaded: {result.to_dict()}")
        return result

    except (json.JSONDecodeError, IOError, ValueError, TypeError, KeyError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return Settings()


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
    """
    Save settings to a JSON file.

    Args:
        settings: Settings value to save
        path: Settings file (default: sudoku16.json)
    """
    settings_file = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(settings_file, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2)
        logger.debug(f"Settings saved: {settings.to_dict()}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
