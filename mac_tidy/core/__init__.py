"""Core constants, models, and config for mac-tidy-cli."""

from .constants import (
    HOME,
    PREFERENCES_DIR,
    LAUNCH_AGENTS_DIR,
    CACHE_DIR,
    BREW_PATHS,
    MAS_PATHS,
)
from . import config
from . import models

__all__ = [
    "HOME",
    "PREFERENCES_DIR",
    "LAUNCH_AGENTS_DIR",
    "CACHE_DIR",
    "BREW_PATHS",
    "MAS_PATHS",
    "config",
    "models",
]
