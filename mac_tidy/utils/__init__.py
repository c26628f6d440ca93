"""Disk, process, and terminal helpers for mac-tidy-cli."""

from . import disk
from . import process
from . import terminal

__all__ = ["disk", "process", "terminal"]
