"""mac-tidy-cli: remove broken macOS configuration artifacts and manage updates."""

__version__ = "1.2.0"

__all__ = ["__version__"]
