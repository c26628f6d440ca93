"""Terminal primitives: shared rich console, busy indicator, single-key reads."""
import contextlib
import sys
from enum import Enum

from rich.console import Console

try:
    import termios
    import tty

    _HAS_TERMIOS = True
except ImportError:
    _HAS_TERMIOS = False

console = Console()

ESC = "\x1b"


class Key(str, Enum):
    ENTER = "enter"
    ESC = "esc"
    OTHER = "other"


@contextlib.contextmanager
def busy(label: str):
    """Spinner while the block runs; nothing when stdout is not a terminal."""
    if not console.is_terminal:
        yield
        return
    with console.status(f"[dim]{label}[/]", spinner="dots"):
        yield


def classify_key(ch: str) -> Key:
    if ch == "":
        # EOF: nobody is there to confirm
        return Key.ESC
    if ch in ("\r", "\n"):
        return Key.ENTER
    if ch == ESC:
        return Key.ESC
    return Key.OTHER


def _read_raw_char(stream) -> str:
    fd = stream.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        return stream.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def read_key(stream=None) -> Key:
    """Block until one key is read and classify it as ENTER, ESC or OTHER."""
    stream = stream or sys.stdin
    if _HAS_TERMIOS and stream.isatty():
        try:
            return classify_key(_read_raw_char(stream))
        except (termios.error, OSError):
            pass
    return classify_key(stream.read(1))
