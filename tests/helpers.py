"""Shared fixtures for the test suite."""
import io
import plistlib

from rich.console import Console


def quiet_console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def console_text(console: Console) -> str:
    return console.file.getvalue()


def write_plist(path, data) -> str:
    with open(path, "wb") as f:
        plistlib.dump(data, f)
    return str(path)


def write_bytes(path, body: bytes) -> str:
    with open(path, "wb") as f:
        f.write(body)
    return str(path)
