"""Disk and path helpers for mac-tidy-cli."""
from ..core.constants import SIZE_TIMEOUT
from .process import run_with_timeout


#size formatter
def human_size(num):
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(num) < 1024.0:
            return f"{num:3.1f} {unit}"
        num /= 1024.0
    return f"{num:.1f} PB"


def measure_size_kb(path, timeout=SIZE_TIMEOUT) -> int:
    """Disk usage of path in KB (du -sk). 0 on timeout or unreadable output."""
    out = run_with_timeout(timeout, ["du", "-sk", str(path)])
    first = out.split()[0] if out.split() else ""
    return int(first) if first.isdigit() else 0
