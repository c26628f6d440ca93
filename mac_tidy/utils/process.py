#!/usr/bin/env python3
"""Bounded external command helpers."""
import logging
import os
import shutil
import subprocess
from typing import Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


def run_with_timeout(timeout, args: list) -> str:
    """Run args (no shell) and return stdout. Timeout or missing tool -> ''.

    The exit status is ignored: tools like find still print usable output
    when some entries are unreadable.
    """
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out after %ss: %s", timeout, " ".join(args))
        return ""
    except (FileNotFoundError, OSError) as e:
        logger.debug("Command failed to start: %s (%s)", " ".join(args), e)
        return ""
    return proc.stdout or ""


def run_cmd(args: list, timeout: Optional[int] = 10) -> Tuple[bool, str]:
    """Run command with list args (no shell). Returns (success, error_message)."""
    try:
        subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
        return True, ""
    except subprocess.CalledProcessError as e:
        err = (e.stderr or e.stdout or "").strip() or f"exit code {e.returncode}"
        return False, err
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        return False, str(e)


def find_tool(candidates: Iterable[str], name: str) -> Optional[str]:
    """First executable among candidates, then PATH lookup for name."""
    for p in candidates:
        if os.path.isfile(p) and os.access(p, os.X_OK):
            return p
    return shutil.which(name)


def run_output(timeout, args: list, strict=True) -> Optional[str]:
    """Like run_with_timeout, but None on timeout, missing tool or non-zero exit.

    With strict=False a non-zero exit that still printed something is kept.
    """
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Command timed out after %ss: %s", timeout, " ".join(args))
        return None
    except (FileNotFoundError, OSError) as e:
        logger.debug("Command failed to start: %s (%s)", " ".join(args), e)
        return None
    if proc.returncode != 0 and (strict or not (proc.stdout or "").strip()):
        logger.debug("Command exited %s: %s", proc.returncode, " ".join(args))
        return None
    return proc.stdout or ""
