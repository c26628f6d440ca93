#!/usr/bin/env python3
"""Run accepted updates source by source, isolating failures."""
import logging
import os
import tempfile
from typing import Callable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from ..core import config as config_module
from ..core.models import UpdateOutcome, UpdateSource, UpdateSummary
from ..utils.process import run_cmd
from .self_update_service import SelfUpdateChannel, normalize_version
from .update_sources import BREW_CACHE, VERSION_CACHE, UpdateCache, find_brew

logger = logging.getLogger(__name__)

console = Console()

Step = Tuple[str, Callable[[], Tuple[bool, str]]]


def update_homebrew(summary: UpdateSummary, brew: Optional[str], cache: UpdateCache, timeout=1800) -> Tuple[bool, str]:
    """brew upgrade when anything is outdated, then drop the cached counts."""
    if not brew:
        return False, "Homebrew not found. Install it from https://brew.sh"
    if summary.brew_total <= 0:
        return True, "Homebrew packages already up to date"
    console.print(f"  [cyan]→[/] Upgrading {summary.brew_total} Homebrew package(s)...")
    try:
        ok, err = run_cmd([brew, "upgrade"], timeout=timeout)
    finally:
        cache.clear(BREW_CACHE)
        console.print("  [dim]Homebrew cache reset[/]")
    if not ok:
        return False, f"brew upgrade failed: {err}"
    return True, "Homebrew packages upgraded"


def os_update_guidance() -> Tuple[bool, str]:
    return True, "Install with: softwareupdate -i -a (or System Settings > General > Software Update)"


def app_store_guidance() -> Tuple[bool, str]:
    return True, "Update with: mas upgrade (or open the App Store > Updates)"


def self_update(summary: UpdateSummary, channel: SelfUpdateChannel, cache: UpdateCache) -> Tuple[bool, str]:
    """Download and run the installer unless already on the latest version."""
    latest = summary.latest_version
    if not latest or normalize_version(summary.current_version) == normalize_version(latest):
        return True, "Already on latest version"
    fd, path = tempfile.mkstemp(prefix="mac-tidy-install-", suffix=".sh")
    os.close(fd)
    try:
        channel.download_installer(path)
        channel.execute_installer(path)
    finally:
        try:
            os.remove(path)
        except OSError:
            pass
    cache.clear(VERSION_CACHE)
    return True, f"Updated to {latest}"


def build_steps(
    summary: UpdateSummary,
    brew: Optional[str],
    channel: SelfUpdateChannel,
    cache: UpdateCache,
    brew_timeout=1800,
) -> List[Step]:
    """(label, operation) pairs in fixed order for the available sources."""
    steps: List[Step] = []
    if summary.brew_available:
        steps.append(("Homebrew", lambda: update_homebrew(summary, brew, cache, timeout=brew_timeout)))
    if summary.available(UpdateSource.OS):
        steps.append(("macOS", os_update_guidance))
    if summary.available(UpdateSource.APP_STORE):
        steps.append(("App Store", app_store_guidance))
    if summary.available(UpdateSource.SELF):
        steps.append((summary.tool_name, lambda: self_update(summary, channel, cache)))
    return steps


def execute_steps(steps: List[Step]) -> List[UpdateOutcome]:
    outcomes = []
    for label, operation in steps:
        try:
            ok, msg = operation()
        except Exception as e:
            logger.debug("Update step %s raised", label, exc_info=True)
            ok, msg = False, str(e) or e.__class__.__name__
        outcomes.append(UpdateOutcome(label, ok, msg))
        if ok:
            console.print(f"  [green]✓[/] {label}: {escape(msg)}")
        else:
            console.print(f"  [red]✗[/] {label}: {escape(msg)}")
    return outcomes


def run_updates(
    summary: UpdateSummary,
    cfg: Optional[dict] = None,
    brew: Optional[str] = None,
    channel: Optional[SelfUpdateChannel] = None,
    cache: Optional[UpdateCache] = None,
) -> List[UpdateOutcome]:
    """Run every available source and print the consolidated result."""
    cfg = cfg or config_module.load()
    brew = brew or find_brew()
    channel = channel or SelfUpdateChannel(cfg["self_update_repo"], timeout=cfg["update_check_timeout"])
    cache = cache or UpdateCache(ttl_hours=cfg["update_check_ttl_hours"])
    steps = build_steps(summary, brew, channel, cache, brew_timeout=cfg["brew_upgrade_timeout"])
    outcomes = execute_steps(steps)
    failed = [o.source_label for o in outcomes if not o.succeeded]
    console.print()
    if failed:
        console.print(f"[yellow]Some updates failed: {', '.join(failed)}[/]")
    else:
        console.print("[green]All updates completed[/]")
    return outcomes
