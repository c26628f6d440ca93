#!/usr/bin/env python3
"""Maintenance tasks: broken preference files and broken login items."""
from typing import Optional

from rich.console import Console

from ..core import config as config_module
from ..core.constants import PREFERENCES_DIR, LAUNCH_AGENTS_DIR
from ..core.models import CleanupTotals, RemediationResult
from . import remediation_service as remediation
from . import scanner_service as scanner

console = Console()


def _scan_options(cfg):
    return {
        "list_timeout": cfg["list_timeout"],
        "size_timeout": cfg["size_timeout"],
        "protected_names": cfg["protected_names"],
    }


def clean_broken_preferences(
    totals: CleanupTotals,
    dry_run=False,
    prefs_dir=PREFERENCES_DIR,
    cfg: Optional[dict] = None,
) -> RemediationResult:
    """Find and remove preference plists that fail to parse."""
    cfg = cfg or config_module.load()
    broken = scanner.scan_preferences(prefs_dir, **_scan_options(cfg))
    result = remediation.remediate(broken, dry_run=dry_run)
    if result.count > 0:
        if dry_run:
            console.print(f"  [yellow]→[/] Broken preferences: {result.count} files [yellow](dry)[/]")
        else:
            console.print(f"  [green]✓[/] Removed {result.count} broken preference files")
        totals.record(result)
    return result


def clean_broken_login_items(
    totals: CleanupTotals,
    dry_run=False,
    agents_dir=LAUNCH_AGENTS_DIR,
    cfg: Optional[dict] = None,
) -> RemediationResult:
    """Find and remove LaunchAgents pointing at programs that no longer exist."""
    cfg = cfg or config_module.load()
    broken = scanner.scan_login_items(agents_dir, **_scan_options(cfg))
    result = remediation.remediate(broken, dry_run=dry_run)
    if result.count > 0:
        if dry_run:
            console.print(f"  [yellow]→[/] Broken login items: {result.count} [yellow](dry)[/]")
        else:
            console.print(f"  [green]✓[/] Removed {result.count} broken login items")
        totals.record(result)
    return result


TASKS = {
    "broken_preferences": {
        "desc": "Broken preference files (~/Library/Preferences)",
        "run": clean_broken_preferences,
    },
    "broken_login_items": {
        "desc": "Broken login items (~/Library/LaunchAgents)",
        "run": clean_broken_login_items,
    },
}


def visible_tasks(cfg: Optional[dict] = None) -> list:
    """Task keys minus exclude_tasks from config."""
    cfg = cfg or config_module.load()
    excl = set(cfg.get("exclude_tasks") or [])
    return [k for k in TASKS if k not in excl]


def run_maintenance(keys, totals: CleanupTotals, dry_run=False, cfg: Optional[dict] = None) -> CleanupTotals:
    """Run the selected tasks in registry order."""
    cfg = cfg or config_module.load()
    for key in TASKS:
        if key in keys:
            TASKS[key]["run"](totals, dry_run=dry_run, cfg=cfg)
    return totals
