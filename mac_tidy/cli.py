#!/usr/bin/env python3
"""Command-line interface for mac-tidy-cli."""
import argparse
import json
import logging
import sys

import questionary
from questionary import Choice
from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.table import Table

from . import __version__
from .core import config as config_module
from .core.models import CleanupTotals, GateDecision
from .services import maintenance_service as maintenance
from .services import update_executor
from .services import update_sources
from .services.update_gate import UpdateDecisionGate
from .utils.disk import human_size

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    handler = RichHandler(console=Console(stderr=True), show_time=False, show_path=verbose)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _prompt_tasks(keys: list):
    """Checkbox TUI (space to toggle, enter to confirm). Returns selected keys, [] on Ctrl+C."""
    choices = [Choice(maintenance.TASKS[k]["desc"], value=k, checked=True) for k in keys]
    result = questionary.checkbox("Select maintenance tasks to run:", choices=choices).ask()
    if result is None:
        return []
    return [k for k in keys if k in result]


def print_totals(totals: CleanupTotals, dry_run: bool) -> None:
    console.print()
    if totals.files_cleaned == 0:
        console.print("  [green]✓[/] No broken items found")
        return
    size = human_size(totals.total_size_kb * 1024)
    if dry_run:
        console.print(
            f"  [bold yellow]Would clean {totals.files_cleaned} item(s), {size} "
            f"across {totals.total_items} task(s)[/]"
        )
    else:
        console.print(
            f"  [bold green]Cleaned {totals.files_cleaned} item(s), {size} "
            f"across {totals.total_items} task(s)[/]"
        )


def _run_clean(argv: list) -> int:
    p = argparse.ArgumentParser(prog="mac-tidy clean", description="Remove broken preferences and login items.")
    p.add_argument("--dry-run", action="store_true", help="Show what would be removed without removing.")
    p.add_argument("--interactive", action="store_true", help="Choose which tasks to run.")
    args = p.parse_args(argv)

    cfg = config_module.load()
    keys = maintenance.visible_tasks(cfg)
    if args.interactive and sys.stdin.isatty():
        keys = _prompt_tasks(keys)
        if not keys:
            console.print("[yellow]No selection. Exiting.[/]")
            return 0

    title = "Maintenance (dry run)" if args.dry_run else "Maintenance"
    console.print(Rule(f"[bold cyan]{title}[/]", style="cyan"))
    console.print()
    totals = CleanupTotals()
    maintenance.run_maintenance(keys, totals, dry_run=args.dry_run, cfg=cfg)
    print_totals(totals, args.dry_run)
    console.print()
    return 0


def _run_update(argv: list) -> int:
    p = argparse.ArgumentParser(prog="mac-tidy update", description="Check for and install updates.")
    p.add_argument("--yes", "-y", action="store_true", help="Install without asking.")
    p.add_argument("--refresh", action="store_true", help="Ignore cached update checks.")
    args = p.parse_args(argv)

    cfg = config_module.load()
    summary = update_sources.collect_updates(cfg, use_cache=not args.refresh)
    if not summary.actionable:
        console.print("[green]✓ Everything is up to date[/]")
        return 0
    if args.yes:
        console.print("[bold cyan]Available updates:[/]")
        for label in summary.labels():
            console.print(f"  • {label}")
    else:
        decision = UpdateDecisionGate(summary).run()
        if decision is GateDecision.CANCELLED:
            console.print("[yellow]Update cancelled[/]")
            return 0
    console.print()
    console.print(Rule("[bold cyan]Updating[/]", style="cyan"))
    outcomes = update_executor.run_updates(summary, cfg)
    return 0 if all(o.succeeded for o in outcomes) else 1


def _list_tasks() -> None:
    console.print(Rule("[bold cyan]mac-tidy — Maintenance tasks[/]", style="cyan"))
    console.print()
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Description", style="")
    for key, t in maintenance.TASKS.items():
        table.add_row(key, t["desc"])
    console.print(table)
    console.print()


def _run_config(argv: list) -> None:
    p = argparse.ArgumentParser(prog="mac-tidy config", description="Manage configuration.")
    p.add_argument("--init", action="store_true", help="Create default config file")
    p.add_argument("--show", action="store_true", help="Show current config")
    args = p.parse_args(argv)
    if args.init:
        path = config_module.init_config()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(f"  [green]✓[/] Created config at [cyan]{path}[/]")
        console.print()
        return
    if args.show:
        if not config_module.config_exists():
            console.print("[yellow]No config found. Run: mac-tidy config --init[/]")
            return
        cfg = config_module.load()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(json.dumps(cfg, indent=2))
        console.print()
        return
    p.print_help()


def main(argv=None):
    """Main function."""
    argv = list(argv if argv is not None else sys.argv[1:])
    verbose = False
    for flag in ("-v", "--verbose"):
        while flag in argv:
            argv.remove(flag)
            verbose = True
    setup_logging(verbose)

    if argv and argv[0] in ("--version", "version"):
        console.print(f"mac-tidy {__version__}")
        return
    if argv and argv[0] == "clean":
        sys.exit(_run_clean(argv[1:]))
    if argv and argv[0] == "update":
        sys.exit(_run_update(argv[1:]))
    if argv and argv[0] == "tasks":
        _list_tasks()
        return
    if argv and argv[0] == "config":
        _run_config(argv[1:])
        return

    console.print(Rule("[bold cyan]🧹 mac-tidy[/]", style="cyan"))
    console.print()
    console.print("[cyan]Usage:[/] mac-tidy [-v] <command> [options]\n")
    console.print("  [bold]clean[/]    Remove broken preferences and login items ([dim]--dry-run, --interactive[/])")
    console.print("  [bold]update[/]   Check for and install updates ([dim]--yes, --refresh[/])")
    console.print("  [bold]tasks[/]    List maintenance tasks")
    console.print("  [bold]config[/]   Manage configuration ([dim]--init, --show[/])")
    console.print()
    sys.exit(0 if not argv else 2)


if __name__ == "__main__":
    main()
