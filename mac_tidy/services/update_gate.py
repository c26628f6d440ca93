#!/usr/bin/env python3
"""Single-key accept/cancel gate in front of the update run."""
from rich.console import Console

from ..core.models import GateDecision, UpdateSummary
from ..utils.terminal import Key, read_key

console = Console()

IDLE = "idle"
PRESENTING = "presenting"
ACCEPTED = "accepted"
CANCELLED = "cancelled"
NOTHING_TO_DO = "nothing_to_do"


class UpdateDecisionGate:
    """idle -> presenting -> accepted | cancelled, or straight to nothing_to_do.

    There is no timeout: the gate waits until ENTER or ESC arrives.
    """

    def __init__(self, summary: UpdateSummary, read_key=read_key):
        self.summary = summary
        self.read_key = read_key
        self.state = IDLE

    def present(self) -> None:
        self.state = PRESENTING
        console.print()
        console.print("[bold cyan]Available updates:[/]")
        for label in self.summary.labels():
            console.print(f"  • {label}")
        console.print()
        console.print("[dim]Press Enter to update, ESC to cancel[/]")

    def run(self) -> GateDecision:
        if not self.summary.actionable:
            self.state = NOTHING_TO_DO
            return GateDecision.NOTHING_TO_DO
        self.present()
        while True:
            key = self.read_key()
            if key is Key.ENTER:
                self.state = ACCEPTED
                return GateDecision.ACCEPTED
            if key is Key.ESC:
                self.state = CANCELLED
                return GateDecision.CANCELLED


def confirm_updates(summary: UpdateSummary, read_key=read_key) -> bool:
    """True only when the user pressed Enter on an actionable summary."""
    return UpdateDecisionGate(summary, read_key=read_key).run() is GateDecision.ACCEPTED
