"""Data types shared by the scan, remediation and update services."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class ArtifactKind(str, Enum):
    PREFERENCE = "preference"
    LOGIN_ITEM = "login_item"


class OwnerClass(str, Enum):
    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True)
class ConfigArtifact:
    path: str
    kind: ArtifactKind
    owner: OwnerClass = OwnerClass.USER

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def system_owned(self) -> bool:
        return self.owner is OwnerClass.SYSTEM


@dataclass(frozen=True)
class ValidationResult:
    artifact: ConfigArtifact
    is_valid: bool
    program_path: Optional[str] = None


@dataclass(frozen=True)
class RemovalCandidate:
    artifact: ConfigArtifact
    size_kb: int = 0

    @property
    def size_bytes(self) -> int:
        return self.size_kb * 1024


@dataclass(frozen=True)
class RemediationResult:
    count: int = 0
    total_size_kb: int = 0


@dataclass
class CleanupTotals:
    """Running totals for one `clean` run, folded in task by task."""

    files_cleaned: int = 0
    total_size_kb: int = 0
    total_items: int = 0

    def record(self, result: RemediationResult) -> None:
        if result.count <= 0:
            return
        self.files_cleaned += result.count
        self.total_size_kb += result.total_size_kb
        self.total_items += 1


class UpdateSource(str, Enum):
    FORMULA = "formula"
    CASK = "cask"
    OS = "os"
    SELF = "self"
    APP_STORE = "app_store"


@dataclass(frozen=True)
class SourceStatus:
    """One queried update source. `count` is None when it was not queried."""

    source: UpdateSource
    count: Optional[int] = None
    flag: bool = False

    @property
    def available(self) -> bool:
        return bool(self.flag) or (self.count or 0) > 0


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def format_brew_label(formula: Optional[int], cask: Optional[int]) -> str:
    """'Homebrew (5 updates) (3 formula, 2 cask)'; breakdown only when both were queried."""
    total = (formula or 0) + (cask or 0)
    label = f"Homebrew ({_plural(total, 'update')})"
    if formula is not None and cask is not None:
        label += f" ({formula} formula, {cask} cask)"
    return label


@dataclass
class UpdateSummary:
    statuses: Dict[UpdateSource, SourceStatus] = field(default_factory=dict)
    current_version: str = ""
    latest_version: Optional[str] = None
    tool_name: str = "mac-tidy"

    def status(self, source: UpdateSource) -> SourceStatus:
        return self.statuses.get(source, SourceStatus(source))

    def available(self, source: UpdateSource) -> bool:
        return self.status(source).available

    @property
    def brew_total(self) -> int:
        return (self.status(UpdateSource.FORMULA).count or 0) + (self.status(UpdateSource.CASK).count or 0)

    @property
    def brew_available(self) -> bool:
        return self.available(UpdateSource.FORMULA) or self.available(UpdateSource.CASK)

    @property
    def actionable(self) -> bool:
        return any(s.available for s in self.statuses.values())

    def labels(self) -> List[str]:
        """One display label per available source, in display order."""
        out = []
        if self.brew_available:
            out.append(format_brew_label(self.status(UpdateSource.FORMULA).count, self.status(UpdateSource.CASK).count))
        if self.available(UpdateSource.OS):
            out.append("macOS system update available")
        if self.available(UpdateSource.APP_STORE):
            n = self.status(UpdateSource.APP_STORE).count or 0
            out.append(f"App Store ({_plural(n, 'app update')})")
        if self.available(UpdateSource.SELF):
            out.append(f"{self.tool_name} {self.latest_version} (current {self.current_version})")
        return out


class GateDecision(str, Enum):
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"
    NOTHING_TO_DO = "nothing_to_do"


@dataclass(frozen=True)
class UpdateOutcome:
    source_label: str
    succeeded: bool
    message: str = ""
