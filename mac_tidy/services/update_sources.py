#!/usr/bin/env python3
"""Query update sources and build the UpdateSummary shown to the user."""
import json
import logging
import os
import time
from typing import Optional

from .. import __version__
from ..core import config as config_module
from ..core.constants import BREW_PATHS, CACHE_DIR, MAS_PATHS, SOFTWAREUPDATE
from ..core.models import SourceStatus, UpdateSource, UpdateSummary
from ..utils.process import find_tool, run_output, run_with_timeout
from ..utils.terminal import busy
from .self_update_service import SelfUpdateChannel, self_update_available

logger = logging.getLogger(__name__)

BREW_CACHE = "brew_updates"
VERSION_CACHE = "version_check"


class UpdateCache:
    """Small JSON files holding update check results for ttl_hours."""

    def __init__(self, directory=CACHE_DIR, ttl_hours=6):
        self.directory = str(directory)
        self.ttl = ttl_hours * 3600

    def _path(self, name: str) -> str:
        return os.path.join(self.directory, f"{name}.json")

    def get(self, name: str) -> Optional[dict]:
        if self.ttl <= 0:
            return None
        p = self._path(name)
        try:
            with open(p, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError):
            return None
        if not isinstance(raw, dict) or not isinstance(raw.get("data"), dict):
            return None
        try:
            age = time.time() - float(raw.get("ts") or 0)
        except (TypeError, ValueError):
            return None
        if age > self.ttl:
            return None
        return raw["data"]

    def put(self, name: str, data: dict) -> None:
        if self.ttl <= 0:
            return
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(self._path(name), "w", encoding="utf-8") as f:
                json.dump({"ts": time.time(), "data": data}, f)
        except OSError as e:
            logger.debug("Could not write cache %s: %s", name, e)

    def clear(self, name: str) -> bool:
        try:
            os.remove(self._path(name))
            return True
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.debug("Could not clear cache %s: %s", name, e)
            return False


def find_brew():
    return find_tool(BREW_PATHS, "brew")


def find_mas():
    return find_tool(MAS_PATHS, "mas")


def _count_lines(out: str) -> int:
    return sum(1 for ln in out.splitlines() if ln.strip())


def count_brew_outdated(brew: str, kind: str, timeout=30) -> Optional[int]:
    """Outdated formula or cask count; None when brew timed out or failed."""
    out = run_output(timeout, [brew, "outdated", f"--{kind}", "--quiet"], strict=False)
    if out is None:
        return None
    return _count_lines(out)


def check_os_update(timeout=30) -> bool:
    """softwareupdate -l lists pending updates as '* Label: ...' lines."""
    out = run_with_timeout(timeout, [SOFTWAREUPDATE, "-l"])
    return any(ln.lstrip().startswith("*") for ln in out.splitlines())


def count_app_store_updates(timeout=30) -> Optional[int]:
    mas = find_mas()
    if not mas:
        return None
    return _count_lines(run_with_timeout(timeout, [mas, "outdated"]))


def _brew_counts(brew, timeout, cache: UpdateCache, use_cache: bool):
    cached = cache.get(BREW_CACHE) if use_cache else None
    if cached is not None:
        return cached.get("formula"), cached.get("cask")
    formula = count_brew_outdated(brew, "formula", timeout)
    cask = count_brew_outdated(brew, "cask", timeout)
    if formula is not None and cask is not None:
        cache.put(BREW_CACHE, {"formula": formula, "cask": cask})
    return formula, cask


def _latest_version(channel: SelfUpdateChannel, cache: UpdateCache, use_cache: bool):
    cached = cache.get(VERSION_CACHE) if use_cache else None
    if cached is not None:
        return cached.get("latest")
    latest = channel.fetch_latest_version()
    if latest:
        cache.put(VERSION_CACHE, {"latest": latest})
    return latest


def collect_updates(
    cfg: Optional[dict] = None,
    cache: Optional[UpdateCache] = None,
    channel: Optional[SelfUpdateChannel] = None,
    brew: Optional[str] = None,
    use_cache=True,
    current_version=__version__,
) -> UpdateSummary:
    """Query every source. Decides nothing; only fills the summary."""
    cfg = cfg or config_module.load()
    timeout = cfg["update_check_timeout"]
    cache = cache or UpdateCache(ttl_hours=cfg["update_check_ttl_hours"])
    channel = channel or SelfUpdateChannel(cfg["self_update_repo"], timeout=timeout)
    brew = brew or find_brew()

    summary = UpdateSummary(current_version=current_version)
    with busy("Checking for updates..."):
        if brew:
            formula, cask = _brew_counts(brew, timeout, cache, use_cache)
            summary.statuses[UpdateSource.FORMULA] = SourceStatus(UpdateSource.FORMULA, count=formula)
            summary.statuses[UpdateSource.CASK] = SourceStatus(UpdateSource.CASK, count=cask)
        else:
            logger.debug("Homebrew not installed; skipping package updates")
        summary.statuses[UpdateSource.OS] = SourceStatus(UpdateSource.OS, flag=check_os_update(timeout))
        summary.statuses[UpdateSource.APP_STORE] = SourceStatus(
            UpdateSource.APP_STORE, count=count_app_store_updates(timeout)
        )
        latest = _latest_version(channel, cache, use_cache)
        summary.latest_version = latest
        summary.statuses[UpdateSource.SELF] = SourceStatus(
            UpdateSource.SELF, flag=self_update_available(current_version, latest)
        )
    return summary
