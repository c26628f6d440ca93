#!/usr/bin/env python3
"""Configuration for mac_tidy."""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

HOME = str(Path.home())
CONFIG_PATHS = [
    os.path.join(HOME, ".mactidyrc"),
    os.path.join(HOME, ".config", "mac-tidy", "config.json"),
]

DEFAULTS: dict[str, Any] = {
    "exclude_tasks": [],
    "protected_names": [],
    "list_timeout": 10,
    "size_timeout": 5,
    "update_check_timeout": 30,
    "brew_upgrade_timeout": 1800,
    "update_check_ttl_hours": 6,
    "self_update_repo": "mac-tidy/mac-tidy-cli",
}

VALID_KEYS = frozenset(DEFAULTS.keys())

# (min, max) for integer settings
INT_RANGES: dict[str, tuple[int, int]] = {
    "list_timeout": (1, 120),
    "size_timeout": (1, 60),
    "update_check_timeout": (1, 600),
    "brew_upgrade_timeout": (60, 7200),
    "update_check_ttl_hours": (0, 168),
}

_REPO_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


def config_path() -> str:
    """Preferred config file path (create dirs if needed)."""
    return CONFIG_PATHS[0]


def config_exists() -> bool:
    """True if any known config file exists."""
    for p in CONFIG_PATHS:
        if os.path.isfile(p):
            return True
    return False


def _apply(out: dict[str, Any], raw: dict[str, Any]) -> None:
    for k, v in raw.items():
        if k not in VALID_KEYS:
            logger.debug("Ignoring unknown config key %r", k)
            continue
        if k in ("exclude_tasks", "protected_names") and isinstance(v, list):
            out[k] = [str(x) for x in v if isinstance(x, str)][:200]
        elif k in INT_RANGES and isinstance(v, (int, float)) and not isinstance(v, bool):
            lo, hi = INT_RANGES[k]
            val = int(v)
            if lo <= val <= hi:
                out[k] = val
        elif k == "self_update_repo" and isinstance(v, str) and _REPO_RE.match(v):
            out[k] = v


def load() -> dict[str, Any]:
    """Load config from first existing file. Returns defaults + overrides."""
    out = dict(DEFAULTS)
    for p in CONFIG_PATHS:
        if not os.path.isfile(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                continue
            _apply(out, raw)
            return out
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load config %s: %s", p, e)
            continue
    return out


def save(cfg: dict[str, Any], path: str | None = None) -> None:
    """Write config to path (default: config_path()). Creates parent dirs."""
    p = path or config_path()
    dirname = os.path.dirname(p)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    to_write = {k: cfg.get(k, DEFAULTS[k]) for k in sorted(VALID_KEYS)}
    with open(p, "w", encoding="utf-8") as f:
        json.dump(to_write, f, indent=2)


def init_config() -> str:
    """Create default config file. Returns path used."""
    p = config_path()
    save(DEFAULTS, p)
    return p
