#!/usr/bin/env python3
"""Scan logic: enumerate plists under fixed roots and collect broken ones."""
import logging
import os
from typing import Iterable, List

from ..core.constants import BYHOST_SUBDIR, LIST_TIMEOUT, PLIST_GLOB, SIZE_TIMEOUT
from ..core.models import RemovalCandidate
from ..utils import disk
from ..utils.process import run_with_timeout
from ..utils.terminal import busy
from . import validator

logger = logging.getLogger(__name__)


def list_plists(root, recursive=False, timeout=LIST_TIMEOUT) -> List[str]:
    """Regular *.plist files under root, in find order. Empty on timeout."""
    args = ["find", str(root)]
    if not recursive:
        args += ["-maxdepth", "1"]
    args += ["-name", PLIST_GLOB, "-type", "f"]
    out = run_with_timeout(timeout, args)
    return [ln for ln in out.splitlines() if ln.strip()]


def _collect(paths, validate, protected_names, size_timeout, out):
    for p in paths:
        if not os.path.isfile(p):
            continue
        result = validate(p, protected_names)
        if result.artifact.system_owned or result.is_valid:
            continue
        size = disk.measure_size_kb(p, timeout=size_timeout)
        logger.debug("Broken %s: %s (%d KB)", result.artifact.kind.value, p, size)
        out.append(RemovalCandidate(result.artifact, size))


def scan_preferences(
    root,
    list_timeout=LIST_TIMEOUT,
    size_timeout=SIZE_TIMEOUT,
    protected_names: Iterable[str] = (),
) -> List[RemovalCandidate]:
    """Broken preference files directly under root plus anywhere under root/ByHost."""
    out: List[RemovalCandidate] = []
    if not os.path.isdir(root):
        return out
    protected_names = tuple(protected_names)
    with busy("Checking preference files..."):
        _collect(list_plists(root, timeout=list_timeout), validator.validate_preference, protected_names, size_timeout, out)
        byhost = os.path.join(str(root), BYHOST_SUBDIR)
        if os.path.isdir(byhost):
            paths = list_plists(byhost, recursive=True, timeout=list_timeout)
            _collect(paths, validator.validate_preference, protected_names, size_timeout, out)
    return out


def scan_login_items(
    root,
    list_timeout=LIST_TIMEOUT,
    size_timeout=SIZE_TIMEOUT,
    protected_names: Iterable[str] = (),
) -> List[RemovalCandidate]:
    """Login item descriptors under root whose program no longer exists."""
    out: List[RemovalCandidate] = []
    if not os.path.isdir(root):
        return out
    with busy("Checking login items..."):
        paths = list_plists(root, timeout=list_timeout)
        _collect(paths, validator.validate_login_item, tuple(protected_names), size_timeout, out)
    return out
