#!/usr/bin/env python3
"""Remove (or simulate removing) broken artifacts."""
import logging
import os
from typing import Iterable

from ..core.constants import DEREGISTER_TIMEOUT, LAUNCHCTL
from ..core.models import ArtifactKind, RemediationResult, RemovalCandidate
from ..utils.process import run_cmd

logger = logging.getLogger(__name__)


def deregister_login_item(path, timeout=DEREGISTER_TIMEOUT) -> bool:
    """launchctl unload; failure is logged and otherwise ignored."""
    ok, err = run_cmd([LAUNCHCTL, "unload", str(path)], timeout=timeout)
    if not ok:
        logger.debug("launchctl unload %s failed: %s", path, err)
    return ok


def remove_file(path) -> bool:
    try:
        os.remove(path)
        return True
    except OSError as e:
        logger.debug("Could not remove %s: %s", path, e)
        return False


def remediate(removal_set: Iterable[RemovalCandidate], dry_run=False) -> RemediationResult:
    """Delete every candidate, best effort.

    Candidates count toward the result whether or not the deletion worked,
    so reported sizes can exceed what was actually freed.
    """
    count = 0
    total_kb = 0
    for candidate in removal_set:
        if not dry_run:
            path = candidate.artifact.path
            if candidate.artifact.kind is ArtifactKind.LOGIN_ITEM:
                deregister_login_item(path)
            remove_file(path)
        count += 1
        total_kb += candidate.size_kb
    return RemediationResult(count=count, total_size_kb=total_kb)
