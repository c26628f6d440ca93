#!/usr/bin/env python3
"""Self-update channel: latest published version and installer download."""
import json
import logging
import subprocess
import urllib.error
import urllib.request
from typing import Optional

from .. import __version__
from ..core.constants import GITHUB_API, INSTALLER_URL

logger = logging.getLogger(__name__)

USER_AGENT_HEADERS = {"User-Agent": f"mac-tidy-cli/{__version__}"}


def normalize_version(v: Optional[str]) -> str:
    v = (v or "").strip()
    return v[1:] if v[:1] in ("v", "V") else v


def self_update_available(current: str, latest: Optional[str]) -> bool:
    """Unknown latest or the same version string -> nothing to install."""
    if not latest:
        return False
    return normalize_version(current) != normalize_version(latest)


class SelfUpdateChannel:
    """Release lookups and installer handling for one GitHub repository."""

    def __init__(self, repo: str, timeout: int = 30):
        self.repo = repo
        self.timeout = timeout

    @property
    def installer_url(self) -> str:
        return INSTALLER_URL.format(repo=self.repo)

    def _get(self, url: str, headers: Optional[dict] = None) -> bytes:
        req = urllib.request.Request(url, headers=headers or USER_AGENT_HEADERS)
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            return resp.read()

    def fetch_latest_version(self) -> Optional[str]:
        """Tag of the latest release with any leading 'v' removed; None when unreachable."""
        url = f"{GITHUB_API}/repos/{self.repo}/releases/latest"
        headers = dict(USER_AGENT_HEADERS, Accept="application/vnd.github+json")
        try:
            data = json.loads(self._get(url, headers).decode("utf-8"))
        except (urllib.error.URLError, OSError, ValueError) as e:
            logger.debug("Latest version lookup failed: %s", e)
            return None
        tag = data.get("tag_name") if isinstance(data, dict) else None
        return normalize_version(tag) or None

    def download_installer(self, dest: str) -> str:
        body = self._get(self.installer_url)
        with open(dest, "wb") as f:
            f.write(body)
        return dest

    def execute_installer(self, path: str, timeout: int = 600) -> None:
        subprocess.run(["/bin/bash", path], check=True, timeout=timeout)
