"""Path and tool constants for mac-tidy-cli."""

import pathlib

HOME = str(pathlib.Path.home())

PREFERENCES_DIR = f"{HOME}/Library/Preferences"
BYHOST_SUBDIR = "ByHost"
LAUNCH_AGENTS_DIR = f"{HOME}/Library/LaunchAgents"
CACHE_DIR = f"{HOME}/.cache/mac-tidy"

PLIST_GLOB = "*.plist"

# Files owned by the OS vendor are never touched, even when invalid.
PREFERENCE_SYSTEM_PREFIXES = ("com.apple.", ".GlobalPreferences")
PREFERENCE_PROTECTED_NAMES = frozenset({"loginwindow.plist"})
LOGIN_ITEM_SYSTEM_PREFIXES = ("com.apple.",)

LIST_TIMEOUT = 10
SIZE_TIMEOUT = 5
DEREGISTER_TIMEOUT = 5

BREW_PATHS = ["/opt/homebrew/bin/brew", "/usr/local/bin/brew"]
MAS_PATHS = ["/opt/homebrew/bin/mas", "/usr/local/bin/mas"]
SOFTWAREUPDATE = "/usr/sbin/softwareupdate"
LAUNCHCTL = "/bin/launchctl"

GITHUB_API = "https://api.github.com"
INSTALLER_URL = "https://raw.githubusercontent.com/{repo}/main/install.sh"

PLUTIL_PATHS = ["/usr/bin/plutil"]
LINT_TIMEOUT = 5
