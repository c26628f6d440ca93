"""Property-list validation for preference files and login items."""
import logging
import os
import plistlib
import subprocess
from typing import Iterable, Optional

from ..core.constants import (
    PREFERENCE_SYSTEM_PREFIXES,
    PREFERENCE_PROTECTED_NAMES,
    LOGIN_ITEM_SYSTEM_PREFIXES,
    PLUTIL_PATHS,
    LINT_TIMEOUT,
)
from ..core.models import ArtifactKind, ConfigArtifact, OwnerClass, ValidationResult
from ..utils.process import find_tool

logger = logging.getLogger(__name__)

# Old-style (OpenStep) plists: plutil accepts them, plistlib cannot read them.
OPENSTEP_STARTS = (b"{", b"(", b"\"", b"/*", b"//")


def is_system_owned(name: str, kind: ArtifactKind, protected_names: Iterable[str] = ()) -> bool:
    if name in protected_names:
        return True
    if kind is ArtifactKind.PREFERENCE:
        return name.startswith(PREFERENCE_SYSTEM_PREFIXES) or name in PREFERENCE_PROTECTED_NAMES
    return name.startswith(LOGIN_ITEM_SYSTEM_PREFIXES)


def classify(path, kind: ArtifactKind, protected_names: Iterable[str] = ()) -> ConfigArtifact:
    path = str(path)
    owner = OwnerClass.SYSTEM if is_system_owned(os.path.basename(path), kind, protected_names) else OwnerClass.USER
    return ConfigArtifact(path=path, kind=kind, owner=owner)


def _load_plist(path: str):
    with open(path, "rb") as f:
        return plistlib.load(f)


def find_plutil():
    return find_tool(PLUTIL_PATHS, "plutil")


def plutil_lint(plutil: str, path: str, timeout=LINT_TIMEOUT) -> Optional[bool]:
    """plutil -lint verdict, or None when plutil could not give one."""
    try:
        proc = subprocess.run([plutil, "-lint", path], capture_output=True, text=True, timeout=timeout)
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.debug("plutil -lint %s failed: %s", path, e)
        return None
    return proc.returncode == 0


def _parses(path: str) -> bool:
    """plistlib fallback; OpenStep text is accepted since plistlib cannot check it."""
    try:
        _load_plist(path)
    except OSError as e:
        logger.debug("Cannot read %s: %s", path, e)
        return True
    except Exception as e:
        # plistlib surfaces malformed input as many exception types
        try:
            with open(path, "rb") as f:
                head = f.read(64).lstrip()
        except OSError:
            return True
        if head.startswith(OPENSTEP_STARTS):
            logger.debug("Skipping old-style plist %s", path)
            return True
        logger.debug("Invalid plist %s: %s", path, e)
        return False
    return True


def is_valid_plist(path: str) -> bool:
    """True unless the linter rejects the file. Unreadable files are not provably broken."""
    if not os.access(path, os.R_OK):
        return True
    plutil = find_plutil()
    if plutil:
        verdict = plutil_lint(plutil, path)
        if verdict is not None:
            return verdict
    return _parses(path)


def extract_program(path: str) -> Optional[str]:
    """Program, else ProgramArguments[0]; None when neither is usable."""
    try:
        data = _load_plist(path)
    except Exception:
        return None
    if not isinstance(data, dict):
        return None
    program = data.get("Program")
    if isinstance(program, str) and program:
        return program
    args = data.get("ProgramArguments")
    if isinstance(args, list) and args and isinstance(args[0], str) and args[0]:
        return args[0]
    return None


def validate_preference(path, protected_names: Iterable[str] = ()) -> ValidationResult:
    artifact = classify(path, ArtifactKind.PREFERENCE, protected_names)
    if artifact.system_owned:
        return ValidationResult(artifact, True)
    return ValidationResult(artifact, is_valid_plist(artifact.path))


def validate_login_item(path, protected_names: Iterable[str] = ()) -> ValidationResult:
    artifact = classify(path, ArtifactKind.LOGIN_ITEM, protected_names)
    if artifact.system_owned:
        return ValidationResult(artifact, True)
    program = extract_program(artifact.path)
    if not program:
        return ValidationResult(artifact, True)
    return ValidationResult(artifact, os.path.exists(program), program_path=program)
