"""Tests for mac_tidy.services.validator."""
import os
import tempfile
import subprocess
import unittest
from unittest import mock

from mac_tidy.core.models import ArtifactKind, OwnerClass
from mac_tidy.services import validator

from .helpers import write_bytes, write_plist


class TestPreferenceValidation(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        patcher = mock.patch.object(validator, "find_plutil", return_value=None)
        patcher.start()
        self.addCleanup(patcher.stop)

    def path(self, name: str) -> str:
        return os.path.join(self.tmp.name, name)

    def test_valid_xml_plist(self) -> None:
        p = write_plist(self.path("org.example.app.plist"), {"Key": "value", "Count": 3})
        result = validator.validate_preference(p)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.artifact.kind, ArtifactKind.PREFERENCE)
        self.assertEqual(result.artifact.owner, OwnerClass.USER)

    def test_valid_binary_plist(self) -> None:
        import plistlib

        p = write_bytes(self.path("org.example.bin.plist"), plistlib.dumps({"a": 1}, fmt=plistlib.FMT_BINARY))
        self.assertTrue(validator.validate_preference(p).is_valid)

    def test_garbage_is_invalid(self) -> None:
        p = write_bytes(self.path("org.example.broken.plist"), b"this is not a property list")
        self.assertFalse(validator.validate_preference(p).is_valid)

    def test_truncated_xml_is_invalid(self) -> None:
        p = write_bytes(self.path("org.example.cut.plist"), b'<?xml version="1.0"?><plist><dict><key>a</key>')
        self.assertFalse(validator.validate_preference(p).is_valid)

    def test_empty_file_is_invalid(self) -> None:
        p = write_bytes(self.path("org.example.empty.plist"), b"")
        self.assertFalse(validator.validate_preference(p).is_valid)

    def test_system_owned_never_broken(self) -> None:
        for name in ("com.apple.finder.plist", ".GlobalPreferences.plist", "loginwindow.plist"):
            p = write_bytes(self.path(name), b"garbage")
            result = validator.validate_preference(p)
            self.assertTrue(result.is_valid, name)
            self.assertEqual(result.artifact.owner, OwnerClass.SYSTEM)

    def test_configured_protected_name(self) -> None:
        p = write_bytes(self.path("org.example.keep.plist"), b"garbage")
        self.assertTrue(validator.validate_preference(p, ["org.example.keep.plist"]).is_valid)

    def test_malformed_date_is_invalid(self) -> None:
        body = (
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b'<plist version="1.0"><dict><key>When</key><date>not-a-date</date></dict></plist>\n'
        )
        p = write_bytes(self.path("org.example.date.plist"), body)
        self.assertFalse(validator.validate_preference(p).is_valid)

    def test_openstep_plist_is_not_broken(self) -> None:
        p = write_bytes(self.path("org.example.old.plist"), b'{ Name = "Example"; Count = 3; }\n')
        self.assertTrue(validator.validate_preference(p).is_valid)


class TestPlutilLint(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.plist = write_bytes(os.path.join(self.tmp.name, "org.example.lint.plist"), b'{ Name = "x"; }')
        patcher = mock.patch.object(validator, "find_plutil", return_value="/usr/bin/plutil")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_plutil_verdict_wins(self) -> None:
        with mock.patch.object(validator.subprocess, "run") as run:
            run.return_value = subprocess.CompletedProcess([], 0, "OK", "")
            self.assertTrue(validator.validate_preference(self.plist).is_valid)
            run.return_value = subprocess.CompletedProcess([], 1, "", "bad")
            self.assertFalse(validator.validate_preference(self.plist).is_valid)
        self.assertEqual(run.call_args[0][0], ["/usr/bin/plutil", "-lint", self.plist])

    def test_plutil_timeout_falls_back_to_parser(self) -> None:
        junk = write_bytes(os.path.join(self.tmp.name, "org.example.junk.plist"), b"junk")
        with mock.patch.object(validator.subprocess, "run", side_effect=subprocess.TimeoutExpired("plutil", 5)):
            self.assertTrue(validator.validate_preference(self.plist).is_valid)
            self.assertFalse(validator.validate_preference(junk).is_valid)


class TestLoginItemValidation(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.program = write_bytes(os.path.join(self.tmp.name, "agent-bin"), b"#!/bin/sh\n")

    def agent(self, name: str, data) -> str:
        return write_plist(os.path.join(self.tmp.name, name), data)

    def test_program_exists(self) -> None:
        p = self.agent("org.example.ok.plist", {"Label": "ok", "Program": self.program})
        result = validator.validate_login_item(p)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.program_path, self.program)

    def test_program_missing(self) -> None:
        missing = os.path.join(self.tmp.name, "gone")
        p = self.agent("org.example.gone.plist", {"Label": "gone", "Program": missing})
        result = validator.validate_login_item(p)
        self.assertFalse(result.is_valid)
        self.assertEqual(result.program_path, missing)

    def test_program_arguments_fallback(self) -> None:
        missing = os.path.join(self.tmp.name, "gone")
        p = self.agent("org.example.args.plist", {"Label": "args", "ProgramArguments": [missing, "--flag"]})
        self.assertEqual(validator.extract_program(p), missing)
        self.assertFalse(validator.validate_login_item(p).is_valid)

    def test_program_preferred_over_arguments(self) -> None:
        p = self.agent(
            "org.example.both.plist",
            {"Program": self.program, "ProgramArguments": ["/nonexistent/tool"]},
        )
        self.assertEqual(validator.extract_program(p), self.program)
        self.assertTrue(validator.validate_login_item(p).is_valid)

    def test_no_program_reference_is_not_broken(self) -> None:
        p = self.agent("org.example.none.plist", {"Label": "none", "ProgramArguments": []})
        result = validator.validate_login_item(p)
        self.assertTrue(result.is_valid)
        self.assertIsNone(result.program_path)

    def test_unparsable_descriptor_is_not_broken(self) -> None:
        p = write_bytes(os.path.join(self.tmp.name, "org.example.junk.plist"), b"junk")
        self.assertTrue(validator.validate_login_item(p).is_valid)

    def test_malformed_date_descriptor_is_not_broken(self) -> None:
        body = b'<?xml version="1.0"?><plist version="1.0"><dict><key>Program</key><string>/nonexistent/x</string>' \
            b'<key>When</key><date>not-a-date</date></dict></plist>'
        p = write_bytes(os.path.join(self.tmp.name, "org.example.date.plist"), body)
        self.assertIsNone(validator.extract_program(p))
        self.assertTrue(validator.validate_login_item(p).is_valid)

    def test_apple_agent_skipped(self) -> None:
        p = self.agent("com.apple.something.plist", {"Program": "/nonexistent/apple"})
        result = validator.validate_login_item(p)
        self.assertTrue(result.is_valid)
        self.assertTrue(result.artifact.system_owned)
