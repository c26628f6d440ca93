"""Tests for mac_tidy.utils.disk and the bounded command helpers."""
import subprocess
import unittest
from unittest import mock

from mac_tidy.utils import disk, process


class TestMeasureSize(unittest.TestCase):
    def test_du_output_in_kb(self) -> None:
        with mock.patch.object(disk, "run_with_timeout", return_value="12\t/tmp/x.plist\n") as run:
            self.assertEqual(disk.measure_size_kb("/tmp/x.plist", timeout=3), 12)
        run.assert_called_once_with(3, ["du", "-sk", "/tmp/x.plist"])

    def test_timeout_counts_as_zero(self) -> None:
        with mock.patch.object(disk, "run_with_timeout", return_value=""):
            self.assertEqual(disk.measure_size_kb("/tmp/x.plist", timeout=1), 0)

    def test_unreadable_output_counts_as_zero(self) -> None:
        for out in ("oops\t/tmp/x.plist\n", "du: /tmp/x.plist: Permission denied\n", "  \n"):
            with mock.patch.object(disk, "run_with_timeout", return_value=out):
                self.assertEqual(disk.measure_size_kb("/tmp/x.plist"), 0, out)

    def test_human_size(self) -> None:
        self.assertEqual(disk.human_size(512), "512.0 B")
        self.assertEqual(disk.human_size(4 * 1024), "4.0 KB")


class TestRunOutput(unittest.TestCase):
    def run_output(self, result, **kwargs):
        with mock.patch.object(process.subprocess, "run", **result):
            return process.run_output(5, ["brew", "outdated"], **kwargs)

    def test_timeout_and_missing_tool_are_none(self) -> None:
        self.assertIsNone(self.run_output({"side_effect": subprocess.TimeoutExpired("brew", 5)}))
        self.assertIsNone(self.run_output({"side_effect": FileNotFoundError("brew")}))

    def test_exit_status(self) -> None:
        ok = subprocess.CompletedProcess([], 0, "git\n", "")
        listed = subprocess.CompletedProcess([], 1, "git\n", "")
        failed = subprocess.CompletedProcess([], 1, "", "Error: offline")
        self.assertEqual(self.run_output({"return_value": ok}), "git\n")
        self.assertIsNone(self.run_output({"return_value": listed}))
        self.assertEqual(self.run_output({"return_value": listed}, strict=False), "git\n")
        self.assertIsNone(self.run_output({"return_value": failed}, strict=False))

    def test_run_with_timeout_stays_empty_on_timeout(self) -> None:
        with mock.patch.object(process.subprocess, "run", side_effect=subprocess.TimeoutExpired("du", 1)):
            self.assertEqual(process.run_with_timeout(1, ["du", "-sk", "/"]), "")
