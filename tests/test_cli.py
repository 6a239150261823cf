import contextlib
import io
import json
import unittest
from unittest.mock import patch

from docsync import cli
from docsync.sync.domain.errors import MalformedResponseError, SyncFailedError
from docsync.sync.domain.models import SyncAllReport, SyncFailure, SyncResult
from tests.utils.tempdir import managed_temp_dir

DOCS_CONFIG = {
    "jest": {
        "name": "Jest",
        "repositoryId": "jestjs/jest",
        "sourcePath": "docs",
        "targetPath": "docs/jest",
        "excludePatterns": ["CHANGELOG*"],
    },
    "broken": {"name": "Broken", "repositoryId": "jestjs", "sourcePath": "docs", "targetPath": "docs/broken"},
}


def run_cli(argv: list[str]) -> tuple[int, str]:
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        code = cli.main(argv)
    return code, out.getvalue()


class CliTests(unittest.TestCase):
    def setUp(self):
        self._tmp = managed_temp_dir("cli")
        tmp = self._tmp.__enter__()
        self.addCleanup(self._tmp.__exit__, None, None, None)
        self.config_path = tmp / "docs-config.json"
        self.config_path.write_text(json.dumps(DOCS_CONFIG), encoding="utf-8")
        self.missing_path = tmp / "missing.json"

    def test_validate_valid_source(self):
        code, out = run_cli(["--config", str(self.config_path), "validate", "jest"])
        self.assertEqual(code, 0)
        self.assertIn("Configuration is valid!", out)
        self.assertIn("Exclude Patterns: CHANGELOG*", out)

    def test_validate_invalid_source(self):
        code, out = run_cli(["--config", str(self.config_path), "validate", "broken"])
        self.assertEqual(code, 1)
        self.assertIn("Configuration validation failed", out)

    def test_validate_unknown_source(self):
        code, out = run_cli(["--config", str(self.config_path), "validate", "mocha"])
        self.assertEqual(code, 1)
        self.assertIn("Available sources: jest, broken", out)

    def test_list_shows_sources(self):
        code, out = run_cli(["--config", str(self.config_path), "list"])
        self.assertEqual(code, 0)
        self.assertIn("- jest", out)
        self.assertIn("Repository: https://github.com/jestjs/jest", out)

    def test_missing_config_file_fails(self):
        code, out = run_cli(["--config", str(self.missing_path), "list"])
        self.assertEqual(code, 1)
        self.assertIn("Operation failed", out)

    def test_help_survives_missing_config(self):
        with contextlib.redirect_stderr(io.StringIO()):
            code, out = run_cli(["--config", str(self.missing_path)])
        self.assertEqual(code, 0)
        self.assertIn("unavailable", out)
        self.assertIn("5000 requests/hour", out)

    def test_sync_all_exit_code_reflects_failures(self):
        report = SyncAllReport(results=(), failures=(SyncFailure(source_key="broken", error="boom"),))
        with patch("docsync.cli.sync_all", return_value=report) as sync_all:
            code, out = run_cli(["--config", str(self.config_path), "--no-progress", "sync-all"])
        self.assertEqual(code, 1)
        self.assertIn("broken: boom", out)
        self.assertEqual(sync_all.call_args.kwargs, {"show_progress": False})

    def test_bare_key_runs_sync(self):
        result = SyncResult(
            source_key="jest",
            name="Jest",
            repository_id="jestjs/jest",
            files_processed=3,
            target_path="docs/jest",
            duration_seconds=0.5,
            timestamp="2026-01-01T00:00:00+00:00",
            files=("a.md", "b.md", "c.md"),
        )
        with patch("docsync.cli.sync_key", return_value=result) as sync_key:
            code, out = run_cli(["--config", str(self.config_path), "jest"])
        self.assertEqual(code, 0)
        self.assertEqual(sync_key.call_args.args[1], "jest")
        self.assertIn("Files processed: 3", out)

    def test_commands_are_case_insensitive(self):
        report = SyncAllReport(results=(), failures=())
        with patch("docsync.cli.sync_all", return_value=report) as sync_all:
            code, _out = run_cli(["--config", str(self.config_path), "SYNC-ALL"])
        self.assertEqual(code, 0)
        sync_all.assert_called_once()

    def test_list_reports_non_object_entries(self):
        self.config_path.write_text(json.dumps({"jest": DOCS_CONFIG["jest"], "bad": "oops"}), encoding="utf-8")
        code, out = run_cli(["--config", str(self.config_path), "list"])
        self.assertEqual(code, 0)
        self.assertIn("- bad", out)
        self.assertIn("Invalid entry: expected an object, got str", out)

    def test_undecodable_download_is_reported_not_raised(self):
        error = SyncFailedError("jest", "docs/binary.md", MalformedResponseError("not valid text"))
        with patch("docsync.cli.sync_key", side_effect=error):
            code, out = run_cli(["--config", str(self.config_path), "sync", "jest"])
        self.assertEqual(code, 1)
        self.assertIn("Operation failed", out)
        self.assertIn("MalformedResponseError", out)


class LegacyArgvTests(unittest.TestCase):
    def test_known_command_is_untouched(self):
        self.assertEqual(cli._legacy_argv(["list"]), ["list"])

    def test_command_is_lowercased(self):
        self.assertEqual(cli._legacy_argv(["--no-progress", "SYNC-ALL"]), ["--no-progress", "sync-all"])

    def test_bare_key_becomes_sync(self):
        self.assertEqual(cli._legacy_argv(["nextjs"]), ["sync", "nextjs"])

    def test_config_value_is_not_mistaken_for_key(self):
        self.assertEqual(
            cli._legacy_argv(["--config", "x.json", "nextjs"]),
            ["--config", "x.json", "sync", "nextjs"],
        )

    def test_empty_argv(self):
        self.assertEqual(cli._legacy_argv([]), [])
