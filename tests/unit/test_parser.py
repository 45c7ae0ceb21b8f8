"""Tests for the command task file parser."""

import json
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from cmdrunner.parser import (
    ConfigError,
    ConfigReadError,
    TaskRecord,
    find_commands_file,
    get_user_config_path,
    load_tasks,
)


class TestGetUserConfigPath(unittest.TestCase):
    """
    Tests for get_user_config_path function.
    """

    def test_swaps_reserved_filename(self):
        result = get_user_config_path(Path("/src/app/commands.json"))
        self.assertEqual(result, Path("/src/app/commands.user.json"))

    def test_keeps_directory(self):
        result = get_user_config_path(Path("/a/b/c/commands.json"))
        self.assertEqual(result.parent, Path("/a/b/c"))


class TestFindCommandsFile(unittest.TestCase):
    """
    Tests for find_commands_file function.
    """

    def test_finds_file_in_start_dir(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "commands.json").write_text("{}")
            self.assertEqual(find_commands_file(root), (root / "commands.json").resolve())

    def test_finds_file_in_parent_dir(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "commands.json").write_text("{}")
            nested = root / "a" / "b"
            nested.mkdir(parents=True)
            self.assertEqual(find_commands_file(nested), (root / "commands.json").resolve())


class TestLoadTasks(unittest.TestCase):
    """
    Tests for load_tasks function.
    """

    def setUp(self):
        self._tmpdir = TemporaryDirectory()
        self.path = Path(self._tmpdir.name) / "commands.json"

    def tearDown(self):
        self._tmpdir.cleanup()

    def test_missing_file_returns_none(self):
        self.assertIsNone(load_tasks(self.path))

    def test_empty_file_returns_none(self):
        self.path.write_text("")
        self.assertIsNone(load_tasks(self.path))

    def test_whitespace_only_file_returns_none(self):
        self.path.write_text("   \n\n  ")
        self.assertIsNone(load_tasks(self.path))

    def test_document_without_commands_returns_none(self):
        self.path.write_text('{"other": 1}')
        self.assertIsNone(load_tasks(self.path))

    def test_empty_commands_returns_empty_list(self):
        self.path.write_text('{"commands": {}}')
        self.assertEqual(load_tasks(self.path), [])

    def test_null_commands_returns_empty_list(self):
        self.path.write_text('{"commands": null}')
        self.assertEqual(load_tasks(self.path), [])

    def test_parses_all_fields(self):
        self.path.write_text("""
{
  "commands": {
    "Build": {
      "fileName": "cmd.exe",
      "workingDirectory": "$(SolutionDir)",
      "arguments": "/c build.cmd"
    }
  }
}
""")
        self.assertEqual(
            load_tasks(self.path),
            [TaskRecord("Build", "cmd.exe", "/c build.cmd", "$(SolutionDir)")],
        )

    def test_optional_fields_default(self):
        self.path.write_text('{"commands": {"Test": {"fileName": "pytest"}}}')
        [record] = load_tasks(self.path)
        self.assertEqual(record.arguments, "")
        self.assertIsNone(record.working_directory)

    def test_preserves_file_order(self):
        self.path.write_text("""
{"commands": {
  "zeta": {"fileName": "z"},
  "alpha": {"fileName": "a"},
  "mid": {"fileName": "m"}
}}
""")
        self.assertEqual([r.name for r in load_tasks(self.path)], ["zeta", "alpha", "mid"])

    def test_backslashes_in_json_strings(self):
        self.path.write_text('{"commands": {"Run": {"fileName": "bin\\\\Debug\\\\app.exe"}}}')
        [record] = load_tasks(self.path)
        self.assertEqual(record.file_name, "bin\\Debug\\app.exe")

    def test_accepts_utf8_bom(self):
        self.path.write_bytes(b'\xef\xbb\xbf{"commands": {"Run": {"fileName": "x"}}}')
        self.assertEqual(len(load_tasks(self.path)), 1)

    def test_tab_indented_json(self):
        document = {"commands": {"Run": {"fileName": "make", "arguments": "all"}}}
        self.path.write_text(json.dumps(document, indent="\t"))
        self.assertEqual(load_tasks(self.path), [TaskRecord("Run", "make", "all")])

    def test_yaml_syntax_rejected(self):
        self.path.write_text("commands:\n  Run:\n    fileName: make\n    arguments: all\n")
        with self.assertRaises(ConfigError):
            load_tasks(self.path)

    def test_invalid_syntax_raises(self):
        self.path.write_text('{"commands": {')
        with self.assertRaises(ConfigError):
            load_tasks(self.path)

    def test_non_object_document_raises(self):
        self.path.write_text('["a", "b"]')
        with self.assertRaises(ConfigError):
            load_tasks(self.path)

    def test_non_object_commands_raises(self):
        self.path.write_text('{"commands": ["a"]}')
        with self.assertRaises(ConfigError):
            load_tasks(self.path)

    def test_missing_file_name_raises(self):
        self.path.write_text('{"commands": {"Run": {"arguments": "x"}}}')
        with self.assertRaises(ConfigError) as cm:
            load_tasks(self.path)
        self.assertIn("fileName", str(cm.exception))

    def test_non_string_arguments_raises(self):
        self.path.write_text('{"commands": {"Run": {"fileName": "x", "arguments": 5}}}')
        with self.assertRaises(ConfigError):
            load_tasks(self.path)

    def test_non_string_working_directory_raises(self):
        self.path.write_text('{"commands": {"Run": {"fileName": "x", "workingDirectory": []}}}')
        with self.assertRaises(ConfigError):
            load_tasks(self.path)

    def test_unreadable_file_raises_read_error(self):
        self.path.write_text('{"commands": {}}')
        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with self.assertRaises(ConfigReadError) as cm:
                load_tasks(self.path)
        self.assertIsInstance(cm.exception, ConfigError)
        self.assertIn("denied", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
