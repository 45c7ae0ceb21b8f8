"""Tests for MSBuild property reading and the property macro provider."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from cmdrunner.msbuild import (
    MSBuildPropertyProvider,
    NullMacroProvider,
    load_project_properties,
)

from helpers.logging import logger_stub
from helpers.solution import APP_PROJECT, LIB_PROJECT


class TestLoadProjectProperties(unittest.TestCase):
    """Tests for load_project_properties."""

    def setUp(self):
        self._tmpdir = TemporaryDirectory()
        self.root = Path(self._tmpdir.name)

    def tearDown(self):
        self._tmpdir.cleanup()

    def _write(self, name: str, content: str) -> Path:
        path = self.root / name
        path.write_text(content)
        return path

    def test_missing_file_returns_none(self):
        self.assertIsNone(load_project_properties(self.root / "missing.csproj"))

    def test_non_msbuild_extension_returns_none(self):
        path = self._write("package.json", "{}")
        self.assertIsNone(load_project_properties(path))

    def test_directory_returns_none(self):
        (self.root / "site.csproj").mkdir()
        self.assertIsNone(load_project_properties(self.root / "site.csproj"))

    def test_invalid_xml_returns_none(self):
        path = self._write("broken.csproj", "<Project><PropertyGroup>")
        self.assertIsNone(load_project_properties(path))

    def test_non_project_root_returns_none(self):
        path = self._write("other.csproj", "<Something />")
        self.assertIsNone(load_project_properties(path))

    def test_unconditional_properties_with_namespace(self):
        path = self._write("App.csproj", APP_PROJECT)
        properties = load_project_properties(path)
        self.assertEqual(properties["AssemblyName"], "MyApp")
        self.assertEqual(properties["OutputType"], "Exe")
        self.assertNotIn("OutputPath", properties)

    def test_conditional_group_matches_configuration(self):
        path = self._write("App.csproj", APP_PROJECT)
        properties = load_project_properties(path, "Release", "Any CPU")
        self.assertEqual(properties["OutputPath"], "bin\\Release\\")

    def test_conditional_group_for_other_platform_ignored(self):
        path = self._write("App.csproj", APP_PROJECT)
        properties = load_project_properties(path, "Debug", "x64")
        self.assertNotIn("OutputPath", properties)

    def test_configuration_only_condition(self):
        path = self._write("Lib.csproj", """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup Condition="'$(Configuration)' == 'Release'">
    <Optimize>true</Optimize>
  </PropertyGroup>
</Project>
""")
        self.assertEqual(load_project_properties(path, "Release", "x64"), {"Optimize": "true"})
        self.assertEqual(load_project_properties(path, "Debug", "x64"), {})

    def test_sdk_project(self):
        path = self._write("Lib.csproj", LIB_PROJECT)
        self.assertEqual(load_project_properties(path), {"TargetFramework": "net8.0"})


class TestMacroProviders(unittest.TestCase):
    """Tests for NullMacroProvider and MSBuildPropertyProvider."""

    def test_null_provider_passes_through(self):
        self.assertEqual(NullMacroProvider().expand("/p.csproj", "$(X)"), "$(X)")

    def test_property_provider_substitutes_declared_properties(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "App.csproj"
            path.write_text(APP_PROJECT)
            provider = MSBuildPropertyProvider(logger_stub)
            result = provider.expand(str(path), "$(RootNamespace) $(AssemblyName) $(Unknown)")
        self.assertEqual(result, "My.App MyApp $(Unknown)")

    def test_property_provider_passes_through_unreadable_project(self):
        provider = MSBuildPropertyProvider(logger_stub)
        self.assertEqual(provider.expand("/nowhere/x.csproj", "$(AssemblyName)"), "$(AssemblyName)")

    def test_property_provider_caches_per_path(self):
        provider = MSBuildPropertyProvider(logger_stub)
        with patch(
            "cmdrunner.msbuild.load_project_properties", return_value={"A": "1"}
        ) as mock_load:
            provider.expand("/p/x.csproj", "$(A)")
            provider.expand("/p/x.csproj", "$(A)")
            provider.expand("/p/y.csproj", "$(A)")
        self.assertEqual(mock_load.call_count, 2)


if __name__ == "__main__":
    unittest.main()
