"""Tests for YAML configuration loading."""

import os
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest
from gemfilelint.config import DEFAULT_CONFIG, load_config
from gemfilelint.errors import ConfigError


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self._cwd = os.getcwd()

    def tearDown(self):
        os.chdir(self._cwd)
        self._tmp.cleanup()

    def write_config(self, text):
        path = self.tmp / "custom.yml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_defaults_without_file(self):
        os.chdir(self.tmp)
        self.assertEqual(load_config(), DEFAULT_CONFIG)

    def test_defaults_are_copied(self):
        os.chdir(self.tmp)
        config = load_config()
        config["vocabulary"]["sources"].append("https://gems.example.com/")
        self.assertEqual(DEFAULT_CONFIG["vocabulary"]["sources"], ["https://rubygems.org/"])

    def test_config_yml_in_cwd(self):
        (self.tmp / "config.yml").write_text("spellcheck:\n  max_distance: 1\n", encoding="utf-8")
        os.chdir(self.tmp)
        self.assertEqual(load_config()["spellcheck"]["max_distance"], 1)

    def test_partial_override_keeps_defaults(self):
        path = self.write_config(
            "vocabulary:\n  extra_dependencies: [acme-internal]\nlogging:\n"
        )
        config = load_config(path)
        self.assertEqual(config["vocabulary"]["extra_dependencies"], ["acme-internal"])
        self.assertEqual(config["vocabulary"]["sources"], ["https://rubygems.org/"])
        self.assertEqual(config["logging"], DEFAULT_CONFIG["logging"])
        self.assertEqual(config["spellcheck"]["max_dependency_suggestions"], 5)

    def test_empty_file(self):
        self.assertEqual(load_config(self.write_config("")), DEFAULT_CONFIG)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(self.tmp / "missing.yml")

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            load_config(self.write_config("spellcheck: [unclosed\n"))

    def test_root_must_be_mapping(self):
        with self.assertRaises(ConfigError):
            load_config(self.write_config("- a\n- b\n"))

    def test_negative_distance_rejected(self):
        with self.assertRaises(ConfigError):
            load_config(self.write_config("spellcheck:\n  max_distance: -1\n"))

    def test_zero_suggestion_limit_rejected(self):
        with self.assertRaises(ConfigError):
            load_config(self.write_config("spellcheck:\n  max_dependency_suggestions: 0\n"))

    def test_zero_distance_allowed(self):
        config = load_config(self.write_config("spellcheck:\n  max_distance: 0\n"))
        self.assertEqual(config["spellcheck"]["max_distance"], 0)

    def test_unknown_format_rejected(self):
        with self.assertRaises(ConfigError):
            load_config(self.write_config("output:\n  format: xml\n"))

    def test_section_must_be_mapping(self):
        with self.assertRaises(ConfigError):
            load_config(self.write_config("spellcheck: 3\n"))


if __name__ == "__main__":
    unittest.main()
