"""Tests for the lint session across one or more Gemfiles."""

import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest
from gemfilelint import lint
from gemfilelint.errors import VocabularyLoadError
from gemfilelint.linter import Linter
from gemfilelint.offenses import InvalidManifest, MisspelledDependency
from gemfilelint.vocabulary import Vocabularies


class RecordingProgress:

    def __init__(self):
        self.events = []

    def start(self, paths):
        self.events.append(("start", list(paths)))

    def record(self, check):
        self.events.append(("pass" if check.passed else "fail", check.path))

    def finish(self):
        self.events.append(("finish",))


class RecordingReporter:

    def __init__(self):
        self.results = []

    def report(self, result):
        self.results.append(result)


class TestLinter(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.vocabularies = Vocabularies.load()

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.progress = RecordingProgress()
        self.reporter = RecordingReporter()
        self.linter = Linter(
            self.vocabularies, progress=self.progress, reporter=self.reporter
        )

    def tearDown(self):
        self._tmp.cleanup()

    def write_gemfile(self, name, text):
        path = self.tmp / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_misspelled_dependency(self):
        path = self.write_gemfile(
            "Gemfile", 'source "https://rubygems.org/"\ngem "rails"\ngem "sqlte3"\n'
        )
        result = self.linter.lint([path])

        self.assertFalse(result.passed)
        self.assertEqual(len(result.offenses), 1)
        offense = result.offenses[0]
        self.assertIsInstance(offense, MisspelledDependency)
        self.assertEqual(offense.name, "sqlte3")
        self.assertEqual(offense.suggestions[0], "sqlite3")
        self.assertEqual(result.checked, 3)

    def test_invalid_gemfile(self):
        path = self.write_gemfile("Gemfile", 'gem "rails\n')
        result = self.linter.lint([path])

        self.assertFalse(result.passed)
        self.assertEqual(len(result.offenses), 1)
        self.assertIsInstance(result.offenses[0], InvalidManifest)
        self.assertEqual(result.offenses[0].path, path)

    def test_missing_gemfile_does_not_stop_run(self):
        missing = str(self.tmp / "missing" / "Gemfile")
        clean = self.write_gemfile("Gemfile", 'gem "rails"\n')
        result = self.linter.lint([missing, clean])

        self.assertEqual(result.offenses, [InvalidManifest(missing, result.offenses[0].reason)])
        self.assertEqual(result.checked, 3)

    def test_offenses_aggregated_in_path_order(self):
        clean = self.write_gemfile("a/Gemfile", 'gem "rails"\ngem "puma"\n')
        dirty = self.write_gemfile("b/Gemfile", 'gem "rails"\ngem "pumma"\n')
        result = self.linter.lint([clean, dirty])

        self.assertEqual(len(result.offenses), 1)
        self.assertEqual(result.offenses[0].path, dirty)
        self.assertEqual(result.offenses[0].name, "pumma")
        self.assertEqual(result.paths, [clean, dirty])

    def test_clean_gemfiles_pass(self):
        path = self.write_gemfile(
            "Gemfile", 'source "https://rubygems.org"\ngem "rails"\ngem "rspec-rails"\n'
        )
        result = self.linter.lint([path])
        self.assertTrue(result.passed)
        self.assertEqual(result.offenses, [])

    def test_progress_event_per_declaration(self):
        path = self.write_gemfile("Gemfile", 'gem "rails"\ngem "rials"\n')
        self.linter.lint([path])

        self.assertEqual(
            self.progress.events,
            [
                ("start", [path]),
                ("pass", path),
                ("fail", path),
                ("pass", path),
                ("finish",),
            ],
        )

    def test_report_sink_receives_result(self):
        path = self.write_gemfile("Gemfile", 'gem "rials"\n')
        result = self.linter.lint([path])
        self.assertEqual(self.reporter.results, [result])

    def test_module_level_lint(self):
        path = self.write_gemfile("Gemfile", 'gem "rake"\n')
        result = lint([path], vocabularies=self.vocabularies)
        self.assertTrue(result.passed)

    def test_vocabulary_load_failure_is_fatal(self):
        with self.assertRaises(VocabularyLoadError):
            Vocabularies.load(dependency_list=self.tmp / "missing.txt")


if __name__ == "__main__":
    unittest.main()
