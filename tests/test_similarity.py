"""Tests for edit distance and suggestion ranking."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import unittest
from gemfilelint.similarity import SpellChecker, levenshtein_distance, suggest


class TestLevenshteinDistance(unittest.TestCase):

    def test_known_distances(self):
        self.assertEqual(levenshtein_distance("kitten", "sitting"), 3)
        self.assertEqual(levenshtein_distance("sqlte3", "sqlite3"), 1)
        self.assertEqual(levenshtein_distance("rials", "rails"), 2)
        self.assertEqual(levenshtein_distance("abc", "abc"), 0)

    def test_empty_strings(self):
        self.assertEqual(levenshtein_distance("", "abc"), 3)
        self.assertEqual(levenshtein_distance("abc", ""), 3)
        self.assertEqual(levenshtein_distance("", ""), 0)

    def test_symmetric(self):
        self.assertEqual(
            levenshtein_distance("rspec", "rake"),
            levenshtein_distance("rake", "rspec"),
        )

    def test_bounded_distance_stops_early(self):
        self.assertEqual(levenshtein_distance("abcdef", "uvwxyz", max_distance=2), 3)
        self.assertEqual(levenshtein_distance("abcdef", "abcdxf", max_distance=2), 1)

    def test_bounded_distance_caps_at_bound_plus_one(self):
        self.assertEqual(levenshtein_distance("rails", "rspec-rails", max_distance=2), 3)
        self.assertEqual(levenshtein_distance("rails", "rspec-rails"), 6)
        self.assertEqual(levenshtein_distance("rials", "rails", max_distance=2), 2)


class TestSuggest(unittest.TestCase):

    def test_transposed_letters(self):
        self.assertEqual(suggest(["rails", "rspec", "rake"], "rials"), ["rails"])

    def test_exact_match_returns_nothing(self):
        self.assertEqual(suggest(["rails"], "rails"), [])

    def test_exact_match_for_every_entry_and_threshold(self):
        vocabulary = ["rails", "rail", "rake", "rack"]
        for word in vocabulary:
            for k in range(4):
                self.assertEqual(suggest(vocabulary, word, k), [])

    def test_suggestions_within_bound(self):
        vocabulary = ["rails", "rspec", "rake", "rack", "racc", "thor"]
        for s in suggest(vocabulary, "rakc", 2):
            self.assertTrue(1 <= levenshtein_distance("rakc", s) <= 2)

    def test_ordered_by_distance_then_vocabulary_order(self):
        result = suggest(["bat", "cart", "cat", "hat"], "cbt")
        self.assertEqual(result, ["cat", "bat", "cart", "hat"])

    def test_ties_keep_vocabulary_order(self):
        self.assertEqual(suggest(["hat", "cat", "bat"], "xat"), ["hat", "cat", "bat"])

    def test_threshold_is_monotonic(self):
        vocabulary = ["rails", "rspec", "rake", "rack", "racc", "rack-test", "rake-compiler"]
        wide = suggest(vocabulary, "rakk", 2)
        narrow = suggest(vocabulary, "rakk", 1)
        self.assertEqual(narrow, [s for s in wide if levenshtein_distance("rakk", s) <= 1])

    def test_deterministic(self):
        vocabulary = ["rails", "rspec", "rake", "rack"]
        self.assertEqual(suggest(vocabulary, "rakc"), suggest(vocabulary, "rakc"))

    def test_zero_threshold(self):
        self.assertEqual(suggest(["rails"], "rail", 0), [])

    def test_empty_vocabulary(self):
        self.assertEqual(suggest([], "rails"), [])

    def test_empty_query(self):
        self.assertEqual(suggest(["a", "ab", "abc"], ""), ["a", "ab"])

    def test_negative_threshold_rejected(self):
        with self.assertRaises(ValueError):
            suggest(["rails"], "rail", -1)


class TestSpellChecker(unittest.TestCase):

    def test_duplicates_removed(self):
        checker = SpellChecker(["rails", "rake", "rails"])
        self.assertEqual(checker.haystack, ("rails", "rake"))
        self.assertEqual(len(checker), 2)

    def test_contains(self):
        checker = SpellChecker(["rails"])
        self.assertIn("rails", checker)
        self.assertNotIn("rials", checker)

    def test_correct_uses_configured_distance(self):
        checker = SpellChecker(["rails"], max_distance=1)
        self.assertEqual(checker.correct("rials"), [])
        self.assertEqual(checker.correct("rail"), ["rails"])


if __name__ == "__main__":
    unittest.main()
