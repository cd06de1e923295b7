from django.test import SimpleTestCase

from athlete_unknown_core.exceptions import InputValidationError
from athlete_unknown_core.string_matching import levenshtein_distance, normalize, validate_guess


class TestNormalize(SimpleTestCase):
    def test_spacing_and_case_are_ignored(self):
        self.assertEqual(normalize("Babe Ruth"), "baberuth")
        self.assertEqual(normalize("babe ruth"), "baberuth")
        self.assertEqual(normalize("BabeRuth"), "baberuth")
        self.assertEqual(normalize("  Babe \t Ruth \n"), "baberuth")

    def test_punctuation_is_removed(self):
        self.assertEqual(normalize("Shaquille O'Neal"), "shaquilleoneal")
        self.assertEqual(normalize("Shaquille O’Neal"), "shaquilleoneal")
        self.assertEqual(normalize("Kareem Abdul-Jabbar"), "kareemabduljabbar")
        self.assertEqual(normalize("J.J. Watt"), "jjwatt")

    def test_idempotent(self):
        for name in ["Babe Ruth", "O'Neal", "Abdul-Jabbar", "J.J. Watt", "", "   "]:
            once = normalize(name)
            self.assertEqual(normalize(once), once)

    def test_empty_input(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize(None), "")


class TestLevenshteinDistance(SimpleTestCase):
    def test_known_distances(self):
        self.assertEqual(levenshtein_distance("test", "best"), 1)
        self.assertEqual(levenshtein_distance("kitten", "sitting"), 3)
        self.assertEqual(levenshtein_distance("flaw", "lawn"), 2)

    def test_identical_strings(self):
        for value in ["", "a", "baberuth", "kareemabduljabbar"]:
            self.assertEqual(levenshtein_distance(value, value), 0)

    def test_empty_string(self):
        self.assertEqual(levenshtein_distance("", "ruth"), 4)
        self.assertEqual(levenshtein_distance("ruth", ""), 4)

    def test_symmetric(self):
        pairs = [("baberuth", "baberut"), ("tycobb", "baberuth"), ("kitten", "sitting")]
        for a, b in pairs:
            self.assertEqual(levenshtein_distance(a, b), levenshtein_distance(b, a))


class TestValidateGuess(SimpleTestCase):
    def test_returns_normalized_guess(self):
        self.assertEqual(validate_guess(" Babe Ruth "), "baberuth")

    def test_rejects_guesses_without_letters(self):
        for raw in ["", "   ", "'-.", None]:
            with self.assertRaises(InputValidationError):
                validate_guess(raw)
