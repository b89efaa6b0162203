import unittest

from resort.utils.slug import slugify


class TestSlugify(unittest.TestCase):

    def test_lowercase_hyphenated(self):
        self.assertEqual(slugify("Beach Escape"), "beach-escape")

    def test_punctuation_collapsed(self):
        self.assertEqual(slugify("  Spa & Wellness -- Deluxe!! "), "spa-wellness-deluxe")

    def test_only_symbols(self):
        self.assertEqual(slugify("***"), "")


if __name__ == "__main__":
    unittest.main()
