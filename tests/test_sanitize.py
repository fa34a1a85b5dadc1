import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fcr_parser.sanitize import clean_data_cell, clean_header_cell, is_filler_only, strip_filler


class HeaderCellTests(unittest.TestCase):
    def test_filler_runs_are_removed(self):
        self.assertEqual(clean_header_cell("xxMarks & Numbersxx"), "Marks & Numbers")
        self.assertEqual(clean_header_cell("XXX"), "")
        self.assertEqual(clean_header_cell("  xCargox  "), "Cargo")

    def test_entities_are_decoded(self):
        self.assertEqual(clean_header_cell("Marks &amp; Numbers"), "Marks & Numbers")
        self.assertEqual(clean_header_cell("Marks &#x26; Nos"), "Marks & Nos")
        self.assertEqual(clean_header_cell("&#x4D;arks &#x26; Numbers"), "Marks & Numbers")

    def test_none_and_blank_are_empty(self):
        self.assertEqual(clean_header_cell(None), "")
        self.assertEqual(clean_header_cell("   "), "")


class DataCellTests(unittest.TestCase):
    def test_flattened_line_break_becomes_separator(self):
        cleaned = clean_data_cell("NET WEIGHT :-  11619.132 KGS")
        self.assertEqual(cleaned, "NET WEIGHT :- / 11619.132 KGS")
        self.assertEqual(cleaned.count(" / "), 1)

    def test_filler_is_removed_inside_values(self):
        cleaned = clean_data_cell("xxxTEST123xxx")
        self.assertEqual(cleaned, "TEST123")
        self.assertNotIn("x", cleaned.lower())

    def test_whitespace_runs_of_any_length_collapse_to_one_separator(self):
        for gap in ("  ", "   ", "\t\t", " \t ", "      "):
            with self.subTest(gap=repr(gap)):
                self.assertEqual(clean_data_cell(f"PO 4471{gap}CTN 1"), "PO 4471 / CTN 1")

    def test_embedded_line_breaks_become_separator(self):
        self.assertEqual(clean_data_cell("LINE ONE\nLINE TWO"), "LINE ONE / LINE TWO")
        self.assertEqual(clean_data_cell("LINE ONE \r\n  LINE TWO"), "LINE ONE / LINE TWO")

    def test_surrounding_double_quotes_are_stripped(self):
        self.assertEqual(clean_data_cell('"BEDDING"'), "BEDDING")
        self.assertEqual(clean_data_cell("“PILLOW CASES”"), "PILLOW CASES")
        self.assertEqual(clean_data_cell("BOY'S SHIRTS"), "BOY'S SHIRTS")

    def test_single_spaces_are_kept(self):
        self.assertEqual(clean_data_cell(" MADE IN BANGLADESH "), "MADE IN BANGLADESH")

    def test_cleaning_is_idempotent(self):
        once = clean_data_cell("xx NET WEIGHT :-   11619.132 KGS xx")
        self.assertEqual(clean_data_cell(once), once)

    def test_none_is_empty(self):
        self.assertEqual(clean_data_cell(None), "")


class FillerTests(unittest.TestCase):
    def test_strip_filler_is_case_insensitive(self):
        self.assertEqual(strip_filler("XxBOXxX"), "BO")

    def test_is_filler_only(self):
        self.assertTrue(is_filler_only("xxx"))
        self.assertTrue(is_filler_only(" X "))
        self.assertFalse(is_filler_only(""))
        self.assertFalse(is_filler_only("Box"))
        self.assertFalse(is_filler_only(None))


if __name__ == "__main__":
    unittest.main()
