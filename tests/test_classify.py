import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from fcr_parser.classify import (
    ROW_CONTINUATION_HEADER,
    ROW_NORMAL,
    ROW_PAGE_BREAK,
    classify_row,
    is_continuation_header_value,
    is_noise_row,
    is_noise_value,
    is_page_break_value,
)


class PageBreakTests(unittest.TestCase):
    def test_markers_match_anywhere_and_ignore_case(self):
        self.assertTrue(is_page_break_value("CONTINUE ON NEXT PAGE"))
        self.assertTrue(is_page_break_value("*** continue on next page ***"))
        self.assertTrue(is_page_break_value("Freight Collect"))
        self.assertTrue(is_page_break_value("Back to SO Form"))
        self.assertTrue(is_page_break_value("Click here to update the booking"))

    def test_ordinary_values_are_not_page_breaks(self):
        self.assertFalse(is_page_break_value("BEDDING"))
        self.assertFalse(is_page_break_value(""))
        self.assertFalse(is_page_break_value(None))


class ContinuationHeaderTests(unittest.TestCase):
    def test_continued_markers_match_anywhere(self):
        self.assertTrue(is_continuation_header_value("Marks and Numbers / Description continued"))
        self.assertTrue(is_continuation_header_value("(Description continued)"))
        self.assertTrue(is_continuation_header_value("CONTINUED"))

    def test_repeated_header_labels_match_at_start(self):
        for label in ("Cargo Description", "Marks & Numbers", "S/O Number", "Gross Weight", "CBM", "shipper"):
            with self.subTest(label=label):
                self.assertTrue(is_continuation_header_value(label))

    def test_values_that_merely_mention_a_label_are_kept(self):
        self.assertFalse(is_continuation_header_value("NET WEIGHT :-  11619.132 KGS"))
        self.assertFalse(is_continuation_header_value("TOTAL CBM 4.5"))
        self.assertFalse(is_noise_value("100%Cotton Bed Sheets"))


class RowClassificationTests(unittest.TestCase):
    def test_classify_row(self):
        self.assertEqual(classify_row(["", "CONTINUE ON NEXT PAGE", ""]), ROW_PAGE_BREAK)
        self.assertEqual(classify_row(["Marks & Numbers", "", "Cargo Description"]), ROW_CONTINUATION_HEADER)
        self.assertEqual(classify_row(["1659", "", "BEDDING"]), ROW_NORMAL)

    def test_page_break_wins_over_continuation(self):
        self.assertEqual(classify_row(["Description continued", "Freight Collect"]), ROW_PAGE_BREAK)

    def test_empty_row_is_not_noise(self):
        self.assertEqual(classify_row([]), ROW_NORMAL)
        self.assertFalse(is_noise_row(["", "", ""]))

    def test_is_noise_row(self):
        self.assertTrue(is_noise_row(["", "", "Click here to update"]))
        self.assertFalse(is_noise_row(["PO 4471", "", "PILLOW CASES"]))


if __name__ == "__main__":
    unittest.main()
