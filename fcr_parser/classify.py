"""
classify.py — Noise-row detection

Receipt exports repeat their column headings at the top of every printed
page and scatter page-break banners between sections. Both kinds of row are
noise: extraction skips them as if they were not in the file at all.
"""

from __future__ import annotations

from typing import Iterable

ROW_NORMAL = "normal"
ROW_PAGE_BREAK = "page-break"
ROW_CONTINUATION_HEADER = "continuation-header"

PAGE_BREAK_MARKERS = (
    "CONTINUE ON NEXT PAGE",
    "Freight Collect",
    "Back to SO Form",
    "Click here to update",
)

# Matched anywhere inside a cell.
CONTINUATION_MARKERS = (
    "Marks and Numbers / Description continued",
    "Description continued",
    "continued",
)

# Matched at the start of a cell, so that a value such as
# "NET WEIGHT :- 11619.132 KGS" is not mistaken for a "Weight" heading.
REPEATED_HEADER_LABELS = (
    "Cargo Description",
    "Marks and Numbers",
    "Marks & Numbers",
    "S/O Number",
    "Weight",
    "Measurement",
    "Gross Weight",
    "Nett Weight",
    "CBM",
    "Shipper",
    "Consignee",
)

_PAGE_BREAK_KEYS = tuple(marker.casefold() for marker in PAGE_BREAK_MARKERS)
_CONTINUATION_KEYS = tuple(marker.casefold() for marker in CONTINUATION_MARKERS)
_HEADER_LABEL_KEYS = tuple(label.casefold() for label in REPEATED_HEADER_LABELS)


def _key(value: object) -> str:
    return "" if value is None else str(value).strip().casefold()


def is_page_break_value(value: object) -> bool:
    key = _key(value)
    return bool(key) and any(marker in key for marker in _PAGE_BREAK_KEYS)


def is_continuation_header_value(value: object) -> bool:
    key = _key(value)
    if not key:
        return False
    if any(marker in key for marker in _CONTINUATION_KEYS):
        return True
    return key.startswith(_HEADER_LABEL_KEYS)


def is_noise_value(value: object) -> bool:
    return is_page_break_value(value) or is_continuation_header_value(value)


def is_page_break_row(row: Iterable[str]) -> bool:
    return any(is_page_break_value(cell) for cell in row)


def is_continuation_header_row(row: Iterable[str]) -> bool:
    return any(is_continuation_header_value(cell) for cell in row)


def classify_row(row: Iterable[str]) -> str:
    """Return ROW_PAGE_BREAK, ROW_CONTINUATION_HEADER or ROW_NORMAL."""
    cells = list(row)
    if is_page_break_row(cells):
        return ROW_PAGE_BREAK
    if is_continuation_header_row(cells):
        return ROW_CONTINUATION_HEADER
    return ROW_NORMAL


def is_noise_row(row: Iterable[str]) -> bool:
    return classify_row(row) != ROW_NORMAL
