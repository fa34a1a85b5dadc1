"""Cell text normalisation for header and data cells."""

from __future__ import annotations

import html
import re

# Receipt templates pad unprinted cells with runs of the letter x.
FILLER_RE = re.compile(r"x+", re.IGNORECASE)
# Two or more whitespace characters, or any line break with its surrounding
# whitespace, marks a flattened multi-line cell.
LINE_BREAK_RUN_RE = re.compile(r"\s*[\r\n]\s*|\s{2,}")
LINE_SEPARATOR = " / "
QUOTE_CHARS = "\"“”"


def strip_filler(value: object) -> str:
    """Delete every run of x/X from the text, wherever it occurs."""
    if value is None:
        return ""
    return FILLER_RE.sub("", str(value))


def is_filler_only(value: object) -> bool:
    text = "" if value is None else str(value).strip()
    return bool(text) and FILLER_RE.fullmatch(text) is not None


def clean_header_cell(value: object) -> str:
    """
    Normalise a header cell for alias comparison.

    Entities are decoded before the filler pass so hexadecimal references
    such as ``&#x26;`` survive intact.
    """
    text = "" if value is None else str(value).strip()
    text = html.unescape(text)
    return strip_filler(text).strip()


def clean_data_cell(value: object) -> str:
    """
    Normalise a data cell for output.

    "NET WEIGHT :-  11619.132 KGS" -> "NET WEIGHT :- / 11619.132 KGS"
    """
    text = strip_filler(value).strip()
    text = text.strip(QUOTE_CHARS).strip()
    return LINE_BREAK_RUN_RE.sub(LINE_SEPARATOR, text)
