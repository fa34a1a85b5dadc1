"""
transcript.py — Denoised full-row transcript

Renders a receipt export as compact text lines for downstream readers that
only need the free-form parts of the document (shipper block, references).
Columns that are extracted separately are suppressed first.
"""

from __future__ import annotations

import re
from contextlib import closing
from pathlib import Path
from typing import AbstractSet, Iterable, Sequence

from fcr_parser.extractor import resolve_exclusions
from fcr_parser.reader import DELIMITER, iter_rows
from fcr_parser.sanitize import is_filler_only

DELIMITER_RUN_RE = re.compile(re.escape(DELIMITER) + r"{3,}")
CONTENT_RE = re.compile(r"[^\W_]")


def _clean_cell(value: str) -> str:
    text = value.replace("\r\n", " ").replace("\n", " ").replace("\r", " ").strip()
    if is_filler_only(text):
        return ""
    return text


def clean_row(row: Sequence[str], excluded: AbstractSet[int] = frozenset()) -> str | None:
    """
    Render one row as a transcript line, or None when nothing readable is left.

    Excluded columns, blank cells and filler-only cells are dropped before
    the remaining cells are rejoined.
    """
    cells: list[str] = []
    for index, cell in enumerate(row):
        if index in excluded:
            continue
        cleaned = _clean_cell(cell)
        if cleaned:
            cells.append(cleaned)
    if not cells:
        return None
    line = DELIMITER_RUN_RE.sub(" ", DELIMITER.join(cells)).strip()
    if not CONTENT_RE.search(line):
        return None
    return line


def transcript_lines(rows: Iterable[Sequence[str]], excluded: AbstractSet[int] = frozenset()) -> list[str]:
    lines: list[str] = []
    for row in rows:
        line = clean_row(row, excluded)
        if line is not None:
            lines.append(line)
    return lines


def build_transcript(
    path: "str | Path",
    excluded: AbstractSet[int] | None = None,
    *,
    warnings: list[str] | None = None,
) -> str:
    """Transcript of every row in the file, header included."""
    if excluded is None:
        excluded = resolve_exclusions(path)
    with closing(iter_rows(path, warnings=warnings)) as rows:
        lines = transcript_lines(rows, excluded)
    return "\n".join(lines) + "\n" if lines else ""
