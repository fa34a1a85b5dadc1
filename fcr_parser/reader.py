"""
reader.py — Row reader for spreadsheet-exported receipt files

Public API:
    for row in iter_rows("path/to/file.csv"):
        ...

Every row is a list of trimmed cell strings. Rows keep their own width:
ragged input is passed through untouched and callers index defensively.
Blank lines come through as empty rows so that section breaks survive.
"""

from __future__ import annotations

import csv
import codecs
from pathlib import Path
from typing import Iterable, Iterator

import chardet

DELIMITER = ","
ENCODING_SAMPLE_BYTES = 64 * 1024
UTF8_BOM = codecs.BOM_UTF8


# ══════════════════════════════════════════════════════════════════════════════
# ENCODING DETECTION
# ══════════════════════════════════════════════════════════════════════════════

def _is_utf8(sample: bytes) -> bool:
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError as exc:
        # The sample may stop in the middle of a multi-byte character.
        return exc.reason == "unexpected end of data" and exc.end == len(sample)
    return True


def detect_encoding(sample: bytes) -> str:
    """
    Pick a text encoding for the raw bytes at the head of a file.

    Strategy:
      1. UTF-8 byte-order mark → utf-8-sig
      2. Sample decodes as UTF-8 (or plain ASCII) → utf-8
      3. chardet guess, when Python knows the codec
      4. cp1252 (decoded with errors="replace" by the reader)
    """
    if sample.startswith(UTF8_BOM):
        return "utf-8-sig"
    if _is_utf8(sample):
        return "utf-8"

    guess = chardet.detect(sample).get("encoding")
    if guess:
        try:
            return codecs.lookup(guess).name
        except LookupError:
            pass
    return "cp1252"


# ══════════════════════════════════════════════════════════════════════════════
# ROW READING
# ══════════════════════════════════════════════════════════════════════════════

def _strip_nulls(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield line.replace("\x00", "")


def iter_rows(
    path: "str | Path",
    *,
    delimiter: str = DELIMITER,
    warnings: list[str] | None = None,
) -> Iterator[list[str]]:
    """
    Lazily yield the rows of a delimited text file.

    Quoted fields may embed the delimiter, doubled quotes and line breaks.
    Broken quoting never aborts the read: the csv module's lenient mode keeps
    going, and a record it refuses outright (e.g. a field over the size limit)
    is skipped and noted in ``warnings`` when a list is supplied.

    The file is opened read-only with the platform's default sharing, so a
    workbook application holding the same file open does not block us.

    Raises:
        FileNotFoundError / PermissionError / OSError from opening the file.
    """
    path = Path(path)
    with path.open("rb") as raw:
        sample = raw.read(ENCODING_SAMPLE_BYTES)
    encoding = detect_encoding(sample)

    with path.open("r", encoding=encoding, errors="replace", newline="") as handle:
        reader = csv.reader(_strip_nulls(handle), delimiter=delimiter)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as exc:
                if warnings is not None:
                    warnings.append(f"line {reader.line_num}: skipped malformed record ({exc})")
                continue
            yield [cell.strip() for cell in row]


def read_rows(path: "str | Path", **kwargs) -> list[list[str]]:
    """Eager variant of iter_rows for callers that need random access."""
    return list(iter_rows(path, **kwargs))


def cell_at(row: list[str], index: int) -> str:
    """Return the cell at ``index`` or an empty string for short rows."""
    if 0 <= index < len(row):
        return row[index]
    return ""
