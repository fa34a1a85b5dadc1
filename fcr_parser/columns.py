"""
columns.py — Header location and semantic column resolution

A receipt export has no fixed schema. The header is the first row that
mentions one of HEADER_KEYWORDS; a semantic column is found in it by alias
(case-insensitive substring), and merged header cells show up as blank
header cells to the right of the named one, which are folded into the same
semantic column.

Public API:
    rows   = iter_rows(path)
    header = locate_header(rows)                 # HeaderRow | None
    span   = resolve_column_span(header, MARKS_ALIASES)
    span.indices                                 # (primary, *spanned)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from fcr_parser.sanitize import clean_header_cell

HEADER_KEYWORDS = ("Marks", "Cargo", "S/O Number")

# ══════════════════════════════════════════════════════════════════════════════
# ALIAS GROUPS
# ══════════════════════════════════════════════════════════════════════════════

MARKS_ALIASES = ("Marks", "Mark", "M&N", "Marks & Numbers", "Marks and Numbers", "Marks & Nos")
CARGO_ALIASES = ("Cargo", "Description", "Cargo Description", "Goods Description", "Commodity")
SHIPPER_ALIASES = ("Shipper", "Shipper Name", "Shipper Address", "Consignor", "Shipper Details")
CONSIGNEE_ALIASES = ("Consignee", "Consignee Name", "Consignee Address", "Receiver")

# The transcript cleaner drops cargo columns without the bare "Description"
# alias, which would also catch unrelated description columns.
CARGO_EXCLUSION_ALIASES = ("Cargo", "Cargo Description", "Goods Description", "Commodity")

ALIAS_GROUPS = {
    "marks": MARKS_ALIASES,
    "cargo": CARGO_ALIASES,
    "shipper": SHIPPER_ALIASES,
    "consignee": CONSIGNEE_ALIASES,
}
EXCLUSION_ALIAS_GROUPS = (MARKS_ALIASES, CARGO_EXCLUSION_ALIASES)


# ══════════════════════════════════════════════════════════════════════════════
# DATA CLASSES
# ══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HeaderRow:
    index: int               # 0-based row position in the file
    cells: tuple[str, ...]   # raw cells, before sanitisation


@dataclass(frozen=True)
class MatchedColumnSet:
    primary: int | None = None
    spanned: tuple[int, ...] = ()
    alias: str | None = None

    @property
    def indices(self) -> tuple[int, ...]:
        if self.primary is None:
            return ()
        return (self.primary, *self.spanned)

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices)

    def __len__(self) -> int:
        return len(self.indices)

    def __bool__(self) -> bool:
        return self.primary is not None


EMPTY_MATCH = MatchedColumnSet()


# ══════════════════════════════════════════════════════════════════════════════
# HEADER LOCATION
# ══════════════════════════════════════════════════════════════════════════════

def is_header_row(row: Sequence[str], keywords: Sequence[str] = HEADER_KEYWORDS) -> bool:
    text = " ".join(row).casefold()
    return any(keyword.casefold() in text for keyword in keywords)


def locate_header(
    rows: Iterable[Sequence[str]],
    keywords: Sequence[str] = HEADER_KEYWORDS,
) -> HeaderRow | None:
    """
    Return the first row mentioning a header keyword, or None.

    When ``rows`` is an iterator, it is left positioned just after the header,
    so the caller can keep consuming data rows from it.
    """
    for index, row in enumerate(rows):
        if is_header_row(row, keywords):
            return HeaderRow(index=index, cells=tuple(row))
    return None


# ══════════════════════════════════════════════════════════════════════════════
# SPAN RESOLUTION
# ══════════════════════════════════════════════════════════════════════════════

def _header_cells(header: "HeaderRow | Sequence[str]") -> Sequence[str]:
    return header.cells if isinstance(header, HeaderRow) else header


def find_first_alias_match(
    cells: Sequence[str],
    aliases: Sequence[str],
) -> tuple[int, str] | None:
    """Return (index, alias) for the leftmost header cell containing any alias."""
    keys = [(alias, alias.casefold()) for alias in aliases if alias.strip()]
    for index, cell in enumerate(cells):
        cleaned = clean_header_cell(cell).casefold()
        if not cleaned:
            continue
        for alias, key in keys:
            if key in cleaned:
                return index, alias
    return None


def span_after(cells: Sequence[str], primary: int) -> tuple[int, ...]:
    """Indices of the blank header cells directly right of ``primary``."""
    spanned: list[int] = []
    for index in range(primary + 1, len(cells)):
        if clean_header_cell(cells[index]):
            break
        spanned.append(index)
    return tuple(spanned)


def resolve_column_span(
    header: "HeaderRow | Sequence[str]",
    aliases: Sequence[str],
) -> MatchedColumnSet:
    """
    Map one alias group to its physical columns in the header.

    First match wins: scanning stops at the leftmost matching cell even if a
    later cell would match a longer alias. An unmatched group yields an empty
    MatchedColumnSet rather than an error.
    """
    cells = _header_cells(header)
    match = find_first_alias_match(cells, aliases)
    if match is None:
        return EMPTY_MATCH
    primary, alias = match
    return MatchedColumnSet(primary=primary, spanned=span_after(cells, primary), alias=alias)
