"""
extractor.py — Semantic column extraction

Public API:
    extract_column(path, aliases)        -> list[str]
    extract_columns(path, groups)        -> dict[str, list[str]]
    extract_marks_and_numbers(path)      -> list[str]
    extract_cargo_description(path)      -> list[str]
    extract_shipper_info(path)           -> list[str]
    extract_consignee_info(path)         -> list[str]
    resolve_exclusions(path)             -> set[int]

Extracted values come back in row-major order, then column order within the
matched span. A run of rows that are empty for the column becomes a single
SECTION_BREAK entry; the result never starts or ends with one.

Every function here is fail-soft: a missing header, an absent column or an
empty file all produce an empty result. Only I/O errors reach the caller.
"""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from fcr_parser.classify import is_noise_row, is_noise_value
from fcr_parser.columns import (
    CARGO_ALIASES,
    CONSIGNEE_ALIASES,
    EXCLUSION_ALIAS_GROUPS,
    MARKS_ALIASES,
    SHIPPER_ALIASES,
    locate_header,
    resolve_column_span,
)
from fcr_parser.reader import cell_at, iter_rows
from fcr_parser.sanitize import clean_data_cell

SECTION_BREAK = "---"


def row_values(row: Sequence[str], columns: Sequence[int]) -> list[str]:
    """Cleaned, non-blank values of ``row`` at ``columns``; short rows read as blank."""
    values: list[str] = []
    for index in columns:
        value = clean_data_cell(cell_at(row, index))
        if not value or value == SECTION_BREAK or is_noise_value(value):
            continue
        values.append(value)
    return values


def collect_column_values(rows: Iterable[Sequence[str]], columns: Sequence[int]) -> list[str]:
    """Gather values for ``columns`` from data rows, marking section breaks."""
    result: list[str] = []
    for row in rows:
        if is_noise_row(row):
            continue
        values = row_values(row, columns)
        if values:
            result.extend(values)
        elif result and result[-1] != SECTION_BREAK:
            result.append(SECTION_BREAK)

    while result and result[-1] == SECTION_BREAK:
        result.pop()
    return result


def extract_column(
    path: "str | Path",
    aliases: Sequence[str],
    *,
    warnings: list[str] | None = None,
) -> list[str]:
    with closing(iter_rows(path, warnings=warnings)) as rows:
        header = locate_header(rows)
        if header is None:
            return []
        columns = resolve_column_span(header, aliases)
        if not columns:
            return []
        return collect_column_values(rows, columns.indices)


def extract_columns(
    path: "str | Path",
    groups: Mapping[str, Sequence[str]],
    *,
    warnings: list[str] | None = None,
) -> dict[str, list[str]]:
    """
    Extract several alias groups from one file.

    Each group re-reads the file, so a malformed record is seen once per pass;
    ``warnings`` receives each distinct message once.
    """
    collected: list[str] = []
    columns = {name: extract_column(path, aliases, warnings=collected) for name, aliases in groups.items()}
    if warnings is not None:
        warnings.extend(dict.fromkeys(collected))
    return columns


def extract_marks_and_numbers(path: "str | Path") -> list[str]:
    return extract_column(path, MARKS_ALIASES)


def extract_cargo_description(path: "str | Path") -> list[str]:
    return extract_column(path, CARGO_ALIASES)


def extract_shipper_info(path: "str | Path") -> list[str]:
    return extract_column(path, SHIPPER_ALIASES)


def extract_consignee_info(path: "str | Path") -> list[str]:
    return extract_column(path, CONSIGNEE_ALIASES)


def resolve_exclusions(
    path: "str | Path",
    alias_groups: Iterable[Sequence[str]] = EXCLUSION_ALIAS_GROUPS,
) -> set[int]:
    """
    Union of the matched column spans for each alias group.

    Used by the transcript cleaner to suppress columns that are extracted
    separately. No header means nothing to exclude.
    """
    with closing(iter_rows(path)) as rows:
        header = locate_header(rows)
    if header is None:
        return set()

    excluded: set[int] = set()
    for aliases in alias_groups:
        excluded.update(resolve_column_span(header, aliases).indices)
    return excluded
