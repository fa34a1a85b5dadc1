"""Heuristic column recovery for spreadsheet-exported cargo receipt files."""

__version__ = "0.3.0"

from fcr_parser.columns import (  # noqa: E402
    CARGO_ALIASES,
    CONSIGNEE_ALIASES,
    MARKS_ALIASES,
    SHIPPER_ALIASES,
    locate_header,
    resolve_column_span,
)
from fcr_parser.extractor import (  # noqa: E402
    SECTION_BREAK,
    extract_cargo_description,
    extract_column,
    extract_columns,
    extract_consignee_info,
    extract_marks_and_numbers,
    extract_shipper_info,
    resolve_exclusions,
)
from fcr_parser.transcript import build_transcript  # noqa: E402

__all__ = [
    "__version__",
    "CARGO_ALIASES",
    "CONSIGNEE_ALIASES",
    "MARKS_ALIASES",
    "SHIPPER_ALIASES",
    "SECTION_BREAK",
    "build_transcript",
    "extract_cargo_description",
    "extract_column",
    "extract_columns",
    "extract_consignee_info",
    "extract_marks_and_numbers",
    "extract_shipper_info",
    "locate_header",
    "resolve_column_span",
    "resolve_exclusions",
]
