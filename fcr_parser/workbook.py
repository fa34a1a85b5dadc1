"""
workbook.py — XLSX/XLSM to delimited text

Receipts often arrive as workbooks. The engine works on delimited text, so
the first worksheet is flattened to CSV at its full width: merged regions
keep their value in the top-left cell and leave the rest blank, which is
exactly the spanned-header shape the column resolver expects.
"""

from __future__ import annotations

import csv
import zipfile
from datetime import date, datetime, time
from pathlib import Path
from typing import Iterator

from openpyxl import load_workbook

from fcr_parser.reader import DELIMITER

WORKBOOK_FORMATS = {".xlsx", ".xlsm"}


def is_workbook_file(path: "str | Path") -> bool:
    return Path(path).suffix.lower() in WORKBOOK_FORMATS


def is_encrypted_ooxml(file_path: Path) -> bool:
    try:
        with zipfile.ZipFile(file_path) as archive:
            names = set(archive.namelist())
    except zipfile.BadZipFile:
        return False
    return {"EncryptedPackage", "EncryptionInfo"}.issubset(names)


def to_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


def iter_workbook_rows(xlsx_path: "str | Path") -> Iterator[list[str]]:
    """
    Yield the first worksheet's rows as text cells.

    Raises:
        FileNotFoundError  if the workbook does not exist.
        ValueError         if it is encrypted or cannot be parsed.
    """
    xlsx_path = Path(xlsx_path)
    if not xlsx_path.exists():
        raise FileNotFoundError(f"File not found: {xlsx_path}")
    if is_encrypted_ooxml(xlsx_path):
        raise ValueError("Password-protected / encrypted OOXML workbooks are not supported")
    try:
        workbook = load_workbook(xlsx_path, data_only=True)
    except Exception as exc:
        raise ValueError(f"Could not read workbook: {exc}") from exc

    try:
        if not workbook.worksheets:
            return
        sheet = workbook.worksheets[0]
        for row in sheet.iter_rows(values_only=True):
            yield [to_text(value) for value in row]
    finally:
        workbook.close()


def convert_workbook_to_csv(xlsx_path: "str | Path", csv_path: "str | Path") -> Path:
    """Write the first worksheet of ``xlsx_path`` as UTF-8 CSV and return the path."""
    csv_path = Path(csv_path)
    rows = list(iter_workbook_rows(xlsx_path))
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    with csv_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, delimiter=DELIMITER, lineterminator="\n")
        writer.writerows(rows)
    return csv_path
