"""
batch.py — Folder processing

Runs the extraction engine over every receipt in a folder:

    input/            *.csv, *.xlsx, *.xlsm
    output/           <stem>.json, <stem>.txt, summary.csv, summary.json
    output/cleaned/   <stem>_cleaned.txt   (denoised transcripts)
    output/converted/ <stem>.csv           (flattened workbooks)

A file that fails is recorded and skipped; the rest of the batch continues.
Input files are never modified or deleted.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from fcr_parser.config import AliasConfig
from fcr_parser.contracts import build_run_summary, contract_fields
from fcr_parser.extractor import extract_columns, resolve_exclusions
from fcr_parser.report import build_extraction_payload, write_extraction_outputs, write_json, write_text
from fcr_parser.transcript import build_transcript
from fcr_parser.workbook import WORKBOOK_FORMATS, convert_workbook_to_csv

CSV_FORMATS = frozenset({".csv"})

STATUS_OK = "ok"
STATUS_FAILED = "failed"
SUMMARY_COLUMNS = [
    "file",
    "status",
    "marks_count",
    "cargo_count",
    "excluded_columns",
    "json_output",
    "text_output",
    "transcript_output",
    "warnings",
    "error",
]


# ══════════════════════════════════════════════════════════════════════════════
# DATA CLASSES
# ══════════════════════════════════════════════════════════════════════════════

@dataclass
class FileRecord:
    file: str
    status: str
    marks_count: int = 0
    cargo_count: int = 0
    excluded_columns: int = 0
    json_output: str | None = None
    text_output: str | None = None
    transcript_output: str | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class ProcessingResult:
    records: list[FileRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for record in self.records if record.status == STATUS_OK)

    @property
    def failure_count(self) -> int:
        return sum(1 for record in self.records if record.status == STATUS_FAILED)

    @property
    def total_count(self) -> int:
        return self.success_count + self.failure_count

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for record in self.records:
            row = asdict(record)
            row["warnings"] = " | ".join(record.warnings)
            rows.append(row)
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


# ══════════════════════════════════════════════════════════════════════════════
# SINGLE FILE
# ══════════════════════════════════════════════════════════════════════════════

def process_file(
    csv_path: Path,
    output_dir: Path,
    cleaned_dir: Path,
    config: AliasConfig | None = None,
    *,
    display_name: str | None = None,
) -> FileRecord:
    """Extract, transcribe and write outputs for one file. Errors propagate."""
    config = config or AliasConfig()
    warnings: list[str] = []

    columns = extract_columns(
        csv_path,
        {"marks": config.aliases("marks"), "cargo": config.aliases("cargo")},
        warnings=warnings,
    )
    marks, cargo = columns["marks"], columns["cargo"]
    excluded = resolve_exclusions(csv_path, config.exclusion_groups)

    record = FileRecord(
        file=display_name or csv_path.name,
        status=STATUS_OK,
        marks_count=len(marks),
        cargo_count=len(cargo),
        excluded_columns=len(excluded),
        warnings=warnings,
    )

    transcript = build_transcript(csv_path, excluded)
    transcript_path = cleaned_dir / f"{csv_path.stem}_cleaned.txt"
    try:
        write_text(transcript_path, transcript)
        record.transcript_output = str(transcript_path)
    except OSError as exc:
        warnings.append(f"Could not save cleaned transcript: {exc}")

    payload = build_extraction_payload(csv_path, columns, warnings=warnings)
    outputs = write_extraction_outputs(payload, output_dir, csv_path.stem)
    record.json_output = outputs["json"]
    record.text_output = outputs["text"]
    return record


# ══════════════════════════════════════════════════════════════════════════════
# FOLDER
# ══════════════════════════════════════════════════════════════════════════════

def list_inputs(input_dir: Path, suffixes: "set[str] | frozenset[str]") -> list[Path]:
    """Files in ``input_dir`` whose suffix, in any case, is one of ``suffixes``."""
    return sorted(
        path for path in input_dir.iterdir()
        if path.is_file() and path.suffix.lower() in suffixes
    )


def convert_workbooks(
    input_dir: Path,
    converted_dir: Path,
    result: ProcessingResult,
    claimed_names: Iterable[str] = (),
) -> list[tuple[Path, str]]:
    """
    Flatten every workbook in ``input_dir``; returns (csv_path, source_name) pairs.

    Outputs are named by source stem. A workbook whose stem is already taken,
    case-insensitively, by a CSV in the folder or an earlier workbook is
    skipped with a warning.
    """
    claimed = {Path(name).stem.casefold(): name for name in claimed_names}

    converted: list[tuple[Path, str]] = []
    for workbook_path in list_inputs(input_dir, WORKBOOK_FORMATS):
        key = workbook_path.stem.casefold()
        if key in claimed:
            result.warnings.append(
                f"Skipped {workbook_path.name}: {claimed[key]} in the input folder has the same name"
            )
            continue
        claimed[key] = workbook_path.name
        try:
            csv_path = convert_workbook_to_csv(workbook_path, converted_dir / f"{workbook_path.stem}.csv")
        except Exception as exc:
            result.records.append(
                FileRecord(file=workbook_path.name, status=STATUS_FAILED, error=f"Conversion failed: {exc}")
            )
            continue
        converted.append((csv_path, workbook_path.name))
    return converted


def process_folder(
    input_dir: "str | Path",
    output_dir: "str | Path",
    cleaned_dir: "str | Path | None" = None,
    *,
    config: AliasConfig | None = None,
    convert: bool = True,
) -> ProcessingResult:
    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    cleaned_dir = Path(cleaned_dir) if cleaned_dir else output_dir / "cleaned"
    if not input_dir.is_dir():
        raise FileNotFoundError(f"Input folder not found: {input_dir}")

    result = ProcessingResult()
    csv_paths = list_inputs(input_dir, CSV_FORMATS)
    sources: list[tuple[Path, str]] = [(path, path.name) for path in csv_paths]
    if convert:
        claimed = [path.name for path in csv_paths]
        sources.extend(convert_workbooks(input_dir, output_dir / "converted", result, claimed))
    sources.sort(key=lambda item: item[1])

    for csv_path, name in sources:
        try:
            record = process_file(csv_path, output_dir, cleaned_dir, config, display_name=name)
        except Exception as exc:
            record = FileRecord(file=name, status=STATUS_FAILED, error=str(exc) or type(exc).__name__)
        result.records.append(record)

    result.records.sort(key=lambda record: record.file)
    return result


def build_batch_summary(result: ProcessingResult, *, input_dir: Path, output_dir: Path) -> dict[str, Any]:
    return {
        **contract_fields("fcr_parser.batch_summary"),
        "input_dir": str(input_dir),
        "output_dir": str(output_dir),
        "files": {
            "total": result.total_count,
            "successful": result.success_count,
            "failed": result.failure_count,
        },
        "records": [asdict(record) for record in result.records],
        "run_summary": build_run_summary(
            command="process",
            input_path=input_dir,
            output_path=output_dir,
            status=STATUS_OK if result.failure_count == 0 else "partial",
            warnings=result.warnings,
            metrics={
                "files_total": result.total_count,
                "files_successful": result.success_count,
                "files_failed": result.failure_count,
            },
        ),
    }


def write_batch_summary(result: ProcessingResult, *, input_dir: Path, output_dir: Path) -> dict[str, str]:
    csv_path = output_dir / "summary.csv"
    json_path = output_dir / "summary.json"
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_dataframe().to_csv(csv_path, index=False)
    write_json(json_path, build_batch_summary(result, input_dir=input_dir, output_dir=output_dir))
    return {"csv": str(csv_path), "json": str(json_path)}
