from __future__ import annotations

import argparse
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from fcr_parser import __version__ as TOOL_VERSION
from fcr_parser.batch import process_folder, write_batch_summary
from fcr_parser.config import AliasConfig, ConfigError, load_alias_config, timestamp_token
from fcr_parser.extractor import extract_columns, resolve_exclusions
from fcr_parser.report import (
    build_extraction_payload,
    json_dumps,
    render_text,
    write_extraction_outputs,
    write_text,
)
from fcr_parser.transcript import build_transcript
from fcr_parser.workbook import WORKBOOK_FORMATS, convert_workbook_to_csv, is_workbook_file

TEXT_FORMATS = {".csv", ".txt"}
ALL_SUPPORTED_FORMATS = TEXT_FORMATS | WORKBOOK_FORMATS
COLUMN_CHOICES = ["marks", "cargo", "shipper", "consignee"]
DEFAULT_COLUMNS = ["marks", "cargo"]

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_PARTIAL = 6


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class FcrParserArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def maybe_emit_json_stdout(payload: Any, enabled: bool) -> None:
    if enabled:
        print(json_dumps(payload))


def default_output_dir(input_path: Path) -> Path:
    return Path.cwd() / "fcr-parser-output" / f"{input_path.stem}-{timestamp_token()}"


def classify_backend_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (ValueError, UnicodeDecodeError)) and not isinstance(exc, ConfigError):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def require_input_file(input_path: Path) -> None:
    if not input_path.exists():
        raise CliError(f"File not found: {input_path}", EXIT_COMMAND_ERROR)
    suffix = input_path.suffix.lower()
    if suffix not in ALL_SUPPORTED_FORMATS:
        raise CliError(
            f"Unsupported file type '{suffix or '[missing extension]'}'. "
            f"Supported: {', '.join(sorted(ALL_SUPPORTED_FORMATS))}",
            EXIT_COMMAND_ERROR,
        )


@contextmanager
def delimited_source(input_path: Path) -> Iterator[Path]:
    """Yield a delimited-text path for ``input_path``, flattening workbooks first."""
    if not is_workbook_file(input_path):
        yield input_path
        return
    with tempfile.TemporaryDirectory(prefix="fcr_parser_convert_") as tmpdir:
        yield convert_workbook_to_csv(input_path, Path(tmpdir) / f"{input_path.stem}.csv")


def load_config(args: argparse.Namespace) -> AliasConfig:
    return load_alias_config(getattr(args, "aliases", None))


def build_parser() -> argparse.ArgumentParser:
    parser = FcrParserArgumentParser(
        prog="fcr-parser",
        description="Recover marks and cargo columns from spreadsheet-exported cargo receipts.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract semantic columns from one file.")
    extract.add_argument("input", help="Input file path (.csv, .txt, .xlsx, .xlsm)")
    extract.add_argument(
        "-c",
        "--column",
        dest="columns",
        action="append",
        choices=COLUMN_CHOICES,
        help="Column to extract; repeat for several (default: marks and cargo)",
    )
    extract.add_argument("-o", "--out", dest="out_dir", help="Write <stem>.json and <stem>.txt into this directory")
    extract.add_argument("--aliases", help="JSON alias config overriding the built-in alias groups")
    extract.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    extract.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")

    exclusions = subparsers.add_parser("exclusions", help="Show the column indices suppressed in transcripts.")
    exclusions.add_argument("input", help="Input file path")
    exclusions.add_argument("--aliases", help="JSON alias config")
    exclusions.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    clean = subparsers.add_parser("clean", help="Build the denoised transcript of one file.")
    clean.add_argument("input", help="Input file path")
    clean.add_argument("--output", help="Write the transcript to this path instead of stdout")
    clean.add_argument("--aliases", help="JSON alias config")
    clean.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")

    convert = subparsers.add_parser("convert", help="Flatten the first worksheet of a workbook to CSV.")
    convert.add_argument("input", help="Workbook path (.xlsx, .xlsm)")
    convert.add_argument("--output", help="CSV output path (default: next to the input)")
    convert.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")

    process = subparsers.add_parser("process", help="Process every receipt in a folder.")
    process.add_argument("input_dir", help="Folder holding .csv/.xlsx/.xlsm receipts")
    process.add_argument("-o", "--out", dest="out_dir", help="Output directory")
    process.add_argument("--cleaned", dest="cleaned_dir", help="Directory for cleaned transcripts")
    process.add_argument("--aliases", help="JSON alias config")
    process.add_argument("--no-convert", dest="convert", action="store_false", help="Ignore workbooks in the input folder")
    process.add_argument("--json", action="store_true", help="Write machine JSON to stdout")
    process.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")

    subparsers.add_parser("version", help="Print version")
    return parser


def run_extract(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        require_input_file(input_path)
        config = load_config(args)
        names = list(dict.fromkeys(args.columns or DEFAULT_COLUMNS))
        warnings: list[str] = []
        with delimited_source(input_path) as source:
            groups = {name: config.aliases(name) for name in names}
            columns = extract_columns(source, groups, warnings=warnings)
        payload = build_extraction_payload(input_path, columns, warnings=warnings)
        for warning in warnings:
            emit_human(f"Warning: {warning}", quiet=args.quiet or args.json)

        if args.out_dir:
            outputs = write_extraction_outputs(payload, Path(args.out_dir), input_path.stem)
            emit_human(f"JSON written: {outputs['json']}", quiet=args.quiet or args.json)
            emit_human(f"Text written: {outputs['text']}", quiet=args.quiet or args.json)
        if args.json:
            maybe_emit_json_stdout(payload, True)
        else:
            sys.stdout.write(render_text(payload))
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_exclusions(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        require_input_file(input_path)
        config = load_config(args)
        with delimited_source(input_path) as source:
            excluded = sorted(resolve_exclusions(source, config.exclusion_groups))
        if args.json:
            maybe_emit_json_stdout({"input": str(input_path), "excluded_columns": excluded}, True)
        else:
            print(" ".join(str(index) for index in excluded))
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_clean(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        require_input_file(input_path)
        config = load_config(args)
        with delimited_source(input_path) as source:
            excluded = resolve_exclusions(source, config.exclusion_groups)
            transcript = build_transcript(source, excluded)
        if args.output:
            write_text(Path(args.output), transcript)
            emit_human(f"Transcript written: {args.output}", quiet=args.quiet)
        else:
            sys.stdout.write(transcript)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_convert(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    try:
        if not input_path.exists():
            raise CliError(f"File not found: {input_path}", EXIT_COMMAND_ERROR)
        if not is_workbook_file(input_path):
            raise CliError(
                f"convert expects a workbook ({', '.join(sorted(WORKBOOK_FORMATS))}), got '{input_path.suffix}'",
                EXIT_COMMAND_ERROR,
            )
        output_path = Path(args.output) if args.output else input_path.with_suffix(".csv")
        if output_path.exists():
            raise CliError(f"Refusing to overwrite existing output: {output_path}", EXIT_COMMAND_ERROR)
        convert_workbook_to_csv(input_path, output_path)
        emit_human(f"Converted: {input_path.name} -> {output_path}", quiet=args.quiet)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def render_batch_summary(result) -> str:
    lines = [
        "fcr-parser process",
        f"Successful: {result.success_count}",
    ]
    if result.failure_count:
        lines.append(f"Failed: {result.failure_count}")
        lines.extend(
            f"- {record.file}: {record.error}" for record in result.records if record.error
        )
    for warning in result.warnings:
        lines.append(f"Warning: {warning}")
    return "\n".join(lines) + "\n"


def exit_code_for_batch(result) -> int:
    if result.failure_count == 0:
        return EXIT_SUCCESS
    if result.success_count == 0:
        return EXIT_COMMAND_ERROR
    return EXIT_PARTIAL


def run_process(args: argparse.Namespace) -> int:
    input_dir = Path(args.input_dir)
    if not input_dir.is_dir():
        eprint(f"Input folder not found: {input_dir}")
        return EXIT_COMMAND_ERROR

    try:
        config = load_config(args)
        out_dir = Path(args.out_dir) if args.out_dir else default_output_dir(input_dir)
        result = process_folder(
            input_dir,
            out_dir,
            args.cleaned_dir,
            config=config,
            convert=args.convert,
        )
        if result.total_count == 0:
            emit_human("No CSV or Excel files found in the input folder.", quiet=args.quiet)
            return EXIT_SUCCESS

        for record in result.records:
            marker = "Completed" if record.status == "ok" else "Error"
            emit_human(f"{marker}: {record.file}", quiet=args.quiet or args.json)
        outputs = write_batch_summary(result, input_dir=input_dir, output_dir=out_dir)
        if args.json:
            maybe_emit_json_stdout(
                {
                    "files": {
                        "total": result.total_count,
                        "successful": result.success_count,
                        "failed": result.failure_count,
                    },
                    "summary": outputs,
                },
                True,
            )
        else:
            emit_human(render_batch_summary(result).rstrip(), quiet=args.quiet)
            emit_human(f"Summary written: {outputs['csv']}", quiet=args.quiet)
        return exit_code_for_batch(result)
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.command == "extract":
            return run_extract(args)
        if args.command == "exclusions":
            return run_exclusions(args)
        if args.command == "clean":
            return run_clean(args)
        if args.command == "convert":
            return run_convert(args)
        if args.command == "process":
            return run_process(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
