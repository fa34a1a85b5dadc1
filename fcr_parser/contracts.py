"""Versioned output contracts shared by the extraction and batch payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from fcr_parser import __version__ as TOOL_VERSION

TOOL_NAME = "fcr-parser"

CONTRACT_VERSIONS = {
    "fcr_parser.extraction": "1.0.0",
    "fcr_parser.batch_summary": "1.0.0",
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_contract(name: str) -> dict[str, str]:
    try:
        version = CONTRACT_VERSIONS[name]
    except KeyError:
        raise KeyError(f"Unknown output contract: {name}") from None
    return {"name": name, "version": version}


def contract_fields(name: str) -> dict[str, Any]:
    """Metadata keys every payload carries next to its data."""
    contract = build_contract(name)
    return {
        "contract": contract,
        "schema_version": contract["version"],
        "tool_version": TOOL_VERSION,
    }


def build_run_summary(
    *,
    command: str,
    input_path: "str | Path",
    status: str = "ok",
    output_path: "str | Path | None" = None,
    metrics: Mapping[str, Any] | None = None,
    warnings: Iterable[str] = (),
    tool: str = TOOL_NAME,
) -> dict[str, Any]:
    # The same record can be reported by several passes over one file.
    unique_warnings = list(dict.fromkeys(warnings or ()))
    return {
        "tool": tool,
        "command": command,
        "status": status,
        "generated_at": utc_now_iso(),
        "input_file": str(input_path),
        "output_file": None if output_path is None else str(output_path),
        "warnings_count": len(unique_warnings),
        "warnings": unique_warnings,
        "metrics": dict(metrics or {}),
    }
