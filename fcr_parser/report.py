"""
report.py — Extraction payloads and their plain-text rendering

The JSON payload carries the extracted columns under PascalCase keys next to
the versioned contract metadata. The text rendering is meant for people:
one section per column, one value per line, section breaks kept verbatim.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from fcr_parser.contracts import build_run_summary, contract_fields

METADATA_KEYS = {"contract", "schema_version", "tool_version", "run_summary"}
MISSING_VALUE = "N/A"

COLUMN_KEYS = {
    "marks": "MarksAndNumbers",
    "cargo": "CargoDescription",
    "shipper": "ShipperInfo",
    "consignee": "ConsigneeInfo",
}


def build_extraction_payload(
    input_path: Path,
    columns: Mapping[str, list[str]],
    *,
    output_path: Path | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """
    Wrap extracted columns in the versioned extraction contract.

    ``columns`` is keyed by alias group name ("marks", "cargo", ...); the
    payload uses the matching PascalCase key from COLUMN_KEYS.
    """
    payload: dict[str, Any] = {}
    for name, values in columns.items():
        payload[COLUMN_KEYS.get(name, name)] = list(values)
    column_counts = {key: len(values) for key, values in payload.items()}
    payload.update(contract_fields("fcr_parser.extraction"))
    payload["run_summary"] = build_run_summary(
        command="extract",
        input_path=input_path,
        output_path=output_path,
        warnings=warnings or (),
        metrics={"values_extracted": column_counts},
    )
    return payload


def format_property_name(name: str) -> str:
    """MarksAndNumbers -> Marks And Numbers"""
    if not name:
        return name
    pieces = [name[0].upper()]
    for char in name[1:]:
        if char.isupper():
            pieces.append(" ")
        pieces.append(char)
    return "".join(pieces)


def _render_scalar(value: Any) -> str:
    if value is None:
        return MISSING_VALUE
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def render_text(payload: Mapping[str, Any]) -> str:
    lines: list[str] = []
    for key, value in payload.items():
        if key in METADATA_KEYS:
            continue
        lines.append(f"{format_property_name(key)}:")
        if isinstance(value, Mapping):
            for nested_key, nested_value in value.items():
                lines.append(f"  {nested_key}: {_render_scalar(nested_value)}")
        elif isinstance(value, (list, tuple)):
            lines.extend(_render_scalar(item) for item in value)
        else:
            lines.append(_render_scalar(value))
        lines.append("")
    return "\n".join(lines) + "\n" if lines else ""


# ══════════════════════════════════════════════════════════════════════════════
# FILE OUTPUT
# ══════════════════════════════════════════════════════════════════════════════

def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def write_text(path: Path, payload: str) -> None:
    ensure_parent(path)
    path.write_text(payload, encoding="utf-8")


def write_json(path: Path, payload: Any) -> None:
    write_text(path, json_dumps(payload))


def write_extraction_outputs(payload: Mapping[str, Any], output_dir: Path, stem: str) -> dict[str, str]:
    """Write <stem>.json and <stem>.txt into ``output_dir``."""
    json_path = output_dir / f"{stem}.json"
    text_path = output_dir / f"{stem}.txt"
    write_json(json_path, payload)
    write_text(text_path, render_text(payload))
    return {"json": str(json_path), "text": str(text_path)}
