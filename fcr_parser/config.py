"""
config.py — Alias group overrides

A JSON file may replace any of the built-in alias groups and choose which
groups the transcript cleaner suppresses:

    {
      "marks": ["Marks", "Shipping Marks"],
      "cargo": ["Cargo", "Description of Goods"],
      "exclude": ["marks", "cargo"]
    }

Groups left out keep their defaults. The default exclusion set is the marks
group plus the cargo group without its bare "Description" alias.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fcr_parser.columns import ALIAS_GROUPS, EXCLUSION_ALIAS_GROUPS

SUPPORTED_CONFIG_SUFFIXES = {".json", ".yml", ".yaml"}
OUTPUT_STAMP_ENV = "FCR_PARSER_OUTPUT_STAMP"


class ConfigError(ValueError):
    pass


@dataclass
class AliasConfig:
    groups: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(ALIAS_GROUPS))
    exclusion_groups: tuple[tuple[str, ...], ...] = EXCLUSION_ALIAS_GROUPS

    def aliases(self, name: str) -> tuple[str, ...]:
        try:
            return self.groups[name]
        except KeyError:
            raise ConfigError(f"Unknown alias group '{name}'. Known: {sorted(self.groups)}") from None


def _alias_list(name: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigError(f"Alias group '{name}' must be a non-empty list of strings.")
    aliases = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError(f"Alias group '{name}' contains a blank or non-string alias: {item!r}")
        aliases.append(item.strip())
    return tuple(aliases)


def parse_alias_config(payload: Any) -> AliasConfig:
    if not isinstance(payload, dict):
        raise ConfigError("Alias config root must be a JSON object.")

    known = set(ALIAS_GROUPS) | {"exclude"}
    unknown = sorted(set(payload) - known)
    if unknown:
        raise ConfigError(f"Unknown alias config keys: {unknown}. Allowed: {sorted(known)}")

    config = AliasConfig()
    for name in ALIAS_GROUPS:
        if name in payload:
            config.groups[name] = _alias_list(name, payload[name])

    if "exclude" in payload:
        names = payload["exclude"]
        if not isinstance(names, list) or not all(isinstance(item, str) for item in names):
            raise ConfigError("'exclude' must be a list of alias group names.")
        config.exclusion_groups = tuple(config.aliases(name) for name in names)
    elif "marks" in payload:
        # A custom marks group replaces the default marks exclusion too.
        config.exclusion_groups = (config.groups["marks"], *EXCLUSION_ALIAS_GROUPS[1:])
    return config


def load_alias_config(path: "str | Path | None") -> AliasConfig:
    if path is None:
        return AliasConfig()
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Alias config not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_CONFIG_SUFFIXES:
        raise ConfigError("Alias config must be .json, .yml, or .yaml")
    if suffix in {".yml", ".yaml"}:
        raise ConfigError("YAML alias configs are not supported yet. Use JSON for now.")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read alias config: {exc}") from exc
    return parse_alias_config(payload)


def timestamp_token() -> str:
    override = os.environ.get(OUTPUT_STAMP_ENV)
    if override:
        return override
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
