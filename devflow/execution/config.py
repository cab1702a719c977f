"""Execution configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

import yaml


@dataclass
class RunConfig:
    """Configuration for pipeline execution."""

    model: str = "sonnet"
    max_turns: int = 25
    timeout_seconds: int = 300
    min_document_length: int = 100
    max_name_length: int = 100
    max_rounds_factor: int = 2
    repository_root: Path | None = None
    storage_dir: Path = Path(".devflow")

    @classmethod
    def from_yaml(cls, path: Path) -> RunConfig:
        """Load overrides from a YAML mapping; unknown keys are rejected."""
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        for key in ("repository_root", "storage_dir"):
            if data.get(key) is not None:
                data[key] = Path(data[key])
        return cls(**data)
