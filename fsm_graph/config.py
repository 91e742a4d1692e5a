# fsm_graph/config.py
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import (
    ATTRIBUTE_KEYWORDS_DEFAULT,
    CONFIG_SECTIONS,
    EDGE_STYLES_DEFAULT,
    GRAPH_NAME_DEFAULT,
    GRID_MIN_LABELS_DEFAULT,
    MINLEN_DEFAULT,
    OUTPUT_SUFFIX_DEFAULT,
    RANKDIR_DEFAULT,
    TAG_DEFAULT,
)
from .validate import ValidateConfig


@dataclass(frozen=True)
class RenderOptions:
    graph_name: str = GRAPH_NAME_DEFAULT
    rankdir: str = RANKDIR_DEFAULT
    edge_styles: tuple[str, ...] = EDGE_STYLES_DEFAULT
    grid_min_labels: int = GRID_MIN_LABELS_DEFAULT
    minlen: int = MINLEN_DEFAULT
    legend: bool = True

    def __post_init__(self) -> None:
        if not self.edge_styles:
            raise ValueError("render.edge_styles must not be empty")
        if self.grid_min_labels < 1:
            raise ValueError("render.grid_min_labels must be >= 1")


@dataclass(frozen=True)
class ExtractOptions:
    tag: str = TAG_DEFAULT
    attribute_keywords: tuple[str, ...] = ATTRIBUTE_KEYWORDS_DEFAULT


@dataclass(frozen=True)
class OutputOptions:
    suffix: str = OUTPUT_SUFFIX_DEFAULT


@dataclass(frozen=True)
class ToolConfig:
    render: RenderOptions = field(default_factory=RenderOptions)
    extract: ExtractOptions = field(default_factory=ExtractOptions)
    output: OutputOptions = field(default_factory=OutputOptions)
    validate: ValidateConfig = field(default_factory=ValidateConfig)


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML {path}: {e}") from e

    # An empty file is an empty configuration.
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )
    return data


def _coerce(section: str, key: str, value: Any, default: Any) -> Any:
    where = f"{section}.{key}"
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise TypeError(f"{where} must be a boolean, got {type(value).__name__}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{where} must be an integer, got {type(value).__name__}")
        return value
    if isinstance(default, tuple):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError(f"{where} must be a list of strings")
        return tuple(value)
    if isinstance(default, (set, frozenset)):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError(f"{where} must be a list of strings")
        return set(value)
    if not isinstance(value, str):
        raise TypeError(f"{where} must be a string, got {type(value).__name__}")
    return value


def _apply_section(base: Any, section: str, values: Any, path: Path) -> Any:
    if values is None:
        return base
    if not isinstance(values, dict):
        raise TypeError(f"{path}: section {section!r} must be a mapping")

    known = {f.name for f in fields(base)}
    changes: dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            raise ValueError(f"{path}: unknown key {section}.{key}")
        changes[key] = _coerce(section, key, value, getattr(base, key))
    return replace(base, **changes)


def load_config(path: Optional[Path]) -> ToolConfig:
    """Load a YAML configuration file; `None` yields the defaults."""
    cfg = ToolConfig()
    if path is None:
        return cfg
    if not path.exists():
        raise FileNotFoundError(str(path))

    data = _load_yaml_mapping(path)
    unknown = sorted(set(data) - set(CONFIG_SECTIONS))
    if unknown:
        raise ValueError(f"{path}: unknown section(s): {', '.join(unknown)}")

    return ToolConfig(
        render=_apply_section(cfg.render, "render", data.get("render"), path),
        extract=_apply_section(cfg.extract, "extract", data.get("extract"), path),
        output=_apply_section(cfg.output, "output", data.get("output"), path),
        validate=_apply_section(cfg.validate, "validate", data.get("validate"), path),
    )
