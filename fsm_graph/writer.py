# fsm_graph/writer.py
from __future__ import annotations

from pathlib import Path

from .constants import OUTPUT_SUFFIX_DEFAULT


def output_path(out_dir: Path, name: str, suffix: str = OUTPUT_SUFFIX_DEFAULT) -> Path:
    """Destination file for a diagram: `<out_dir>/<name><suffix>`."""
    return out_dir / f"{name}{suffix}"


def write_dot(path: Path, content: str) -> None:
    """Write DOT source as UTF-8, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
