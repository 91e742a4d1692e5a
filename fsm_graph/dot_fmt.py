# fsm_graph/dot_fmt.py
from __future__ import annotations

import re
from typing import Iterable, Union

# Values matching this are emitted bare (`shape=note`); everything else and
# every label is quoted.
DOT_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

AttrValue = Union[str, int, bool]


def dot_text(text: str) -> str:
    """Escape text for a double-quoted DOT string (newlines become `\\n`)."""
    return (
        str(text)
        .replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r\n", "\n")
        .replace("\n", "\\n")
    )


def dot_quote(text: str) -> str:
    return f'"{dot_text(text)}"'


def dot_value(key: str, value: AttrValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if key != "label" and DOT_ID_RE.match(value):
        return value
    return dot_quote(value)


def dot_attrs(attrs: Iterable[tuple[str, AttrValue]]) -> str:
    """Render `[k=v, ...]` in the given order; empty input renders nothing."""
    parts = [f"{key}={dot_value(key, value)}" for key, value in attrs]
    if not parts:
        return ""
    return " [" + ", ".join(parts) + "]"


def dot_node(node_id: str, attrs: Iterable[tuple[str, AttrValue]] = ()) -> str:
    return f"  {dot_quote(node_id)}{dot_attrs(attrs)};"


def dot_edge(src: str, dst: str, attrs: Iterable[tuple[str, AttrValue]] = ()) -> str:
    return f"  {dot_quote(src)} -> {dot_quote(dst)}{dot_attrs(attrs)};"


def dot_same_rank(node_ids: Iterable[str]) -> str:
    members = " ".join(f"{dot_quote(n)};" for n in node_ids)
    return f"  {{rank=same; {members}}}"
