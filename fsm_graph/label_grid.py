# fsm_graph/label_grid.py
from __future__ import annotations

import math
from typing import Sequence


def grid_row_widths(count: int) -> list[int]:
    """Row widths for `count` labels laid out as a near-square grid.

    Rows are `base` or `base + 1` wide; the wider rows are contiguous and
    centred vertically.
    """
    if count < 1:
        raise ValueError("at least one label is required")

    base = math.isqrt(count)
    height = base + 1 if count > (base + 1) * base else base
    extra = count - base * height
    extra_start = (height - extra) // 2
    extra_end = extra_start + extra

    return [base + 1 if extra_start <= row < extra_end else base for row in range(height)]


def format_label_grid(labels: Sequence[str]) -> str:
    """Wrap labels into rows joined by ", ", rows separated by newlines."""
    rows: list[str] = []
    start = 0
    for width in grid_row_widths(len(labels)):
        rows.append(", ".join(labels[start:start + width]))
        start += width
    return "\n".join(rows)
