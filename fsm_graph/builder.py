# fsm_graph/builder.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Hashable, Optional

from .config import RenderOptions
from .constants import (
    INIT_NODE_ID,
    INPUT_NODE_PREFIX,
    LEGEND_NODE_PREFIX,
    OUTPUT_NODE_PREFIX,
)
from .dot_fmt import AttrValue, dot_edge, dot_node, dot_quote, dot_same_rank
from .label_grid import format_label_grid
from .model import FromState, StateMachineDef

_log = logging.getLogger(__name__)

Attrs = list[tuple[str, AttrValue]]


@dataclass(frozen=True)
class EdgeGroup:
    """Transitions from one source sharing an `(output, final_state)` pair."""

    from_state: str
    final_state: str
    output: Optional[str]
    inputs: tuple[str, ...]
    style: str
    back: bool = False
    same_rank: bool = False


@dataclass
class _PassState:
    """Accumulator threaded through one planning pass."""

    styles: tuple[str, ...]
    seen_sources: dict[str, None] = field(default_factory=dict)
    style_index: int = 0

    def next_style(self) -> str:
        style = self.styles[self.style_index % len(self.styles)]
        self.style_index += 1
        return style


@dataclass
class _Lines:
    """Insertion-ordered, first-wins collection of rendered lines."""

    logger: logging.Logger
    lines: dict[Hashable, str] = field(default_factory=dict)

    def add(self, key: Hashable, line: str) -> bool:
        if key in self.lines:
            return False
        self.lines[key] = line
        return True

    def add_node(self, node_id: str, attrs: Attrs) -> None:
        self.add(("node", node_id), dot_node(node_id, attrs))

    def add_edge(self, src: str, dst: str, attrs: Attrs, reverse: bool = False) -> None:
        # Keyed on the logical direction so a reversed back edge never hides
        # a genuine edge the other way.
        tail, head = (dst, src) if reverse else (src, dst)
        if not self.add(("edge", src, dst), dot_edge(tail, head, attrs)):
            self.logger.debug("dropping duplicate edge %s -> %s", src, dst)


def group_transitions(from_state: FromState) -> list[tuple[Optional[str], str, list[str]]]:
    """Group by `(output, final_state)` in first-seen order, collecting inputs."""
    groups: dict[tuple[Optional[str], str], list[str]] = {}
    for transition in from_state.transitions:
        key = (transition.output, transition.final_state)
        groups.setdefault(key, []).append(transition.input_value)
    return [(output, final_state, inputs) for (output, final_state), inputs in groups.items()]


def plan_edge_groups(
    fsm: StateMachineDef, options: Optional[RenderOptions] = None
) -> list[EdgeGroup]:
    """Decide grouping, line style and direction for every rendered edge group."""
    options = options or RenderOptions()
    state = _PassState(styles=tuple(options.edge_styles))
    planned: list[EdgeGroup] = []

    for from_state in fsm.transitions:
        src = from_state.initial_state
        state.seen_sources.setdefault(src, None)

        for output, final_state, inputs in group_transitions(from_state):
            same_rank = final_state == src
            planned.append(
                EdgeGroup(
                    from_state=src,
                    final_state=final_state,
                    output=output,
                    inputs=tuple(inputs),
                    style=state.next_style(),
                    back=not same_rank and final_state in state.seen_sources,
                    same_rank=same_rank,
                )
            )

    return planned


def format_inputs(inputs: tuple[str, ...], options: RenderOptions) -> str:
    if len(inputs) >= options.grid_min_labels:
        return format_label_grid(inputs)
    return ", ".join(inputs)


def input_node_id(group: EdgeGroup) -> str:
    return f"{INPUT_NODE_PREFIX}:{group.from_state}:{group.output}:{group.final_state}"


def output_node_id(group: EdgeGroup) -> str:
    # Shared by every source that runs the same output into the same state.
    return f"{OUTPUT_NODE_PREFIX}:{group.output}:{group.final_state}"


def _render_group(group: EdgeGroup, options: RenderOptions, out: _Lines) -> None:
    label = format_inputs(group.inputs, options)
    src, dst = group.from_state, group.final_state

    if group.output is None:
        attrs: Attrs = [("label", label), ("style", group.style)]
        if not group.same_rank:
            attrs.append(("minlen", options.minlen))
        if group.back:
            attrs.append(("dir", "back"))
        out.add_edge(src, dst, attrs, reverse=group.back)
        return

    in_id = input_node_id(group)
    out_id = output_node_id(group)
    out.add_node(in_id, [("label", label), ("shape", "cds")])
    out.add_node(out_id, [("label", group.output), ("shape", "note")])

    back: Attrs = [("dir", "back")] if group.back else []
    out.add_edge(src, in_id, [("style", group.style), ("dir", "none")], reverse=group.back)
    out.add_edge(in_id, out_id, [("style", group.style)] + back, reverse=group.back)
    out.add_edge(out_id, dst, [("style", group.style)] + back, reverse=group.back)

    if group.same_rank:
        out.add(("rank", src, in_id, out_id), dot_same_rank([src, in_id, out_id]))


def _legend_lines() -> list[str]:
    def node(kind: str, attrs: Attrs) -> str:
        return "  " + dot_node(f"{LEGEND_NODE_PREFIX}:{kind}", attrs)

    return [
        '  subgraph "cluster_legend" {',
        '    label="Legend";',
        "    style=dashed;",
        node("state", [("label", "state")]),
        node("input", [("label", "input"), ("shape", "cds")]),
        node("output", [("label", "output"), ("shape", "note")]),
        "  }",
    ]


def build_diagram(
    fsm: StateMachineDef,
    options: Optional[RenderOptions] = None,
    logger: Optional[logging.Logger] = None,
) -> tuple[str, str]:
    """Render a state machine as DOT; returns `(fsm.name, dot_source)`."""
    options = options or RenderOptions()
    logger = logger or _log

    lines: list[str] = [
        f"digraph {dot_quote(options.graph_name)} {{",
        f"  rankdir={dot_quote(options.rankdir)};",
        "  newrank=true;",
        "  node [shape=Mrecord];",
        f'  {INIT_NODE_ID} [label="", shape=point];',
        f"  {INIT_NODE_ID} -> {dot_quote(fsm.initial_state)};",
    ]
    if options.legend:
        lines.extend(_legend_lines())

    out = _Lines(logger=logger)
    for group in plan_edge_groups(fsm, options):
        logger.debug(
            "%s: %s -> %s on %s%s (%s%s)",
            fsm.name,
            group.from_state,
            group.final_state,
            ", ".join(group.inputs),
            f" [{group.output}]" if group.output else "",
            group.style,
            ", back" if group.back else (", same rank" if group.same_rank else ""),
        )
        _render_group(group, options, out)

    lines.extend(out.lines.values())
    lines.append("}")
    return fsm.name, "\n".join(lines) + "\n"
