# fsm_graph/constants.py
from __future__ import annotations

# Macro name that introduces a state machine block in host source.
TAG_DEFAULT = "state_machine"

# Decorations accepted (and ignored) before the machine name.
ATTRIBUTE_KEYWORDS_DEFAULT: tuple[str, ...] = (
    "derive",
    "repr_c",
    "pub",
)

# Line styles cycled round-robin across transition groups.
EDGE_STYLES_DEFAULT: tuple[str, ...] = (
    "solid",
    "dashed",
    "dotted",
    "bold",
)

GRAPH_NAME_DEFAULT = "graph"
RANKDIR_DEFAULT = "LR"
MINLEN_DEFAULT = 2

# Label lists with at least this many entries are wrapped into a grid.
GRID_MIN_LABELS_DEFAULT = 4

OUTPUT_SUFFIX_DEFAULT = ".dot"

# Synthetic node ids. ':' cannot occur in a DSL identifier, so these never
# collide with state names.
INIT_NODE_ID = "SM_init"
INPUT_NODE_PREFIX = "input"
OUTPUT_NODE_PREFIX = "output"
LEGEND_NODE_PREFIX = "legend"

CONFIG_SECTIONS: tuple[str, ...] = (
    "render",
    "extract",
    "output",
    "validate",
)
