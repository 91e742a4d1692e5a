# fsm_graph/dsl/extract.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..constants import TAG_DEFAULT
from .tokens import Token, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DslBlock:
    """The body of one `tag! { ... }` invocation found in host source."""

    name: str
    line: int
    tokens: tuple[Token, ...]


def find_blocks(
    tokens: Sequence[Token],
    tag: str = TAG_DEFAULT,
    source_name: str = "<source>",
) -> list[DslBlock]:
    """Find top-level `tag ! <group>` invocations.

    Only single-segment macro paths count: `tag!` matches, `crate::tag!` does
    not. Nested groups (function bodies, modules) are not searched.
    """
    blocks: list[DslBlock] = []
    for i, token in enumerate(tokens):
        if not token.is_ident(tag):
            continue
        if i > 0 and tokens[i - 1].is_punct("::"):
            logger.debug("skipping qualified `%s!` at line %d", tag, token.line)
            continue
        if i + 2 >= len(tokens):
            continue
        bang, body = tokens[i + 1], tokens[i + 2]
        if not bang.is_punct("!") or body.kind != "group":
            continue
        blocks.append(
            DslBlock(
                name=f"{source_name}:{token.line}",
                line=token.line,
                tokens=body.children,
            )
        )
    return blocks


def extract_blocks(
    text: str,
    tag: str = TAG_DEFAULT,
    source_name: str = "<source>",
) -> list[DslBlock]:
    """Tokenize host source text and return its state machine blocks."""
    return find_blocks(tokenize(text), tag=tag, source_name=source_name)
