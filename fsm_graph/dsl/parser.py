# fsm_graph/dsl/parser.py
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..constants import ATTRIBUTE_KEYWORDS_DEFAULT
from ..model import FromState, StateMachineDef, Transition
from .tokens import DELIMITERS, Token


class GrammarError(ValueError):
    """A token did not match the expected state machine construct."""

    def __init__(self, expected: str, token: Optional[Token]) -> None:
        self.expected = expected
        self.token = token
        self.found = token.describe() if token is not None else "end of input"
        message = f"expected {expected}, found {self.found}"
        if token is not None and token.location():
            message = f"{message} ({token.location()})"
        super().__init__(message)


class _Cursor:
    """Forward-only view over one token sequence (the block or a group body)."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def bump(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def eat_punct(self, text: str) -> bool:
        token = self.peek()
        if token is not None and token.is_punct(text):
            self.pos += 1
            return True
        return False

    def expect_ident(self, what: str) -> str:
        token = self.peek()
        if token is None or token.kind != "ident":
            raise GrammarError(what, token)
        self.pos += 1
        return token.text

    def expect_punct(self, text: str) -> None:
        if not self.eat_punct(text):
            raise GrammarError(f"`{text}`", self.peek())

    def expect_group(self, delimiter: str, what: str) -> "_Cursor":
        token = self.peek()
        if token is None or not token.is_group(delimiter):
            close = DELIMITERS[delimiter]
            raise GrammarError(f"{what} in `{delimiter}...{close}`", token)
        self.pos += 1
        return _Cursor(token.children)

    def expect_end(self, what: str = "end of input") -> None:
        if not self.at_end():
            raise GrammarError(what, self.peek())


def _skip_attributes(cursor: _Cursor, keywords: Iterable[str]) -> None:
    keywords = set(keywords)
    while True:
        token = cursor.peek()
        if token is None:
            return
        if token.is_punct("#"):
            # `#[...]`
            cursor.bump()
            cursor.expect_group("[", "attribute")
        elif token.kind == "ident" and token.text in keywords:
            # `derive(Debug)`, `repr_c`, `pub(crate)`
            cursor.bump()
            nxt = cursor.peek()
            if nxt is not None and nxt.is_group("("):
                cursor.bump()
        else:
            return


def _parse_target(cursor: _Cursor, input_value: str) -> Transition:
    final_state = cursor.expect_ident("target state identifier")
    output = None
    token = cursor.peek()
    if token is not None and token.is_group("["):
        inner = cursor.expect_group("[", "output")
        output = inner.expect_ident("output identifier")
        inner.expect_end("`]` after output identifier")
    return Transition(input_value=input_value, final_state=final_state, output=output)


def _parse_braced(cursor: _Cursor) -> tuple[Transition, ...]:
    transitions: list[Transition] = []
    while not cursor.at_end():
        input_value = cursor.expect_ident("input identifier")
        cursor.expect_punct("=>")
        transitions.append(_parse_target(cursor, input_value))
        cursor.eat_punct(",")
    return tuple(transitions)


def _parse_transition_group(cursor: _Cursor) -> FromState:
    from_state = cursor.expect_ident("source state identifier")
    token = cursor.peek()

    if token is not None and token.is_group("("):
        # State(Input) => Target [Output]
        inner = cursor.expect_group("(", "input")
        input_value = inner.expect_ident("input identifier")
        inner.expect_end("`)` after input identifier")
        cursor.expect_punct("=>")
        transitions: tuple[Transition, ...] = (_parse_target(cursor, input_value),)
    else:
        # State => { Input => Target [Output], ... }
        cursor.expect_punct("=>")
        body = cursor.expect_group("{", "transitions")
        transitions = _parse_braced(body)

    cursor.eat_punct(",")
    return FromState(initial_state=from_state, transitions=transitions)


def parse_state_machine(
    tokens: Sequence[Token],
    attribute_keywords: Iterable[str] = ATTRIBUTE_KEYWORDS_DEFAULT,
) -> StateMachineDef:
    """Parse the token contents of one state machine block.

    Grammar:
      block            := attribute* IDENT '(' IDENT ')' transition_group*
      attribute        := '#' '[' ANY* ']' | KEYWORD ('(' ANY* ')')?
      transition_group := IDENT '(' IDENT ')' '=>' target ','?
                        | IDENT '=>' '{' (IDENT '=>' target ','?)* '}' ','?
      target           := IDENT ('[' IDENT ']')?

    Raises GrammarError on the first token that does not fit.
    """
    cursor = _Cursor(tokens)
    _skip_attributes(cursor, attribute_keywords)

    name = cursor.expect_ident("state machine name")
    inner = cursor.expect_group("(", "initial state")
    initial_state = inner.expect_ident("initial state identifier")
    inner.expect_end("`)` after initial state")

    groups: list[FromState] = []
    while not cursor.at_end():
        groups.append(_parse_transition_group(cursor))

    return StateMachineDef(name=name, initial_state=initial_state, transitions=tuple(groups))
