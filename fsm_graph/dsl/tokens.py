# fsm_graph/dsl/tokens.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Literal

TokenKind = Literal["ident", "punct", "literal", "group"]

DELIMITERS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}
CLOSERS: dict[str, str] = {close: open_ for open_, close in DELIMITERS.items()}

# Longest first so that `..=` wins over `..`.
MULTI_CHAR_PUNCT: tuple[str, ...] = (
    "..=",
    "...",
    "<<=",
    ">>=",
    "::",
    "=>",
    "->",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "..",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "^=",
    "&=",
    "|=",
    "<<",
    ">>",
)

IDENT_RE = re.compile(r"[^\W\d]\w*")
NUMBER_RE = re.compile(r"\d[\w]*(?:\.\d[\w]*)?")
STRING_PREFIXES = ("b", "c", "r", "br", "cr")


class LexError(ValueError):
    """Host source text could not be split into tokens."""

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int = 0
    column: int = 0
    delimiter: str = ""
    children: tuple["Token", ...] = ()

    def is_ident(self, text: str | None = None) -> bool:
        return self.kind == "ident" and (text is None or self.text == text)

    def is_punct(self, text: str) -> bool:
        return self.kind == "punct" and self.text == text

    def is_group(self, delimiter: str) -> bool:
        return self.kind == "group" and self.delimiter == delimiter

    def describe(self) -> str:
        """Human-readable form used in diagnostics."""
        if self.kind == "ident":
            return f"identifier `{self.text}`"
        if self.kind == "literal":
            return f"literal `{self.text}`"
        if self.kind == "group":
            return f"`{self.delimiter} ... {DELIMITERS[self.delimiter]}` group"
        return f"`{self.text}`"

    def location(self) -> str:
        if not self.line:
            return ""
        return f"line {self.line}, column {self.column}"


def ident(text: str) -> Token:
    return Token("ident", text)


def punct(text: str) -> Token:
    return Token("punct", text)


def group(delimiter: str, children: Iterable[Token] = ()) -> Token:
    if delimiter not in DELIMITERS:
        raise ValueError(f"unknown group delimiter: {delimiter!r}")
    return Token("group", delimiter, delimiter=delimiter, children=tuple(children))


class _Lexer:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.line_start = 0

    @property
    def column(self) -> int:
        return self.pos - self.line_start + 1

    def _advance_to(self, end: int) -> None:
        chunk = self.text[self.pos:end]
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.line_start = self.pos + chunk.rindex("\n") + 1
        self.pos = end

    def _skip_trivia(self) -> None:
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch.isspace():
                self._advance_to(self.pos + 1)
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self._advance_to(len(text) if end < 0 else end)
            elif text.startswith("/*", self.pos):
                self._skip_block_comment()
            else:
                return

    def _skip_block_comment(self) -> None:
        line, column = self.line, self.column
        depth = 0
        i = self.pos
        while i < len(self.text):
            if self.text.startswith("/*", i):
                depth += 1
                i += 2
            elif self.text.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    self._advance_to(i)
                    return
            else:
                i += 1
        raise LexError("unterminated block comment", line, column)

    def _quoted_end(self, start: int, quote: str) -> int:
        """Index just past the closing quote of an escaped literal at `start`."""
        i = start + 1
        while i < len(self.text):
            ch = self.text[i]
            if ch == "\\":
                i += 2
            elif ch == quote:
                return i + 1
            else:
                i += 1
        raise LexError("unterminated literal", self.line, self.column)

    def _raw_string_end(self, start: int) -> int:
        # `start` points at the first `#` or `"` after the `r` prefix.
        hashes = 0
        i = start
        while i < len(self.text) and self.text[i] == "#":
            hashes += 1
            i += 1
        if i >= len(self.text) or self.text[i] != '"':
            raise LexError("malformed raw string", self.line, self.column)
        terminator = '"' + "#" * hashes
        end = self.text.find(terminator, i + 1)
        if end < 0:
            raise LexError("unterminated raw string", self.line, self.column)
        return end + len(terminator)

    def _token(self, kind: TokenKind, end: int, text: str | None = None) -> Token:
        token = Token(kind, self.text[self.pos:end] if text is None else text, self.line, self.column)
        self._advance_to(end)
        return token

    def _word(self) -> Token:
        text = self.text
        match = IDENT_RE.match(text, self.pos)
        assert match is not None
        word, end = match.group(0), match.end()
        nxt = text[end:end + 1]

        if word in STRING_PREFIXES:
            if word.endswith("r") and nxt in ('"', "#") and (
                nxt == '"' or text[end:].lstrip("#").startswith('"')
            ):
                return self._token("literal", self._raw_string_end(end))
            if not word.endswith("r") and nxt == '"':
                return self._token("literal", self._quoted_end(end, '"'))
        if word == "b" and nxt == "'":
            return self._token("literal", self._quoted_end(end, "'"))
        if word == "r" and nxt == "#":
            raw = IDENT_RE.match(text, end + 1)
            if raw is not None:
                return self._token("ident", raw.end(), raw.group(0))
        return self._token("ident", end)

    def _quote(self) -> Token:
        text = self.text
        i = self.pos
        # Char literal ('a', '\n', '\u{1F600}') vs. lifetime ('a).
        if text.startswith("\\", i + 1):
            return self._token("literal", self._quoted_end(i, "'"))
        if i + 2 < len(text) and text[i + 2] == "'":
            return self._token("literal", i + 3)
        return self._token("punct", i + 1)

    def _punct(self) -> Token:
        for candidate in MULTI_CHAR_PUNCT:
            if self.text.startswith(candidate, self.pos):
                return self._token("punct", self.pos + len(candidate))
        return self._token("punct", self.pos + 1)

    def tokens(self) -> list[Token]:
        # Each stack frame: (opening token or None, children collected so far).
        stack: list[tuple[Token | None, list[Token]]] = [(None, [])]
        text = self.text

        while True:
            self._skip_trivia()
            if self.pos >= len(text):
                break
            ch = text[self.pos]

            if ch in DELIMITERS:
                opener = self._token("punct", self.pos + 1)
                stack.append((opener, []))
                continue

            if ch in CLOSERS:
                opener, children = stack[-1]
                if opener is None or opener.text != CLOSERS[ch]:
                    raise LexError(f"unexpected `{ch}`", self.line, self.column)
                self._advance_to(self.pos + 1)
                stack.pop()
                stack[-1][1].append(
                    Token(
                        "group",
                        opener.text,
                        opener.line,
                        opener.column,
                        delimiter=opener.text,
                        children=tuple(children),
                    )
                )
                continue

            if IDENT_RE.match(text, self.pos):
                token = self._word()
            elif ch.isdigit():
                match = NUMBER_RE.match(text, self.pos)
                assert match is not None
                token = self._token("literal", match.end())
            elif ch == '"':
                token = self._token("literal", self._quoted_end(self.pos, '"'))
            elif ch == "'":
                token = self._quote()
            else:
                token = self._punct()
            stack[-1][1].append(token)

        if len(stack) > 1:
            opener = stack[-1][0]
            assert opener is not None
            raise LexError(f"unclosed `{opener.text}`", opener.line, opener.column)
        return stack[0][1]


def tokenize(text: str) -> list[Token]:
    """Split host source text into tokens, folding bracket pairs into groups."""
    return _Lexer(text).tokens()
