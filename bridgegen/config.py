"""Parsing of the directives that make up an include_cpp block."""

from __future__ import annotations

import hashlib
import json
import re
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from bridgegen.type_config import TypeConfig

IDENT = "ident"
STRING = "string"
PUNCT = "punct"

_MAKE_STRING = "make_string"


class DirectiveError(ValueError):
    """Raised when directive text cannot be understood."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset


class UnsafePolicy(Enum):
    ALL_FUNCTIONS_SAFE = "all_functions_safe"
    ALL_FUNCTIONS_UNSAFE = "all_functions_unsafe"


@dataclass(frozen=True)
class CppInclusion:
    """A header to include, or a preprocessor definition when ``is_define``."""

    text: str
    is_define: bool = False


@dataclass
class IncludeCppConfig:
    inclusions: list[CppInclusion] = field(default_factory=list)
    exclude_utilities: bool = False
    unsafe_policy: UnsafePolicy = UnsafePolicy.ALL_FUNCTIONS_UNSAFE
    type_config: TypeConfig = field(default_factory=TypeConfig)
    parse_only: bool = False

    def fingerprint(self) -> int:
        """A stable 64-bit digest of the whole configuration."""
        canonical = json.dumps(
            {
                "inclusions": [[inc.is_define, inc.text] for inc in self.inclusions],
                "exclude_utilities": self.exclude_utilities,
                "unsafe_policy": self.unsafe_policy.value,
                "pod_requests": self.type_config.pod_requests,
                "allowlist": self.type_config.allowlist,
                "blocklist": self.type_config.blocklist,
                "parse_only": self.parse_only,
            },
            sort_keys=True,
        )
        digest = hashlib.sha256(canonical.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big")


class _Token(NamedTuple):
    kind: str
    value: str
    offset: int


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<line_comment>//[^\n]*)
    |(?P<block_comment>/\*.*?\*/)
    |(?P<open_comment>/\*)
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<punct>[^\s"])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPE_RE = re.compile(r"\\(\n\s*|x[0-9a-fA-F]{2}|u\{[0-9a-fA-F]{1,6}\}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}


def _unescape(body: str, offset: int) -> str:
    def replace(match: re.Match[str]) -> str:
        esc = match.group(1)
        if esc.startswith("\n"):
            return ""
        if esc.startswith("x"):
            return chr(int(esc[1:], 16))
        if esc.startswith("u{"):
            return chr(int(esc[2:-1], 16))
        try:
            return _SIMPLE_ESCAPES[esc]
        except KeyError:
            raise DirectiveError(f"unknown character escape: \\{esc}", offset) from None

    return _ESCAPE_RE.sub(replace, body)


def tokenize(text: str) -> list[_Token]:
    """Split directive text into identifier, string and punctuation tokens."""
    tokens: list[_Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise DirectiveError("unterminated string literal", pos)
        kind = match.lastgroup
        if kind == "open_comment":
            raise DirectiveError("unterminated block comment", pos)
        if kind == "string":
            tokens.append(_Token(STRING, _unescape(match.group()[1:-1], pos), pos))
        elif kind in (IDENT, PUNCT):
            tokens.append(_Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class _Cursor:
    """A consuming view over a run of tokens."""

    def __init__(self, tokens: Iterable[_Token], end_offset: int) -> None:
        self._tokens = deque(tokens)
        self._end = end_offset

    def __bool__(self) -> bool:
        return bool(self._tokens)

    def peek(self) -> _Token | None:
        return self._tokens[0] if self._tokens else None

    def _offset(self) -> int:
        tok = self.peek()
        return tok.offset if tok is not None else self._end

    def pop(self) -> _Token:
        return self._tokens.popleft()

    def take_punct(self, char: str) -> bool:
        tok = self.peek()
        if tok is not None and tok.kind == PUNCT and tok.value == char:
            self.pop()
            return True
        return False

    def expect_ident(self) -> _Token:
        tok = self.peek()
        if tok is None or tok.kind != IDENT:
            raise DirectiveError("expected identifier", self._offset())
        return self.pop()

    def expect_string(self) -> str:
        tok = self.peek()
        if tok is None or tok.kind != STRING:
            raise DirectiveError("expected string literal", self._offset())
        return self.pop().value

    def parenthesized(self) -> _Cursor:
        start = self.peek()
        if start is None or start.kind != PUNCT or start.value != "(":
            raise DirectiveError("expected parentheses", self._offset())
        self.pop()
        inner: list[_Token] = []
        depth = 1
        while self._tokens:
            tok = self.pop()
            if tok.kind == PUNCT and tok.value == "(":
                depth += 1
            elif tok.kind == PUNCT and tok.value == ")":
                depth -= 1
                if depth == 0:
                    return _Cursor(inner, tok.offset)
            inner.append(tok)
        raise DirectiveError("unclosed delimiter", start.offset)

    def finish(self) -> None:
        if self._tokens:
            raise DirectiveError("unexpected token", self._offset())


def _parse_safety(cursor: _Cursor) -> UnsafePolicy:
    tok = cursor.peek()
    if tok is not None and tok.kind == IDENT and tok.value == "unsafe":
        cursor.pop()
        return UnsafePolicy.ALL_FUNCTIONS_SAFE
    error: DirectiveError | None = None
    result = UnsafePolicy.ALL_FUNCTIONS_UNSAFE
    if tok is not None and tok.kind == IDENT:
        cursor.pop()
        if tok.value == "unsafe_ffi":
            result = UnsafePolicy.ALL_FUNCTIONS_SAFE
        else:
            error = DirectiveError("expected unsafe_ffi", tok.offset)
    if cursor:
        raise DirectiveError("unexpected tokens within safety directive", cursor.peek().offset)
    if error is not None:
        raise error
    return result


def parse_safety(text: str) -> UnsafePolicy:
    """Parse the contents of a ``safety!(...)`` directive."""
    cursor = _Cursor(tokenize(text), len(text))
    policy = _parse_safety(cursor)
    cursor.finish()
    return policy


def _parse_string_arg(cursor: _Cursor) -> str:
    args = cursor.parenthesized()
    value = args.expect_string()
    args.finish()
    return value


def parse_config(text: str) -> IncludeCppConfig:
    """Parse the full body of an include_cpp block."""
    cursor = _Cursor(tokenize(text), len(text))
    config = IncludeCppConfig()
    type_config = config.type_config

    while cursor:
        if cursor.take_punct("#"):
            ident = cursor.expect_ident()
            if ident.value != "include":
                raise DirectiveError("expected include", ident.offset)
            config.inclusions.append(CppInclusion(cursor.expect_string()))
            continue
        ident = cursor.expect_ident()
        cursor.take_punct("!")
        name = ident.value
        if name in ("generate", "generate_pod"):
            item = _parse_string_arg(cursor)
            type_config.add_to_allowlist(item)
            if name == "generate_pod":
                type_config.note_pod_request(item)
        elif name == "block":
            type_config.add_to_blocklist(_parse_string_arg(cursor))
        elif name == "parse_only":
            config.parse_only = True
        elif name == "exclude_utilities":
            config.exclude_utilities = True
        elif name == "safety":
            args = cursor.parenthesized()
            config.unsafe_policy = _parse_safety(args)
            args.finish()
        else:
            raise DirectiveError(
                "expected generate, generate_pod, nested_type, safety or exclude_utilities",
                ident.offset,
            )

    if not config.exclude_utilities:
        type_config.add_to_allowlist(_MAKE_STRING)
    return config