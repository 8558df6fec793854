"""Preprocessor directive trivia and conditional-region resolution.

C# preprocessor directives are trivia: they never change the shape of the
syntax tree we analyze, but they decide whether a line is compiled into a
player build. Rules use them for two escapes:

- a finding inside ``#if UNITY_EDITOR`` (or any region whose condition text
  mentions a rule's allow keyword) is suppressed;
- a file that ``#define``\\ s the allow keyword is suppressed entirely.

The resolver is a textual approximation, not a preprocessor: it never
evaluates conditions. ``#else`` inherits the condition text of the branch it
replaces, so ``#if UNITY_EDITOR ... #else ... #endif`` treats both branches as
mentioning ``UNITY_EDITOR``. ``#elif`` pushes a new entry without popping its
sibling. Unbalanced directives never raise; they produce a best-effort stack.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum


class DirectiveKind(Enum):
    """Directive kinds the resolver cares about."""

    IF = "if"
    ELIF = "elif"
    ELSE = "else"
    ENDIF = "endif"
    DEFINE = "define"
    UNDEF = "undef"


@dataclass(frozen=True)
class DirectiveSpan:
    """A single directive found in a file's trivia."""

    kind: DirectiveKind
    condition_text: str | None
    position: int  # Byte offset of the '#'


@dataclass(frozen=True)
class RegionEntry:
    """An entry on the conditional region stack (kind is IF or ELIF)."""

    kind: DirectiveKind
    condition_text: str


_DIRECTIVE_RE = re.compile(rb"#[ \t]*(if|elif|else|endif|define|undef)\b(.*)")
_HORIZONTAL_WS = b" \t\f\v"


def _strip_trailing_comment(text: bytes) -> bytes:
    idx = text.find(b"//")
    if idx >= 0:
        text = text[:idx]
    return text.strip()


class _LexState:
    """Multi-line lexical state carried between lines."""

    __slots__ = ("block_comment", "verbatim_string", "raw_quotes")

    def __init__(self) -> None:
        self.block_comment = False
        self.verbatim_string = False
        self.raw_quotes = 0

    @property
    def in_code(self) -> bool:
        return not (self.block_comment or self.verbatim_string or self.raw_quotes)

    def consume(self, line: bytes) -> None:
        """Advance the state across one line of code."""
        i = 0
        n = len(line)
        while i < n:
            if self.block_comment:
                end = line.find(b"*/", i)
                if end < 0:
                    return
                self.block_comment = False
                i = end + 2
                continue
            if self.verbatim_string:
                end = line.find(b'"', i)
                if end < 0:
                    return
                if line[end + 1 : end + 2] == b'"':
                    i = end + 2
                    continue
                self.verbatim_string = False
                i = end + 1
                continue
            if self.raw_quotes:
                end = line.find(b'"' * self.raw_quotes, i)
                if end < 0:
                    return
                i = end + self.raw_quotes
                self.raw_quotes = 0
                continue

            ch = line[i : i + 1]
            two = line[i : i + 2]
            if two == b"//":
                return
            if two == b"/*":
                self.block_comment = True
                i += 2
            elif two in (b'@"', b"$@", b"@$"):
                quote = line.find(b'"', i)
                if quote < 0 or quote > i + 2:
                    i += 2
                    continue
                self.verbatim_string = True
                i = quote + 1
            elif line.startswith(b'"""', i):
                count = 3
                while line[i + count : i + count + 1] == b'"':
                    count += 1
                self.raw_quotes = count
                i += count
            elif ch == b'"' or ch == b"'":
                i = self._skip_quoted(line, i + 1, ch)
            else:
                i += 1

    @staticmethod
    def _skip_quoted(line: bytes, i: int, quote: bytes) -> int:
        n = len(line)
        while i < n:
            c = line[i : i + 1]
            if c == b"\\":
                i += 2
                continue
            if c == quote:
                return i + 1
            i += 1
        return n


def scan_directives(source: bytes) -> tuple[DirectiveSpan, ...]:
    """Scan a file's bytes for conditional and define directives.

    A directive is a line whose first non-blank character is ``#``. Lines
    inside block comments and multi-line verbatim or raw string literals are
    skipped. ``#region``, ``#pragma`` and other directives are not returned.
    """
    directives: list[DirectiveSpan] = []
    state = _LexState()
    line_start = 0

    for raw_line in source.split(b"\n"):
        line = raw_line.rstrip(b"\r")
        stripped = line.lstrip(_HORIZONTAL_WS)

        if state.in_code and stripped.startswith(b"#"):
            match = _DIRECTIVE_RE.match(stripped)
            if match is not None:
                kind = DirectiveKind(match.group(1).decode("ascii"))
                rest = _strip_trailing_comment(match.group(2))
                condition = rest.decode("utf-8", errors="replace") if rest else None
                directives.append(
                    DirectiveSpan(
                        kind=kind,
                        condition_text=condition,
                        position=line_start + (len(line) - len(stripped)),
                    )
                )
        else:
            state.consume(line)

        line_start += len(raw_line) + 1

    return tuple(directives)


def replay_region_stack(
    directives: Iterable[DirectiveSpan], target_position: int
) -> list[RegionEntry]:
    """Rebuild the stack of conditional regions enclosing ``target_position``.

    Directives positioned after the target are ignored, wherever they appear
    in the sequence.
    """
    stack: list[RegionEntry] = []
    for directive in directives:
        if directive.position > target_position:
            continue
        if directive.kind in (DirectiveKind.IF, DirectiveKind.ELIF):
            stack.append(RegionEntry(directive.kind, directive.condition_text or ""))
        elif directive.kind is DirectiveKind.ENDIF and stack:
            stack.pop()
        elif directive.kind is DirectiveKind.ELSE and stack:
            replaced = stack.pop()
            stack.append(RegionEntry(DirectiveKind.ELIF, replaced.condition_text))
    return stack


def is_position_inside_condition_matching(
    directives: Sequence[DirectiveSpan], target_position: int, keyword: str
) -> bool:
    """True if an enclosing ``#if``/``#elif`` condition contains ``keyword``.

    The match is a case-sensitive substring test on the raw condition text.
    """
    if not keyword:
        return False
    return any(
        keyword in entry.condition_text
        for entry in replay_region_stack(directives, target_position)
    )


def file_defines_symbol(directives: Iterable[DirectiveSpan], symbol: str) -> bool:
    """True if the file contains ``#define <symbol>``."""
    if not symbol:
        return False
    return any(
        d.kind is DirectiveKind.DEFINE and (d.condition_text or "").split() == [symbol]
        for d in directives
    )
