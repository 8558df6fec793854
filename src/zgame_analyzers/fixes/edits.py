"""Edit construction - whole-line deletion and comment annotation."""

from __future__ import annotations

from typing import Any

from zgame_analyzers.fixes.models import FixEdit

_WHITESPACE = b" \t\f\v\r"


def newline_style(source: bytes) -> bytes:
    """The document's newline sequence (``\\r\\n`` if any line uses it)."""
    return b"\r\n" if b"\r\n" in source else b"\n"


def line_bounds(source: bytes, position: int) -> tuple[int, int]:
    """[start, end) of the line containing ``position``, excluding its newline."""
    start = source.rfind(b"\n", 0, position) + 1
    end = source.find(b"\n", position)
    if end < 0:
        end = len(source)
    return start, end


def deletion_edit(source: bytes, node: Any) -> FixEdit:
    """Remove ``node``; when it is alone on its lines, remove those lines entirely."""
    start, end = node.start_byte, node.end_byte
    line_start, _ = line_bounds(source, start)
    _, line_end = line_bounds(source, end)

    before = source[line_start:start]
    after = source[end:line_end]
    if before.strip(_WHITESPACE) or after.strip(_WHITESPACE):
        return FixEdit.remove(start, end)

    if line_end < len(source):
        line_end += 1  # Trailing newline
    return FixEdit.remove(line_start, line_end)


def annotation_edit(source: bytes, node: Any, comment: str) -> FixEdit | None:
    """Insert ``comment`` on its own line above ``node``'s line.

    Returns None if the line above already carries the comment.
    """
    line_start, line_end = line_bounds(source, node.start_byte)
    line = source[line_start:line_end]
    indent = line[: len(line) - len(line.lstrip(b" \t"))]
    encoded = comment.encode("utf-8")

    if line_start > 0:
        prev_start, prev_end = line_bounds(source, line_start - 1)
        if source[prev_start:prev_end].strip(_WHITESPACE) == encoded:
            return None

    return FixEdit.insert_comment(line_start, indent + encoded + newline_style(source))
