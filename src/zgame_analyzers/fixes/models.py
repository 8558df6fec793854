"""Fix models - edits, document snapshots and fix results."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum


class EditKind(Enum):
    """Kind of text edit a fix produces."""

    REMOVE = "remove"
    INSERT_COMMENT = "insert_comment"


@dataclass(frozen=True)
class FixEdit:
    """A byte-range edit.

    ``REMOVE`` deletes ``[start, end)``. ``INSERT_COMMENT`` inserts ``text``
    at ``start`` (``start == end``).
    """

    kind: EditKind
    start: int
    end: int
    text: bytes = b""

    @classmethod
    def remove(cls, start: int, end: int) -> FixEdit:
        return cls(EditKind.REMOVE, start, end)

    @classmethod
    def insert_comment(cls, position: int, text: bytes) -> FixEdit:
        return cls(EditKind.INSERT_COMMENT, position, position, text)

    def overlaps(self, other: FixEdit) -> bool:
        if self == other:
            return True
        # An insertion touching a removal's boundary does not conflict with it
        if self.start == self.end == other.start == other.end:
            return True
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Document:
    """Immutable snapshot of a source file."""

    path: str
    source: bytes

    @property
    def content_hash(self) -> str:
        return hashlib.sha256(self.source).hexdigest()[:12]

    def apply(self, edits: Iterable[FixEdit]) -> Document:
        """New snapshot with non-overlapping ``edits`` applied.

        Edits are taken in file order; one that overlaps an already accepted
        edit is dropped. Accepted edits are applied from the end of the file
        backwards so earlier offsets stay valid.
        """
        accepted: list[FixEdit] = []
        for edit in sorted(edits, key=lambda e: (e.start, e.end)):
            if any(edit.overlaps(kept) for kept in accepted):
                continue
            accepted.append(edit)
        if not accepted:
            return self

        source = self.source
        for edit in reversed(accepted):
            source = source[: edit.start] + edit.text + source[edit.end :]
        return replace(self, source=source)


@dataclass(frozen=True)
class CodeFix:
    """A fix offered for one diagnostic."""

    title: str
    equivalence_key: str
    rule_id: str
    edits: tuple[FixEdit, ...]


@dataclass
class FileFix:
    """Fixes applied (or previewed) for a single file."""

    path: str
    fixes: list[CodeFix] = field(default_factory=list)
    old_hash: str | None = None
    new_hash: str | None = None
    insertions: int = 0
    deletions: int = 0
    diff: str | None = None  # Dry run only
    written: bool = False


@dataclass
class FixResult:
    """Aggregated result of a fix run."""

    dry_run: bool
    files: list[FileFix] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def files_changed(self) -> int:
        return len(self.files)

    @property
    def total_fixes(self) -> int:
        return sum(len(f.fixes) for f in self.files)
