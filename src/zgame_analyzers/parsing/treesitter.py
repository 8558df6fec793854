"""Tree-sitter parsing for C# sources.

This module turns a ``.cs`` file into an immutable :class:`SyntaxTree`: the
tree-sitter tree, the raw bytes it was parsed from, and the preprocessor
directives scanned from the same bytes. Everything downstream (symbol
resolution, rules, fixes) reads from a ``SyntaxTree`` and never mutates it.

Positions are byte offsets, matching tree-sitter's ``start_byte`` /
``end_byte``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_c_sharp

from zgame_analyzers.config.constants import CSHARP_SUFFIX
from zgame_analyzers.core.errors import AnalysisError
from zgame_analyzers.parsing.directives import DirectiveSpan, scan_directives


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed C# file.

    ``path`` is kept exactly as supplied by the caller; path classification
    normalizes it separately.
    """

    path: str
    source: bytes
    tree: Any  # tree-sitter Tree (not serializable)
    directives: tuple[DirectiveSpan, ...]
    error_count: int = 0
    total_nodes: int = 0

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def text(self, node: Any) -> str:
        """Source text of ``node``."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def line_col(self, offset: int) -> tuple[int, int]:
        """1-based line and 0-based column (in bytes) of a byte offset."""
        line = self.source.count(b"\n", 0, offset) + 1
        line_start = self.source.rfind(b"\n", 0, offset) + 1
        return line, offset - line_start


@dataclass
class CSharpParser:
    """
    Tree-sitter parser for C# files.

    A parser instance is not thread-safe; parse on one thread and share the
    resulting immutable trees.

    Usage::

        parser = CSharpParser()
        tree = parser.parse(Path("Assets/Scripts/Player.cs"))
        tree = parser.parse("Player.cs", b"class Player {}")
    """

    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._language = tree_sitter.Language(tree_sitter_c_sharp.language())
        self._parser = tree_sitter.Parser()
        self._parser.language = self._language

    @property
    def language(self) -> Any:
        return self._language

    def parse(self, path: Path | str, content: bytes | None = None) -> SyntaxTree:
        """
        Parse a C# file.

        Args:
            path: Path to file (used for path classification and reporting)
            content: File content as bytes. If None, reads from path.

        Returns:
            SyntaxTree with tree, directives and error counts.

        Raises:
            AnalysisError: If the file is not a ``.cs`` file or cannot be read.
        """
        path_str = str(path)
        if not path_str.lower().endswith(CSHARP_SUFFIX):
            raise AnalysisError.unsupported_file(path_str)

        if content is None:
            try:
                content = Path(path).read_bytes()
            except OSError as e:
                raise AnalysisError.parse_failed(path_str, str(e)) from e

        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            stack.extend(node.children)

        return SyntaxTree(
            path=path_str,
            source=content,
            tree=tree,
            directives=scan_directives(content),
            error_count=error_count,
            total_nodes=total_nodes,
        )
