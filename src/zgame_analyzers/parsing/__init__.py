"""Parsing module - tree-sitter C# trees and preprocessor directives."""

from zgame_analyzers.parsing.directives import (
    DirectiveKind,
    DirectiveSpan,
    RegionEntry,
    file_defines_symbol,
    is_position_inside_condition_matching,
    replay_region_stack,
    scan_directives,
)
from zgame_analyzers.parsing.treesitter import CSharpParser, SyntaxTree

__all__ = [
    "CSharpParser",
    "DirectiveKind",
    "DirectiveSpan",
    "RegionEntry",
    "SyntaxTree",
    "file_defines_symbol",
    "is_position_inside_condition_matching",
    "replay_region_stack",
    "scan_directives",
]
