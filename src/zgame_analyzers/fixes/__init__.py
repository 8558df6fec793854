"""Fixes module - fix providers and edit application."""

from zgame_analyzers.fixes.models import CodeFix, Document, EditKind, FileFix, FixEdit, FixResult
from zgame_analyzers.fixes.ops import FixOps
from zgame_analyzers.fixes.providers import (
    LINQ_TODO_COMMENT,
    AnnotateLinqFix,
    FixProvider,
    FixProviderRegistry,
    RemoveCallStatementFix,
    RemoveUsingFix,
    fix_registry,
)

__all__ = [
    "LINQ_TODO_COMMENT",
    "AnnotateLinqFix",
    "CodeFix",
    "Document",
    "EditKind",
    "FileFix",
    "FixEdit",
    "FixOps",
    "FixProvider",
    "FixProviderRegistry",
    "FixResult",
    "RemoveCallStatementFix",
    "RemoveUsingFix",
    "fix_registry",
]
