"""Semantics module - symbol resolution over parsed C# trees."""

from zgame_analyzers.semantics.catalog import DEFAULT_TYPES, ExternalType, SymbolCatalog
from zgame_analyzers.semantics.model import Compilation, Scope, SemanticModel
from zgame_analyzers.semantics.symbols import MethodSymbol, TypeSymbol

__all__ = [
    "Compilation",
    "DEFAULT_TYPES",
    "ExternalType",
    "MethodSymbol",
    "Scope",
    "SemanticModel",
    "SymbolCatalog",
    "TypeSymbol",
]
