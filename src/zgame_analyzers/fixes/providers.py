"""Fix providers and their registry."""

from __future__ import annotations

from typing import Any

from zgame_analyzers.analysis.models import Diagnostic
from zgame_analyzers.analysis.rules import INVOCATION, QUERY_EXPRESSION, USING_DIRECTIVE
from zgame_analyzers.fixes.edits import annotation_edit, deletion_edit
from zgame_analyzers.fixes.models import CodeFix, FixEdit
from zgame_analyzers.parsing.nodes import find_node
from zgame_analyzers.parsing.treesitter import SyntaxTree

LINQ_TODO_COMMENT = (
    "// TODO: LINQ is not allowed in per-frame runtime code; replace with an explicit loop"
)

_STATEMENT_LISTS = frozenset({"block", "switch_section"})


class FixProvider:
    """Base class for fix providers.

    A provider handles diagnostics of ``fixable_rule_ids`` whose span
    exactly covers a node of one of ``node_kinds``. Anything else (a stale
    diagnostic, a different node) yields no fix.
    """

    title: str = ""
    equivalence_key: str = ""
    fixable_rule_ids: frozenset[str] = frozenset()
    node_kinds: frozenset[str] = frozenset()

    def provide(self, tree: SyntaxTree, diagnostic: Diagnostic) -> CodeFix | None:
        if diagnostic.rule_id not in self.fixable_rule_ids:
            return None
        node = find_node(tree.root_node, diagnostic.start_byte, diagnostic.end_byte, self.node_kinds)
        if node is None:
            return None
        edit = self.edit(tree, node)
        if edit is None:
            return None
        return CodeFix(
            title=self.title,
            equivalence_key=self.equivalence_key,
            rule_id=diagnostic.rule_id,
            edits=(edit,),
        )

    def edit(self, tree: SyntaxTree, node: Any) -> FixEdit | None:
        raise NotImplementedError


class RemoveUsingFix(FixProvider):
    title = "Remove using directive"
    equivalence_key = "RemoveUsingDirective"
    fixable_rule_ids = frozenset({"ZG0001", "ZG0002", "ZG_LINQ001"})
    node_kinds = frozenset({USING_DIRECTIVE})

    def edit(self, tree: SyntaxTree, node: Any) -> FixEdit | None:
        return deletion_edit(tree.source, node)


class RemoveCallStatementFix(FixProvider):
    """Deletes a forbidden call that is a statement on its own.

    Only statements listed in a block or switch section are removed. The
    unbraced body of an ``if``, ``else`` or loop is left alone: deleting it
    would make the next statement the body.
    """

    title = "Remove call statement"
    equivalence_key = "RemoveCallStatement"
    fixable_rule_ids = frozenset({"ZG0002"})
    node_kinds = frozenset({INVOCATION})

    def edit(self, tree: SyntaxTree, node: Any) -> FixEdit | None:
        statement = node.parent
        if statement is None or statement.type != "expression_statement":
            return None
        if statement.parent is None or statement.parent.type not in _STATEMENT_LISTS:
            return None
        return deletion_edit(tree.source, statement)


class AnnotateLinqFix(FixProvider):
    title = "Add LINQ TODO comment above this line"
    equivalence_key = "AnnotateLinqInvocation"
    fixable_rule_ids = frozenset({"ZG_LINQ001"})
    node_kinds = frozenset({INVOCATION, QUERY_EXPRESSION})

    def edit(self, tree: SyntaxTree, node: Any) -> FixEdit | None:
        return annotation_edit(tree.source, node, LINQ_TODO_COMMENT)


class FixProviderRegistry:
    """Registry of fix providers, in registration order."""

    def __init__(self) -> None:
        self._providers: dict[str, FixProvider] = {}

    def register(self, provider: FixProvider) -> None:
        self._providers[provider.equivalence_key] = provider

    def get(self, equivalence_key: str) -> FixProvider | None:
        return self._providers.get(equivalence_key)

    def all(self) -> list[FixProvider]:
        return list(self._providers.values())

    def for_rule(self, rule_id: str) -> list[FixProvider]:
        return [p for p in self._providers.values() if rule_id in p.fixable_rule_ids]

    def fix_for(self, tree: SyntaxTree, diagnostic: Diagnostic) -> CodeFix | None:
        """First fix any provider offers for ``diagnostic``."""
        for provider in self.for_rule(diagnostic.rule_id):
            fix = provider.provide(tree, diagnostic)
            if fix is not None:
                return fix
        return None


# Global registry instance
fix_registry = FixProviderRegistry()
fix_registry.register(RemoveUsingFix())
fix_registry.register(RemoveCallStatementFix())
fix_registry.register(AnnotateLinqFix())
