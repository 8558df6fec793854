"""Rule registry and the single-pass tree driver."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Protocol

from zgame_analyzers.analysis.models import Diagnostic, FileResult, RuleDescriptor, Severity
from zgame_analyzers.analysis.paths import PathClassification, classify_path
from zgame_analyzers.config.models import RuleConfig, ZGameAnalyzersConfig
from zgame_analyzers.core.logging import get_logger
from zgame_analyzers.parsing.directives import file_defines_symbol, is_position_inside_condition_matching
from zgame_analyzers.parsing.nodes import walk
from zgame_analyzers.parsing.treesitter import SyntaxTree
from zgame_analyzers.semantics.model import SemanticModel

log = get_logger(__name__)

USING_DIRECTIVE = "using_directive"
INVOCATION = "invocation_expression"
QUERY_EXPRESSION = "query_expression"


class CancelSignal(Protocol):
    """Anything with ``is_set()``: ``threading.Event``, ``asyncio.Event``."""

    def is_set(self) -> bool: ...


@dataclass
class AnalysisContext:
    """Per-file inputs shared by every rule visiting the file."""

    tree: SyntaxTree
    model: SemanticModel
    config: ZGameAnalyzersConfig
    path: PathClassification = field(init=False)

    def __post_init__(self) -> None:
        self.path = classify_path(self.tree.path, self.config.paths)

    def is_allowed(self, position: int, keyword: str) -> bool:
        """True if ``position`` is guarded by ``keyword`` (enclosing ``#if`` or file ``#define``)."""
        directives = self.tree.directives
        return is_position_inside_condition_matching(
            directives, position, keyword
        ) or file_defines_symbol(directives, keyword)


class Rule:
    """Base class for rules.

    Subclasses set ``descriptor``, ``node_kinds`` and ``config_key`` (the
    attribute of ``RulesConfig`` holding their settings) and implement
    :meth:`analyze`.
    """

    descriptor: RuleDescriptor
    node_kinds: frozenset[str] = frozenset()
    config_key: str = ""

    @property
    def rule_id(self) -> str:
        return self.descriptor.rule_id

    def settings(self, config: ZGameAnalyzersConfig) -> RuleConfig:
        return getattr(config.rules, self.config_key)  # type: ignore[no-any-return]

    def is_enabled(self, config: ZGameAnalyzersConfig) -> bool:
        return self.settings(config).enabled

    def severity(self, config: ZGameAnalyzersConfig) -> Severity:
        override = self.settings(config).severity
        return Severity(override) if override else self.descriptor.severity

    def analyze(self, node: Any, ctx: AnalysisContext) -> Diagnostic | None:
        raise NotImplementedError

    def diagnostic(self, node: Any, ctx: AnalysisContext, **message_args: Any) -> Diagnostic:
        line, column = ctx.tree.line_col(node.start_byte)
        end_line, end_column = ctx.tree.line_col(node.end_byte)
        return Diagnostic(
            rule_id=self.rule_id,
            message=self.descriptor.format_message(**message_args),
            path=ctx.tree.path,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
            severity=self.severity(ctx.config),
        )


class RuleRegistry:
    """Registry of analysis rules."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def register(self, rule: Rule) -> None:
        """Register a rule."""
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> Rule | None:
        """Get rule by ID."""
        return self._rules.get(rule_id)

    def all(self) -> list[Rule]:
        """Get all registered rules."""
        return list(self._rules.values())

    def for_node_kind(self, kind: str) -> list[Rule]:
        """Get rules that visit a syntax node kind."""
        return [r for r in self._rules.values() if kind in r.node_kinds]

    def clear(self) -> None:
        self._rules.clear()


# Global registry instance
registry = RuleRegistry()


def analyze_tree(
    tree: SyntaxTree,
    model: SemanticModel,
    rules: Iterable[Rule],
    config: ZGameAnalyzersConfig,
    cancel_event: CancelSignal | None = None,
) -> FileResult:
    """Walk ``tree`` once, dispatching each node to the rules registered for its kind.

    ``cancel_event`` is checked before every node; a cancelled file reports
    no diagnostics.
    """
    by_kind: dict[str, list[Rule]] = {}
    for rule in rules:
        if not rule.is_enabled(config):
            continue
        for kind in rule.node_kinds:
            by_kind.setdefault(kind, []).append(rule)

    ctx = AnalysisContext(tree=tree, model=model, config=config)
    diagnostics: list[Diagnostic] = []
    for node in walk(tree.root_node):
        if cancel_event is not None and cancel_event.is_set():
            log.debug("file_cancelled", path=tree.path)
            return FileResult(path=tree.path, status="cancelled")
        for rule in by_kind.get(node.type, ()):
            diagnostic = rule.analyze(node, ctx)
            if diagnostic is not None:
                diagnostics.append(diagnostic)

    log.debug("file_analyzed", path=tree.path, diagnostics=len(diagnostics))
    return FileResult(path=tree.path, status="analyzed", diagnostics=diagnostics)
