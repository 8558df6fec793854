"""Rule definitions - register all shipped rules."""

from __future__ import annotations

from typing import Any

from zgame_analyzers.analysis.classifier import is_forbidden_library_call, is_in_restricted_method_context
from zgame_analyzers.analysis.models import Diagnostic, RuleCategory, RuleDescriptor, Severity
from zgame_analyzers.analysis.rules import (
    INVOCATION,
    QUERY_EXPRESSION,
    USING_DIRECTIVE,
    AnalysisContext,
    Rule,
    registry,
)
from zgame_analyzers.config.models import (
    LinqRuleConfig,
    RuleConfig,
    UnityEditorRuleConfig,
    ZGameAnalyzersConfig,
)
from zgame_analyzers.parsing.nodes import attribute_names, declared_name, invoked_name, using_target


class LibraryRule(Rule):
    """Forbids a library outside editor code: its using directives and calls into it."""

    node_kinds = frozenset({USING_DIRECTIVE, INVOCATION})

    def matches_using(self, name: str, settings: RuleConfig) -> bool:
        return any(name == p or name.startswith(f"{p}.") for p in settings.forbidden_prefixes)

    def is_editor_call_site(self, node: Any, ctx: AnalysisContext) -> bool:  # noqa: ARG002
        return False

    def analyze(self, node: Any, ctx: AnalysisContext) -> Diagnostic | None:
        if ctx.path.suppressed:
            return None
        settings = self.settings(ctx.config)

        if node.type == USING_DIRECTIVE:
            name, _, _ = using_target(node)
            if not name or not self.matches_using(name, settings):
                return None
            target = f"using {name}"
        else:
            if not is_forbidden_library_call(node, ctx.model, settings.forbidden_prefixes):
                return None
            if self.is_editor_call_site(node, ctx):
                return None
            target = f"method '{invoked_name(node)}'"

        if ctx.is_allowed(node.start_byte, settings.allow_keyword):
            return None
        return self.diagnostic(node, ctx, target=target)


class UnityEditorRule(LibraryRule):
    descriptor = RuleDescriptor(
        rule_id="ZG0001",
        title="UnityEditor referenced outside Editor code",
        message_format="UnityEditor is not available in player builds: {target}",
        category=RuleCategory.USAGE,
        severity=Severity.ERROR,
        description="UnityEditor APIs only exist in the editor. Move the code under an "
        "Editor folder or wrap it in #if UNITY_EDITOR.",
    )
    config_key = "unity_editor"

    def settings(self, config: ZGameAnalyzersConfig) -> UnityEditorRuleConfig:
        return config.rules.unity_editor

    def is_editor_call_site(self, node: Any, ctx: AnalysisContext) -> bool:
        settings = self.settings(ctx.config)
        routine = ctx.model.enclosing_routine(node)
        if routine is None:
            return False
        markers = [m.lower() for m in settings.editor_attributes]
        return any(m in attr.lower() for attr in attribute_names(routine) for m in markers)


class NpoiRule(LibraryRule):
    descriptor = RuleDescriptor(
        rule_id="ZG0002",
        title="NPOI referenced outside Editor code",
        message_format="NPOI spreadsheet library may only be used in Editor code: {target}",
        category=RuleCategory.USAGE,
        severity=Severity.ERROR,
        description="NPOI is an editor-time tool dependency and must not ship in player builds.",
    )
    config_key = "npoi"

    def matches_using(self, name: str, settings: RuleConfig) -> bool:
        return any(p in name for p in settings.forbidden_prefixes if p)


class LinqRule(Rule):
    descriptor = RuleDescriptor(
        rule_id="ZG_LINQ001",
        title="LINQ used in runtime per-frame code",
        message_format="LINQ is not allowed in {where}: {target}",
        category=RuleCategory.PERFORMANCE,
        severity=Severity.ERROR,
        description="LINQ allocates on every call. Per-frame methods in runtime code must "
        "use explicit loops; guard intentional uses with #if ALLOW_LINQ.",
    )
    node_kinds = frozenset({USING_DIRECTIVE, INVOCATION, QUERY_EXPRESSION})
    config_key = "linq"

    def settings(self, config: ZGameAnalyzersConfig) -> LinqRuleConfig:
        return config.rules.linq

    def analyze(self, node: Any, ctx: AnalysisContext) -> Diagnostic | None:
        if ctx.path.suppressed:
            return None
        settings = self.settings(ctx.config)

        if node.type == USING_DIRECTIVE:
            if settings.per_frame_only:
                return None
            name, alias, _ = using_target(node)
            if alias or not name or not (name == "System.Linq" or name.endswith(".Linq")):
                return None
            target = f"using {name}"
        elif node.type == QUERY_EXPRESSION:
            target = "query syntax"
        else:
            if not is_forbidden_library_call(node, ctx.model, settings.forbidden_prefixes):
                return None
            target = f"method '{invoked_name(node)}'"

        where = "runtime code"
        if settings.per_frame_only and node.type != USING_DIRECTIVE:
            if not is_in_restricted_method_context(
                node,
                ctx.model,
                settings.restricted_names,
                settings.restricted_attributes,
                settings.restricted_interfaces,
                settings.sentinel_base_type,
            ):
                return None
            routine = ctx.model.enclosing_routine(node)
            where = f"per-frame method '{declared_name(routine)}'"

        if ctx.is_allowed(node.start_byte, settings.allow_keyword):
            return None
        return self.diagnostic(node, ctx, where=where, target=target)


registry.register(UnityEditorRule())
registry.register(NpoiRule())
registry.register(LinqRule())
