"""Tests for call-site classification."""

from __future__ import annotations

from typing import Any

import pytest

from zgame_analyzers.analysis.classifier import (
    CallSiteContext,
    classify,
    is_forbidden_library_call,
    is_in_restricted_method_context,
)
from zgame_analyzers.config.models import LinqRuleConfig
from zgame_analyzers.parsing import CSharpParser
from zgame_analyzers.parsing.nodes import invoked_name, walk
from zgame_analyzers.semantics import Compilation, SemanticModel


def _model_and_call(parser: CSharpParser, source: str, name: str) -> tuple[SemanticModel, Any]:
    tree = parser.parse("Assets/Scripts/Foo.cs", source.encode("utf-8"))
    model = Compilation([tree]).model(tree)
    call = next(
        n
        for n in walk(tree.root_node)
        if n.type == "invocation_expression" and invoked_name(n) == name
    )
    return model, call


def _restricted(model: SemanticModel, node: Any) -> bool:
    linq = LinqRuleConfig()
    return is_in_restricted_method_context(
        node,
        model,
        linq.restricted_names,
        linq.restricted_attributes,
        linq.restricted_interfaces,
        linq.sentinel_base_type,
    )


class TestClassify:
    """Tests for classify."""

    def test_given_override_in_monobehaviour_when_classified_then_full_context(
        self, parser: CSharpParser
    ) -> None:
        # Given
        source = """
using UnityEngine;
interface ITickable { }
class Base : MonoBehaviour { protected virtual void Update() { } }
class Mover : Base, ITickable
{
    [HotPath]
    protected override void Update() { Step(); }
    void Step() { }
}
"""
        model, call = _model_and_call(parser, source, "Step")

        # When
        context = classify(call, model)

        # Then
        assert context.enclosing_method_name == "Update"
        assert context.is_override_or_interface_impl is True
        assert context.attributes_on_method == frozenset({"HotPath"})
        assert context.containing_type_chain[:3] == ("Mover", "Base", "UnityEngine.MonoBehaviour")
        assert context.implemented_interfaces == ("ITickable",)

    def test_given_field_initializer_when_classified_then_empty_context(
        self, parser: CSharpParser
    ) -> None:
        model, call = _model_and_call(parser, "class A { int x = Make(); static int Make() { return 0; } }", "Make")
        context = classify(call, model)
        assert context == CallSiteContext()
        assert context.has_routine is False


class TestForbiddenLibraryCall:
    """Tests for is_forbidden_library_call."""

    @pytest.mark.parametrize(
        ("source", "name", "prefixes", "expected"),
        [
            (
                "using System.Linq;\nclass A { void M(int[] xs) { xs.Where(x => x > 0); } }",
                "Where",
                ["System.Linq"],
                True,
            ),
            (
                "using System.Linq;\nclass A { void M(int[] xs) { Enumerable.Where(xs, x => x > 0); } }",
                "Where",
                ["System.Linq"],
                True,
            ),
            (
                "class A { void M() { NPOI.SS.UserModel.WorkbookFactory.Create(null); } }",
                "Create",
                ["NPOI"],
                True,
            ),
            (
                "using UnityEditor;\nclass A { void M() { AssetDatabase.Refresh(); } }",
                "Refresh",
                ["UnityEditor"],
                True,
            ),
            (
                "using UnityEngine;\nclass A { void M() { Debug.Log(1); } }",
                "Log",
                ["UnityEditor"],
                False,
            ),
            (
                "class A { void M() { unknown.Where(); } }",
                "Where",
                ["System.Linq"],
                False,
            ),
            (
                "namespace NPOIHelpers { class A { void Go() { } void M() { Go(); } } }",
                "Go",
                ["NPOI"],
                True,
            ),
        ],
    )
    def test_cases(
        self, parser: CSharpParser, source: str, name: str, prefixes: list[str], expected: bool
    ) -> None:
        model, call = _model_and_call(parser, source, name)
        assert is_forbidden_library_call(call, model, prefixes) is expected

    def test_empty_prefix_never_matches(self, parser: CSharpParser) -> None:
        model, call = _model_and_call(parser, "class A { void Go() { } void M() { Go(); } }", "Go")
        assert is_forbidden_library_call(call, model, [""]) is False


class TestRestrictedMethodContext:
    """Tests for is_in_restricted_method_context."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            # a. restricted name, any casing
            ("class A { void Update() { Run(); } void Run() { } }", True),
            ("class A { void lateupdate() { Run(); } void Run() { } }", True),
            # b. attribute substring
            ("class A { [HotPathAttribute] void Step() { Run(); } void Run() { } }", True),
            ("class A { [Obsolete] void Step() { Run(); } void Run() { } }", False),
            # e. interface substring plus a name containing "update"
            (
                "interface IUpdatable { } class A : IUpdatable { void CustomUpdate() { Run(); } void Run() { } }",
                True,
            ),
            (
                "interface IUpdatable { } class A : IUpdatable { void Refresh() { Run(); } void Run() { } }",
                False,
            ),
            # ordinary method
            ("class A { void Start() { Run(); } void Run() { } }", False),
            # lambda inside Update is still Update
            ("class A { void Update() { System.Action a = () => Run(); } void Run() { } }", True),
            # local function is its own routine
            ("class A { void Update() { void Inner() { Run(); } } void Run() { } }", False),
        ],
    )
    def test_cases(self, parser: CSharpParser, source: str, expected: bool) -> None:
        model, call = _model_and_call(parser, source, "Run")
        assert _restricted(model, call) is expected

    def test_outside_any_routine_is_not_restricted(self, parser: CSharpParser) -> None:
        model, call = _model_and_call(parser, "class A { int x = Run(); static int Run() { return 0; } }", "Run")
        assert _restricted(model, call) is False
