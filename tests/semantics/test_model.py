"""Tests for the compilation index and semantic model."""

from __future__ import annotations

from typing import Any

import pytest

from zgame_analyzers.config.models import CatalogConfig, CatalogTypeConfig
from zgame_analyzers.parsing import CSharpParser, SyntaxTree
from zgame_analyzers.parsing.nodes import invoked_name, walk
from zgame_analyzers.semantics import Compilation, MethodSymbol, Scope, SemanticModel, SymbolCatalog


def _compile(
    parser: CSharpParser, *sources: str, catalog: SymbolCatalog | None = None
) -> tuple[Compilation, list[SyntaxTree]]:
    trees = [
        parser.parse(f"Assets/Scripts/File{i}.cs", source.encode("utf-8"))
        for i, source in enumerate(sources)
    ]
    return Compilation(trees, catalog), trees


def _call(tree: SyntaxTree, name: str) -> Any:
    return next(
        n
        for n in walk(tree.root_node)
        if n.type == "invocation_expression" and invoked_name(n) == name
    )


def _resolve(parser: CSharpParser, source: str, name: str) -> MethodSymbol | None:
    compilation, (tree,) = _compile(parser, source)
    return compilation.model(tree).resolve_invocation(_call(tree, name))


class TestResolveInvocation:
    """Tests for SemanticModel.resolve_invocation."""

    def test_given_instance_linq_call_when_resolved_then_reduced_from_enumerable(
        self, parser: CSharpParser
    ) -> None:
        # Given
        source = """
using System.Linq;
using System.Collections.Generic;

class Spawner
{
    void Tick(List<int> xs)
    {
        var big = xs.Where(x => x > 3);
    }
}
"""
        # When
        symbol = _resolve(parser, source, "Where")

        # Then
        assert symbol is not None
        assert symbol.is_reduced
        assert symbol.containing_namespace is None
        assert symbol.original_definition.containing_type == "System.Linq.Enumerable"
        assert symbol.original_definition.containing_namespace == "System.Linq"

    def test_given_chained_linq_call_when_resolved_then_binds_extension(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Linq;
class A { void M(int[] xs) { var l = xs.Where(x => x > 0).ToList(); } }
"""
        symbol = _resolve(parser, source, "ToList")
        assert symbol is not None
        assert symbol.original_definition.containing_namespace == "System.Linq"

    def test_given_no_linq_import_when_resolved_then_not_linq(self, parser: CSharpParser) -> None:
        source = """
using System.Collections.Generic;
class A { void M(List<int> xs) { xs.Where(x => x > 0); } }
"""
        symbol = _resolve(parser, source, "Where")
        assert symbol is not None
        assert not symbol.is_reduced
        assert symbol.containing_type == "System.Collections.Generic.List"

    def test_given_bcl_instance_method_when_resolved_then_wins_over_linq(
        self, parser: CSharpParser
    ) -> None:
        # Given
        source = """
using System.Collections.Generic;
using System.Linq;
class A
{
    void M(List<int> xs)
    {
        string name = "abc";
        name.Contains("a");
        xs.Reverse();
    }
}
"""

        # When
        contains = _resolve(parser, source, "Contains")
        reverse = _resolve(parser, source, "Reverse")

        # Then
        assert contains == MethodSymbol.on_type("System.String", "Contains")
        assert reverse == MethodSymbol.on_type("System.Collections.Generic.List", "Reverse")

    def test_given_declared_unresolved_receiver_when_resolved_then_none(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Linq;
class A { void M(Inventory items) { items.Count(); } }
"""
        assert _resolve(parser, source, "Count") is None

    def test_given_non_sequence_source_type_when_linq_name_called_then_binds_type(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Linq;
class Pool { }
class A { void M(Pool pool) { pool.First(); } }
"""
        symbol = _resolve(parser, source, "First")
        assert symbol is not None
        assert symbol.containing_type == "Pool"
        assert not symbol.is_extension

    def test_given_source_enumerable_type_when_linq_called_then_reduced(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Collections.Generic;
using System.Linq;
class Inventory : IEnumerable<int> { }
class A { void M(Inventory items) { items.Count(); } }
"""
        symbol = _resolve(parser, source, "Count")
        assert symbol is not None
        assert symbol.is_reduced
        assert symbol.original_definition.containing_type == "System.Linq.Enumerable"

    def test_given_scalar_operator_result_when_chained_then_not_linq(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Linq;
class A { void M(int[] xs) { xs.Count().CompareTo(1); } }
"""
        assert _resolve(parser, source, "CompareTo") is None

    def test_given_static_linq_call_when_resolved_then_not_reduced(self, parser: CSharpParser) -> None:
        # Given
        source = """
using System.Linq;
class A { void M() { var r = Enumerable.Range(0, 10); } }
"""
        # When
        symbol = _resolve(parser, source, "Range")

        # Then
        assert symbol == MethodSymbol(
            name="Range",
            containing_type="System.Linq.Enumerable",
            containing_namespace="System.Linq",
            is_static=True,
        )
        assert not symbol.is_reduced

    def test_given_static_extension_syntax_when_resolved_then_definition(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Linq;
class A { void M(int[] xs) { Enumerable.Where(xs, x => x > 0); } }
"""
        symbol = _resolve(parser, source, "Where")
        assert symbol is not None
        assert symbol.is_extension
        assert symbol.containing_namespace == "System.Linq"

    def test_given_fully_qualified_call_when_resolved_then_npoi_namespace(
        self, parser: CSharpParser
    ) -> None:
        source = """
class Loader { void Load(object s) { var wb = NPOI.SS.UserModel.WorkbookFactory.Create(s); } }
"""
        symbol = _resolve(parser, source, "Create")
        assert symbol is not None
        assert symbol.containing_type == "NPOI.SS.UserModel.WorkbookFactory"
        assert symbol.containing_namespace == "NPOI.SS.UserModel"

    def test_given_var_with_new_when_resolved_then_uses_created_type(
        self, parser: CSharpParser
    ) -> None:
        source = """
using NPOI.XSSF.UserModel;
class Exporter
{
    void Export(object stream)
    {
        var wb = new XSSFWorkbook();
        wb.Write(stream);
    }
}
"""
        symbol = _resolve(parser, source, "Write")
        assert symbol is not None
        assert symbol.containing_type == "NPOI.XSSF.UserModel.XSSFWorkbook"

    def test_given_field_receiver_when_resolved_then_uses_field_type(
        self, parser: CSharpParser
    ) -> None:
        source = """
using NPOI.SS.UserModel;
class Sheet
{
    private IWorkbook workbook;
    void Save(object stream) { workbook.Write(stream); }
}
"""
        symbol = _resolve(parser, source, "Write")
        assert symbol is not None
        assert symbol.containing_namespace == "NPOI.SS.UserModel"

    def test_given_alias_when_resolved_then_expands(self, parser: CSharpParser) -> None:
        source = """
using Ed = UnityEditor.EditorUtility;
class A { void M() { Ed.SetDirty(this); } }
"""
        symbol = _resolve(parser, source, "SetDirty")
        assert symbol is not None
        assert symbol.containing_type == "UnityEditor.EditorUtility"

    def test_given_using_static_when_unqualified_call_then_resolved(
        self, parser: CSharpParser
    ) -> None:
        source = """
using static UnityEditor.AssetDatabase;
class A { void M() { Refresh(); } }
"""
        symbol = _resolve(parser, source, "Refresh")
        assert symbol is not None
        assert symbol.containing_namespace == "UnityEditor"

    def test_given_own_method_when_unqualified_call_then_source_namespace(
        self, parser: CSharpParser
    ) -> None:
        source = """
namespace Game.Runtime
{
    class A
    {
        void Helper() { }
        void M() { Helper(); }
    }
}
"""
        symbol = _resolve(parser, source, "Helper")
        assert symbol is not None
        assert symbol.containing_type == "Game.Runtime.A"
        assert symbol.containing_namespace == "Game.Runtime"

    def test_given_local_function_when_called_then_binds_locally(self, parser: CSharpParser) -> None:
        source = """
namespace Game
{
    class A
    {
        void M()
        {
            int Where() { return 1; }
            Where();
        }
    }
}
"""
        symbol = _resolve(parser, source, "Where")
        assert symbol is not None
        assert symbol.containing_namespace == "Game"

    def test_given_local_shadowing_type_name_when_resolved_then_variable_wins(
        self, parser: CSharpParser
    ) -> None:
        source = """
using System.Linq;
class A
{
    void M(Helper Enumerable) { Enumerable.Range(0, 1); }
}
"""
        assert _resolve(parser, source, "Range") is None

    def test_given_unknown_receiver_when_resolved_then_none(self, parser: CSharpParser) -> None:
        source = "class A { void M() { mystery.Run(); } }"
        assert _resolve(parser, source, "Run") is None

    def test_given_conditional_access_when_resolved_then_extension(self, parser: CSharpParser) -> None:
        source = """
using System.Linq;
class A { void M(int[] xs) { var any = xs?.Any(); } }
"""
        symbol = _resolve(parser, source, "Any")
        assert symbol is not None
        assert symbol.original_definition.containing_namespace == "System.Linq"

    def test_given_source_extension_in_imported_namespace_when_resolved_then_reduced(
        self, parser: CSharpParser
    ) -> None:
        # Given
        util = """
namespace Game.Util
{
    public static class IntExtensions
    {
        public static int Twice(this int value) { return value * 2; }
    }
}
"""
        caller = """
using Game.Util;
namespace Game
{
    class B { void M(int n) { n.Twice(); } }
}
"""
        compilation, (_, tree) = _compile(parser, util, caller)

        # When
        symbol = compilation.model(tree).resolve_invocation(_call(tree, "Twice"))

        # Then
        assert symbol is not None
        assert symbol.is_reduced
        assert symbol.original_definition.containing_type == "Game.Util.IntExtensions"
        assert symbol.original_definition.containing_namespace == "Game.Util"

    def test_given_configured_catalog_type_when_resolved_then_bound(self, parser: CSharpParser) -> None:
        # Given
        catalog = SymbolCatalog.from_config(
            CatalogConfig(
                types={"Vendor.Excel.Reader": CatalogTypeConfig(static_methods=["Open"])}
            )
        )
        source = "using Vendor.Excel;\nclass A { void M() { Reader.Open(); } }\n"
        compilation, (tree,) = _compile(parser, source, catalog=catalog)

        # When
        symbol = compilation.model(tree).resolve_invocation(_call(tree, "Open"))

        # Then
        assert symbol is not None
        assert symbol.containing_namespace == "Vendor.Excel"


class TestTypeHierarchy:
    """Tests for base chains, interfaces and namespaces."""

    SOURCE = """
using UnityEngine;

interface ITickable { }
interface IFastTickable : ITickable { }

class Base : MonoBehaviour { }

class Derived : Base, IFastTickable
{
    void Update() { }
}
"""

    def test_base_type_chain(self, parser: CSharpParser) -> None:
        compilation, _ = _compile(parser, self.SOURCE)
        assert compilation.base_type_chain("Derived") == [
            "Derived",
            "Base",
            "UnityEngine.MonoBehaviour",
            "UnityEngine.Behaviour",
            "UnityEngine.Component",
            "UnityEngine.Object",
        ]

    def test_implemented_interfaces_include_inherited(self, parser: CSharpParser) -> None:
        compilation, _ = _compile(parser, self.SOURCE)
        assert compilation.implemented_interfaces("Derived") == ["IFastTickable", "ITickable"]

    def test_partial_declarations_merge(self, parser: CSharpParser) -> None:
        # Given
        first = "using UnityEngine;\npartial class P : MonoBehaviour { }\n"
        second = "partial class P { void Update() { } }\n"

        # When
        compilation, _ = _compile(parser, first, second)

        # Then
        assert "UnityEngine.MonoBehaviour" in compilation.base_type_chain("P")
        assert compilation.find_member("P", "Update", static_call=False) is not None

    def test_cyclic_bases_terminate(self, parser: CSharpParser) -> None:
        compilation, _ = _compile(parser, "class A : B { }\nclass B : A { }\n")
        assert compilation.base_type_chain("A") == ["A", "B"]

    def test_file_scoped_namespace(self, parser: CSharpParser) -> None:
        compilation, _ = _compile(parser, "namespace Game.Core;\n\nclass Clock { }\n")
        assert compilation.type_symbol("Game.Core.Clock") is not None
        assert compilation.source_namespace("Game.Core.Clock") == "Game.Core"

    def test_nested_type_namespace(self, parser: CSharpParser) -> None:
        compilation, _ = _compile(parser, "namespace N { class Outer { class Inner { } } }")
        assert compilation.source_namespace("N.Outer.Inner") == "N"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("int", "System.Int32"),
            ("MonoBehaviour", "UnityEngine.MonoBehaviour"),
            ("UnityEngine.MonoBehaviour", "UnityEngine.MonoBehaviour"),
            ("global::UnityEngine.Debug", "UnityEngine.Debug"),
            ("Base", "Base"),
            ("Missing", None),
            ("int[]", None),
        ],
    )
    def test_resolve_type_name(self, parser: CSharpParser, name: str, expected: str | None) -> None:
        compilation, trees = _compile(parser, self.SOURCE)
        assert compilation.resolve_type_name(name, Scope(trees[0].path)) == expected


class TestLexicalContext:
    """Tests for enclosing routine and containing type lookups."""

    def test_enclosing_routine_skips_lambdas(self, parser: CSharpParser) -> None:
        # Given
        source = """
class A
{
    void Update()
    {
        System.Action act = () => Run();
    }
}
"""
        compilation, (tree,) = _compile(parser, source)
        model = compilation.model(tree)

        # When
        routine = model.enclosing_routine(_call(tree, "Run"))

        # Then
        assert routine is not None
        assert routine.type == "method_declaration"

    def test_enclosing_routine_none_for_field_initializer(self, parser: CSharpParser) -> None:
        source = "class A { int x = Compute(); static int Compute() { return 1; } }"
        compilation, (tree,) = _compile(parser, source)
        assert compilation.model(tree).enclosing_routine(_call(tree, "Compute")) is None

    def test_containing_type_is_innermost(self, parser: CSharpParser) -> None:
        source = "namespace N { class Outer { class Inner { void M() { Go(); } } } }"
        compilation, (tree,) = _compile(parser, source)
        model: SemanticModel = compilation.model(tree)
        assert model.containing_type(_call(tree, "Go")) == "N.Outer.Inner"

    def test_model_for_new_tree_indexes_it(self, parser: CSharpParser) -> None:
        compilation, _ = _compile(parser, "class A { }")
        extra = parser.parse("Assets/Late.cs", b"class Late { }")
        compilation.model(extra)
        assert compilation.is_known_type("Late")
