"""Lightweight symbol resolution over a set of parsed C# files.

A :class:`Compilation` indexes every type declared in the analyzed trees
(namespace, base list, methods, fields) and the ``using`` directives of each
file. A :class:`SemanticModel` answers per-file questions against it:

- which method an invocation binds to (``resolve_invocation``);
- which type or named routine lexically encloses a node;
- the base-type chain and implemented interfaces of a type.

Resolution is deliberately shallow. It follows declared types of locals,
parameters, fields and properties, ``new T()`` initializers, ``using``
aliases, ``using static`` imports and extension methods in imported
namespaces. Anything that would need overload resolution or type inference
of arbitrary expressions is left unresolved (``None``).

Instance members of the receiver type win over extension methods. Catalog
extensions (the LINQ operators) only bind to receivers known to implement
``IEnumerable``: arrays, catalog collections, and the result of another
sequence operator. A receiver whose type is unknown binds to nothing.

The compilation is built once per run and is read-only afterwards, so a
model may be shared between threads.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from zgame_analyzers.core.logging import get_logger
from zgame_analyzers.parsing.nodes import (
    NAMESPACE_DECLARATIONS,
    PREPROC_WRAPPERS,
    ROUTINE_DECLARATIONS,
    TYPE_DECLARATIONS,
    ancestors,
    declared_name,
    modifiers,
    node_text,
    simple_name,
    strip_generic_args,
    using_target,
)
from zgame_analyzers.parsing.treesitter import SyntaxTree
from zgame_analyzers.semantics.catalog import (
    ARRAY_TYPE,
    GENERIC_SEQUENCE_INTERFACE,
    SEQUENCE_INTERFACE,
    SymbolCatalog,
)
from zgame_analyzers.semantics.symbols import MethodSymbol, TypeKind, TypeSymbol

log = get_logger(__name__)

_PREDEFINED_TYPES: dict[str, str] = {
    "bool": "System.Boolean",
    "byte": "System.Byte",
    "char": "System.Char",
    "decimal": "System.Decimal",
    "double": "System.Double",
    "float": "System.Single",
    "int": "System.Int32",
    "long": "System.Int64",
    "object": "System.Object",
    "sbyte": "System.SByte",
    "short": "System.Int16",
    "string": "System.String",
    "uint": "System.UInt32",
    "ulong": "System.UInt64",
    "ushort": "System.UInt16",
}

_TYPE_KINDS: dict[str, TypeKind] = {
    "class_declaration": "class",
    "struct_declaration": "struct",
    "record_struct_declaration": "struct",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
}

_EXTENSION_PARAM_RE = re.compile(r"^(?:\[[^\]]*\]\s*)*this\b")
_INTERFACE_NAME_RE = re.compile(r"^I[A-Z]")

_SCALAR_OPERATORS = frozenset(
    {
        "Aggregate",
        "All",
        "Any",
        "Average",
        "Contains",
        "Count",
        "ElementAt",
        "ElementAtOrDefault",
        "First",
        "FirstOrDefault",
        "Last",
        "LastOrDefault",
        "LongCount",
        "Max",
        "Min",
        "SequenceEqual",
        "Single",
        "SingleOrDefault",
        "Sum",
    }
)

_LAMBDA_TYPES = frozenset({"lambda_expression", "anonymous_method_expression"})
_STATEMENT_CONTAINERS = frozenset(
    {"block", "switch_section", "using_statement", "for_statement", "fixed_statement"}
)


# =============================================================================
# Index records
# =============================================================================


@dataclass(frozen=True)
class Scope:
    """Lexical context a type name is resolved in."""

    path: str
    namespace: str = ""
    type_chain: tuple[str, ...] = ()  # Enclosing types, innermost first


@dataclass
class _SourceMethod:
    is_static: bool = False
    is_extension: bool = False


@dataclass
class _SourceType:
    full_name: str
    namespace: str
    kind: TypeKind
    raw_bases: list[tuple[str, Scope]] = field(default_factory=list)
    bases: tuple[str, ...] = ()
    methods: dict[str, _SourceMethod] = field(default_factory=dict)
    fields: dict[str, tuple[str, Scope]] = field(default_factory=dict)


@dataclass
class _Imports:
    namespaces: set[str] = field(default_factory=set)
    static_types: list[str] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)

    def merge(self, other: _Imports) -> None:
        self.namespaces |= other.namespaces
        self.static_types.extend(t for t in other.static_types if t not in self.static_types)
        for alias, target in other.aliases.items():
            self.aliases.setdefault(alias, target)


# =============================================================================
# Declaration helpers
# =============================================================================


def namespace_of(node: Any) -> str:
    """Namespace enclosing ``node`` (block-scoped or file-scoped)."""
    parts: list[str] = []
    for anc in ancestors(node):
        if anc.type in NAMESPACE_DECLARATIONS:
            name = node_text(anc.child_by_field_name("name"))
            if name:
                parts.append(name)
        if anc.parent is None:
            # File-scoped namespaces may be siblings of the types they contain
            for child in anc.children:
                if (
                    child.type == "file_scoped_namespace_declaration"
                    and child.end_byte <= node.start_byte
                ):
                    name = node_text(child.child_by_field_name("name"))
                    if name:
                        parts.append(name)
                    break
    return ".".join(reversed(parts))


def type_full_name(decl: Any) -> str:
    """``Namespace.Outer.Inner`` for a type declaration node."""
    names = [declared_name(decl) or "?"]
    for anc in ancestors(decl):
        if anc.type in TYPE_DECLARATIONS:
            names.append(declared_name(anc) or "?")
    namespace = namespace_of(decl)
    qualified = ".".join(reversed(names))
    return f"{namespace}.{qualified}" if namespace else qualified


def _enclosing_types(node: Any) -> tuple[str, ...]:
    return tuple(type_full_name(a) for a in ancestors(node) if a.type in TYPE_DECLARATIONS)


def _scope_at(path: str, node: Any) -> Scope:
    return Scope(path, namespace_of(node), _enclosing_types(node))


def _parameters(routine: Any) -> list[Any]:
    params = routine.child_by_field_name("parameters")
    if params is None:
        return []
    return [c for c in params.named_children if c.type == "parameter"]


def _declarators(variable_declaration: Any) -> list[Any]:
    return [c for c in variable_declaration.named_children if c.type == "variable_declarator"]


def _declarator_initializer(declarator: Any) -> Any | None:
    seen_equals = False
    for child in declarator.children:
        if child.type == "equals_value_clause":
            return child.named_children[0] if child.named_children else None
        if child.type == "=":
            seen_equals = True
        elif seen_equals and child.is_named:
            return child
    return None


def _variable_declaration_child(node: Any) -> Any | None:
    for child in node.named_children:
        if child.type == "variable_declaration":
            return child
    return None


# =============================================================================
# Compilation
# =============================================================================


class Compilation:
    """Type index over every tree of an analysis run plus the external catalog."""

    def __init__(self, trees: Iterable[SyntaxTree], catalog: SymbolCatalog | None = None) -> None:
        self.catalog = catalog or SymbolCatalog.default()
        self.trees: dict[str, SyntaxTree] = {}
        self._types: dict[str, _SourceType] = {}
        self._imports: dict[str, _Imports] = {}
        self._global_imports = _Imports()
        self._add_trees(list(trees))

    def _add_trees(self, trees: list[SyntaxTree]) -> None:
        known = set(self._types)
        for tree in trees:
            self.trees[tree.path] = tree
            self._imports[tree.path] = _Imports()
            self._index(tree.root_node, tree.path)

        for imports in self._imports.values():
            imports.merge(self._global_imports)

        for full_name, source_type in self._types.items():
            if full_name in known:
                continue
            source_type.bases = tuple(
                self.resolve_type_name(text, scope) or strip_generic_args(text)
                for text, scope in source_type.raw_bases
            )

        log.debug("compilation_indexed", files=len(self.trees), types=len(self._types))

    def model(self, tree: SyntaxTree) -> SemanticModel:
        """Semantic model for ``tree``, indexing it first if it is new."""
        if tree.path not in self.trees:
            self._add_trees([tree])
        return SemanticModel(self, tree)

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    def _index(self, node: Any, path: str, current: _SourceType | None = None) -> None:
        for child in node.children:
            kind = child.type
            if kind == "using_directive":
                self._index_using(child, path)
            elif kind in NAMESPACE_DECLARATIONS:
                body = child.child_by_field_name("body")
                self._index(body if body is not None else child, path)
            elif kind in TYPE_DECLARATIONS:
                self._index_type(child, path)
            elif kind in PREPROC_WRAPPERS or kind == "declaration_list":
                self._index(child, path, current)
            elif current is None:
                continue
            elif kind == "method_declaration":
                self._index_method(child, current)
            elif kind == "field_declaration":
                declaration = _variable_declaration_child(child)
                if declaration is None:
                    continue
                type_text = node_text(declaration.child_by_field_name("type"))
                for declarator in _declarators(declaration):
                    name = declared_name(declarator)
                    if name:
                        current.fields[name] = (type_text, _scope_at(path, child))
            elif kind == "property_declaration":
                name = declared_name(child)
                if name:
                    type_text = node_text(child.child_by_field_name("type"))
                    current.fields[name] = (type_text, _scope_at(path, child))

    def _index_using(self, node: Any, path: str) -> None:
        target, alias, is_static = using_target(node)
        if not target:
            return
        if any(c.type == "global" for c in node.children):
            imports = self._global_imports
        else:
            imports = self._imports[path]
        if alias:
            imports.aliases[alias] = target
        elif is_static:
            imports.static_types.append(target)
        else:
            imports.namespaces.add(target)

    def _index_type(self, decl: Any, path: str) -> None:
        full_name = type_full_name(decl)
        source_type = self._types.get(full_name)
        if source_type is None:
            # Partial declarations merge into the first one seen
            source_type = _SourceType(
                full_name=full_name,
                namespace=namespace_of(decl),
                kind=_TYPE_KINDS.get(decl.type, "class"),
            )
            self._types[full_name] = source_type

        outer_scope = _scope_at(path, decl)
        for child in decl.children:
            if child.type != "base_list":
                continue
            for base in child.named_children:
                text = node_text(base).split("(", 1)[0].strip()
                if text:
                    source_type.raw_bases.append((text, outer_scope))

        body = decl.child_by_field_name("body")
        if body is None:
            body = next((c for c in decl.children if c.type == "declaration_list"), None)
        if body is not None:
            self._index(body, path, source_type)

    def _index_method(self, decl: Any, owner: _SourceType) -> None:
        name = declared_name(decl)
        if not name:
            return
        is_static = "static" in modifiers(decl)
        params = _parameters(decl)
        is_extension = (
            is_static and bool(params) and bool(_EXTENSION_PARAM_RE.match(node_text(params[0])))
        )
        method = owner.methods.setdefault(name, _SourceMethod())
        method.is_static = method.is_static or is_static
        method.is_extension = method.is_extension or is_extension

    # -------------------------------------------------------------------------
    # Type lookups
    # -------------------------------------------------------------------------

    def imports_for(self, path: str) -> _Imports:
        return self._imports.get(path) or self._global_imports

    def is_known_type(self, full_name: str) -> bool:
        return full_name in self._types or full_name in self.catalog

    def source_namespace(self, full_name: str) -> str | None:
        """Declared namespace of a source type (differs from the name prefix for nested types)."""
        source_type = self._types.get(full_name)
        return source_type.namespace if source_type is not None else None

    def type_symbol(self, full_name: str) -> TypeSymbol | None:
        source_type = self._types.get(full_name)
        if source_type is not None:
            return TypeSymbol(full_name=full_name, kind=source_type.kind, base_types=source_type.bases)
        external = self.catalog.get(full_name)
        return external.symbol() if external is not None else None

    def resolve_type_name(self, name: str, scope: Scope) -> str | None:
        """Resolve a type name as written in ``scope`` to a fully-qualified name.

        Candidates are tried in C# lookup order: nested types of the enclosing
        types (and their bases), enclosing namespaces from innermost out, the
        global namespace, then imported namespaces. Returns None when no
        candidate is a source or catalog type.
        """
        name = strip_generic_args(name.strip()).removeprefix("global::").rstrip("?")
        if not name or name.endswith("]"):
            return None
        if name in _PREDEFINED_TYPES:
            return _PREDEFINED_TYPES[name]

        imports = self.imports_for(scope.path)
        head, _, rest = name.partition(".")
        if head in imports.aliases:
            expanded = imports.aliases[head] + (f".{rest}" if rest else "")
            return expanded if self.is_known_type(expanded) else None

        candidates: list[str] = []
        for enclosing in scope.type_chain:
            candidates.extend(f"{t}.{name}" for t in self.base_type_chain(enclosing))
        namespace = scope.namespace
        while namespace:
            candidates.append(f"{namespace}.{name}")
            namespace = namespace.rpartition(".")[0]
        candidates.append(name)
        candidates.extend(f"{ns}.{name}" for ns in sorted(imports.namespaces))

        for candidate in candidates:
            if self.is_known_type(candidate):
                return candidate
        return None

    def base_type_chain(self, full_name: str) -> list[str]:
        """``full_name`` followed by its base classes, most-derived first.

        Interfaces are not part of the chain. An unresolvable base is
        included as written and ends the walk.
        """
        chain: list[str] = []
        current: str | None = full_name
        while current is not None and current not in chain:
            chain.append(current)
            current = self._base_class(current)
        return chain

    def _base_class(self, full_name: str) -> str | None:
        source_type = self._types.get(full_name)
        if source_type is None:
            external = self.catalog.get(full_name)
            return external.base_type if external is not None else None
        if source_type.kind not in ("class", "record") or not source_type.bases:
            return None
        # Only the first entry of a base list can be a class
        first = source_type.bases[0]
        return None if self._is_interface_name(first) else first

    def _is_interface_name(self, full_name: str) -> bool:
        symbol = self.type_symbol(full_name)
        if symbol is not None:
            return symbol.is_interface
        return bool(_INTERFACE_NAME_RE.match(full_name.rpartition(".")[2]))

    def implemented_interfaces(self, full_name: str) -> list[str]:
        """Interfaces of ``full_name`` and its bases, plus the interfaces those extend."""
        found: list[str] = []
        pending: list[str] = []
        for type_name in self.base_type_chain(full_name):
            symbol = self.type_symbol(type_name)
            if symbol is not None:
                pending.extend(b for b in symbol.base_types if self._is_interface_name(b))
        while pending:
            interface = pending.pop(0)
            if interface in found:
                continue
            found.append(interface)
            symbol = self.type_symbol(interface)
            if symbol is not None:
                pending.extend(symbol.base_types)
        return found

    # -------------------------------------------------------------------------
    # Member lookups
    # -------------------------------------------------------------------------

    def find_member(self, type_full: str, method: str, *, static_call: bool) -> MethodSymbol | None:
        """Method ``method`` declared on ``type_full``, one of its bases or interfaces."""
        owners = [*self.base_type_chain(type_full), *self.implemented_interfaces(type_full)]
        for type_name in owners:
            source_type = self._types.get(type_name)
            if source_type is not None:
                source_method = source_type.methods.get(method)
                if source_method is not None:
                    return MethodSymbol.on_type(
                        type_name,
                        method,
                        is_static=source_method.is_static,
                        is_extension=source_method.is_extension,
                        namespace=source_type.namespace,
                    )
                continue
            external = self.catalog.get(type_name)
            if external is None:
                continue
            if method in external.methods:
                return MethodSymbol.on_type(type_name, method)
            if method in external.static_methods:
                return MethodSymbol.on_type(type_name, method, is_static=True)
            if static_call and method in external.extension_methods:
                return MethodSymbol.on_type(type_name, method, is_static=True, is_extension=True)
        return None

    def find_extension(
        self, method: str, scope: Scope, *, include_catalog: bool = True
    ) -> MethodSymbol | None:
        """Extension method ``method`` visible from ``scope``, in reduced form.

        Catalog extensions are LINQ operators; pass ``include_catalog=False``
        for receivers that are not sequences.
        """
        imports = self.imports_for(scope.path)
        namespaces = set(imports.namespaces) | {""}
        namespace = scope.namespace
        while namespace:
            namespaces.add(namespace)
            namespace = namespace.rpartition(".")[0]
        file_scope = Scope(scope.path)
        static_types = {self.resolve_type_name(t, file_scope) or t for t in imports.static_types}

        for full_name in sorted(self._types):
            source_type = self._types[full_name]
            if source_type.namespace not in namespaces and full_name not in static_types:
                continue
            source_method = source_type.methods.get(method)
            if source_method is not None and source_method.is_extension:
                return MethodSymbol.on_type(
                    full_name,
                    method,
                    is_static=True,
                    is_extension=True,
                    namespace=source_type.namespace,
                ).reduce()

        if not include_catalog:
            return None
        hosts = self.catalog.extension_hosts(namespaces, method)
        for name in sorted(static_types):
            external = self.catalog.get(name)
            if external is not None and method in external.extension_methods and external not in hosts:
                hosts.append(external)
        if not hosts:
            return None
        return MethodSymbol.on_type(
            hosts[0].full_name, method, is_static=True, is_extension=True
        ).reduce()

    def field_type(self, type_full: str, name: str) -> tuple[bool, str | None]:
        """(declared, resolved type) of field or property ``name`` on ``type_full`` or its bases."""
        for type_name in self.base_type_chain(type_full):
            source_type = self._types.get(type_name)
            if source_type is None or name not in source_type.fields:
                continue
            type_text, scope = source_type.fields[name]
            return True, self.resolve_value_type(type_text, scope)
        return False, None

    def resolve_value_type(self, type_text: str, scope: Scope) -> str | None:
        """Type of a variable declared as ``type_text``; arrays are ``System.Array``."""
        type_text = type_text.strip().rstrip("?")
        if type_text.endswith("]"):
            return ARRAY_TYPE
        return self.resolve_type_name(type_text, scope)

    def is_sequence(self, full_name: str) -> bool:
        """True if ``full_name`` is known to implement ``IEnumerable``."""
        return full_name == SEQUENCE_INTERFACE or SEQUENCE_INTERFACE in self.implemented_interfaces(
            full_name
        )

    def returns_sequence(self, symbol: MethodSymbol) -> bool:
        """True for catalog extension operators that yield a sequence (``Where``, not ``Count``)."""
        definition = symbol.original_definition
        if definition.name in _SCALAR_OPERATORS:
            return False
        external = self.catalog.get(definition.containing_type or "")
        return external is not None and definition.name in external.extension_methods


# =============================================================================
# Semantic model
# =============================================================================


class SemanticModel:
    """Per-file view of a :class:`Compilation`."""

    def __init__(self, compilation: Compilation, tree: SyntaxTree) -> None:
        self.compilation = compilation
        self.tree = tree

    # -------------------------------------------------------------------------
    # Lexical context
    # -------------------------------------------------------------------------

    def scope_of(self, node: Any) -> Scope:
        return _scope_at(self.tree.path, node)

    def containing_type(self, node: Any) -> str | None:
        """Fully-qualified name of the innermost type declaration around ``node``."""
        for anc in ancestors(node):
            if anc.type in TYPE_DECLARATIONS:
                return type_full_name(anc)
        return None

    def enclosing_routine(self, node: Any) -> Any | None:
        """Innermost method, local function or constructor around ``node``.

        Lambdas and anonymous methods are skipped. Returns None when a type
        declaration is reached first (field initializers, property bodies).
        """
        for anc in ancestors(node):
            if anc.type in ROUTINE_DECLARATIONS:
                return anc
            if anc.type in TYPE_DECLARATIONS:
                return None
        return None

    def base_type_chain(self, type_full: str) -> list[str]:
        return self.compilation.base_type_chain(type_full)

    def implemented_interfaces(self, type_full: str) -> list[str]:
        return self.compilation.implemented_interfaces(type_full)

    # -------------------------------------------------------------------------
    # Invocation binding
    # -------------------------------------------------------------------------

    def resolve_invocation(self, node: Any) -> MethodSymbol | None:
        """Bind an ``invocation_expression`` to a method symbol, or None."""
        if node.type != "invocation_expression":
            return None
        function = node.child_by_field_name("function")
        if function is None:
            return None

        scope = self.scope_of(node)
        if function.type == "conditional_access_expression" and function.named_children:
            # a?.M() can also parse with the binding wrapped around the call target
            binding = function.named_children[-1]
            if binding.type != "member_binding_expression":
                return None
            return self._resolve_member_call(
                self._condition_of(function),
                simple_name(binding.child_by_field_name("name")),
                node,
                scope,
            )
        if function.type == "member_access_expression":
            method = simple_name(function.child_by_field_name("name"))
            receiver = function.child_by_field_name("expression")
            return self._resolve_member_call(receiver, method, node, scope)
        if function.type == "member_binding_expression":
            name = function.child_by_field_name("name")
            if name is None and function.named_children:
                name = function.named_children[-1]
            receiver = self._conditional_receiver(node)
            return self._resolve_member_call(receiver, simple_name(name), node, scope)
        if function.type in ("identifier", "generic_name"):
            method = simple_name(function)
            return self._resolve_unqualified(method, node, scope) if method else None
        return None

    def _resolve_member_call(
        self, receiver: Any | None, method: str | None, node: Any, scope: Scope
    ) -> MethodSymbol | None:
        if receiver is None or not method:
            return None
        type_full, static_call = self._receiver_type(receiver, node, scope)
        if type_full is None:
            return None

        member = self.compilation.find_member(type_full, method, static_call=static_call)
        if member is not None:
            return member
        if not static_call:
            # LINQ operators only bind to receivers known to be sequences
            extension = self.compilation.find_extension(
                method, scope, include_catalog=self.compilation.is_sequence(type_full)
            )
            if extension is not None:
                return extension
        # A known receiver type binds the call even when the member is not listed
        return MethodSymbol.on_type(
            type_full,
            method,
            is_static=static_call,
            namespace=self.compilation.source_namespace(type_full),
        )

    def _conditional_receiver(self, node: Any) -> Any | None:
        for anc in ancestors(node):
            if anc.type == "conditional_access_expression":
                return self._condition_of(anc)
        return None

    @staticmethod
    def _condition_of(conditional: Any) -> Any | None:
        condition = conditional.child_by_field_name("condition")
        if condition is None and conditional.named_children:
            condition = conditional.named_children[0]
        return condition

    def _receiver_type(self, receiver: Any, node: Any, scope: Scope) -> tuple[str | None, bool]:
        """(type of receiver, whether the call is static) for a member call."""
        kind = receiver.type
        if kind in ("this_expression", "this"):
            return self.containing_type(node), False
        if kind in ("base_expression", "base"):
            current = self.containing_type(node)
            chain = self.compilation.base_type_chain(current) if current else []
            return (chain[1] if len(chain) > 1 else None), False
        if kind == "predefined_type":
            return _PREDEFINED_TYPES.get(node_text(receiver)), True
        if kind == "object_creation_expression":
            created = node_text(receiver.child_by_field_name("type"))
            return self.compilation.resolve_type_name(created, scope), False
        if kind == "parenthesized_expression" and receiver.named_children:
            return self._receiver_type(receiver.named_children[0], node, scope)
        if kind == "invocation_expression":
            inner = self.resolve_invocation(receiver)
            if inner is not None and self.compilation.returns_sequence(inner):
                return GENERIC_SEQUENCE_INTERFACE, False
            return None, False
        if kind == "identifier":
            name = node_text(receiver)
            declared, type_full = self._variable_type(name, receiver, scope)
            if declared:
                return type_full, False
            type_full = self.compilation.resolve_type_name(name, scope)
            return type_full, type_full is not None
        if kind in ("member_access_expression", "qualified_name", "generic_name", "alias_qualified_name"):
            type_full = self.compilation.resolve_type_name(node_text(receiver), scope)
            if type_full is not None:
                return type_full, True
            if kind == "member_access_expression":
                inner = receiver.child_by_field_name("expression")
                member = node_text(receiver.child_by_field_name("name"))
                owner = self.containing_type(node)
                if inner is not None and inner.type in ("this_expression", "this") and owner:
                    return self.compilation.field_type(owner, member)[1], False
        return None, False

    def _variable_type(self, name: str, start: Any, scope: Scope) -> tuple[bool, str | None]:
        """Find the declaration of local, parameter or field ``name`` visible at ``start``.

        Returns (declared, resolved type). A variable that is declared but
        whose type cannot be resolved yields (True, None) so that it shadows
        any type of the same name.
        """
        position = start.start_byte
        for anc in ancestors(start):
            kind = anc.type
            if kind in _STATEMENT_CONTAINERS or kind in PREPROC_WRAPPERS:
                found = self._declared_in(anc, name, position, scope)
                if found is not None:
                    return found
            elif kind == "foreach_statement":
                left = anc.child_by_field_name("left")
                if left is not None and node_text(left) == name:
                    type_text = node_text(anc.child_by_field_name("type"))
                    return True, self._resolve_declared(type_text, None, scope)
            elif kind in _LAMBDA_TYPES:
                params = anc.child_by_field_name("parameters")
                if params is not None and node_text(params) == name:
                    return True, None
                for param in _parameters(anc):
                    if declared_name(param) == name:
                        type_node = param.child_by_field_name("type")
                        resolved = self.compilation.resolve_value_type(node_text(type_node), scope)
                        return True, resolved if type_node is not None else None
            elif kind in ROUTINE_DECLARATIONS:
                for param in _parameters(anc):
                    if declared_name(param) == name:
                        type_text = node_text(param.child_by_field_name("type"))
                        return True, self.compilation.resolve_value_type(type_text, scope)
            elif kind in TYPE_DECLARATIONS:
                return self.compilation.field_type(type_full_name(anc), name)
        return False, None

    def _declared_in(
        self, container: Any, name: str, position: int, scope: Scope
    ) -> tuple[bool, str | None] | None:
        result: tuple[bool, str | None] | None = None
        for child in container.named_children:
            if child.start_byte >= position:
                break
            if child.type == "local_declaration_statement":
                declaration = _variable_declaration_child(child)
            elif child.type == "variable_declaration":
                declaration = child
            else:
                continue
            if declaration is None:
                continue
            type_text = node_text(declaration.child_by_field_name("type"))
            for declarator in _declarators(declaration):
                if declared_name(declarator) == name:
                    initializer = _declarator_initializer(declarator)
                    result = True, self._resolve_declared(type_text, initializer, scope)
        return result

    def _resolve_declared(self, type_text: str, initializer: Any | None, scope: Scope) -> str | None:
        if type_text != "var":
            return self.compilation.resolve_value_type(type_text, scope)
        if initializer is not None and initializer.type == "object_creation_expression":
            created = initializer.child_by_field_name("type")
            return self.compilation.resolve_type_name(node_text(created), scope)
        return None

    def _resolve_unqualified(self, method: str, node: Any, scope: Scope) -> MethodSymbol | None:
        for anc in ancestors(node):
            if anc.type != "block":
                continue
            for child in anc.named_children:
                if child.type == "local_function_statement" and declared_name(child) == method:
                    owner = self.containing_type(node)
                    namespace = self.compilation.source_namespace(owner) if owner else None
                    return MethodSymbol(
                        name=method,
                        containing_type=owner,
                        containing_namespace=namespace if namespace is not None else scope.namespace,
                        is_static="static" in modifiers(child),
                    )

        for enclosing in scope.type_chain:
            member = self.compilation.find_member(enclosing, method, static_call=False)
            if member is not None:
                return member

        file_scope = Scope(scope.path)
        for static_type in self.compilation.imports_for(scope.path).static_types:
            type_full = self.compilation.resolve_type_name(static_type, file_scope) or static_type
            member = self.compilation.find_member(type_full, method, static_call=True)
            if member is not None:
                return member
        return None
