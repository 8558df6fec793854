"""Helpers over tree-sitter-c-sharp nodes.

tree-sitter-c-sharp wraps code under ``#if`` blocks in ``preproc_*`` nodes and
nests ``qualified_name`` recursively, so helpers here read text spans rather
than walking name children.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

TYPE_DECLARATIONS = frozenset(
    {
        "class_declaration",
        "struct_declaration",
        "interface_declaration",
        "record_declaration",
        "record_struct_declaration",
        "enum_declaration",
    }
)

ROUTINE_DECLARATIONS = frozenset(
    {
        "method_declaration",
        "local_function_statement",
        "constructor_declaration",
    }
)

NAMESPACE_DECLARATIONS = frozenset({"namespace_declaration", "file_scoped_namespace_declaration"})

PREPROC_WRAPPERS = frozenset(
    {
        "preproc_if",
        "preproc_ifdef",
        "preproc_elif",
        "preproc_else",
        "preproc_region",
    }
)

NAME_NODE_TYPES = frozenset(
    {"identifier", "qualified_name", "generic_name", "alias_qualified_name"}
)

_MODIFIER_KEYWORDS = frozenset(
    {
        "public",
        "private",
        "protected",
        "internal",
        "static",
        "abstract",
        "sealed",
        "override",
        "virtual",
        "extern",
        "partial",
        "async",
        "readonly",
        "unsafe",
        "new",
    }
)

_GENERIC_ARGS_RE = re.compile(r"<[^<>]*>")


def node_text(node: Any) -> str:
    """Decoded text of a node."""
    if node is None or not node.text:
        return ""
    return node.text.decode("utf-8", errors="replace")


def walk(node: Any) -> Iterator[Any]:
    """Pre-order traversal of ``node`` and its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def ancestors(node: Any) -> Iterator[Any]:
    """Parents of ``node``, innermost first."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def find_node(root: Any, start: int, end: int, node_types: frozenset[str]) -> Any | None:
    """Locate a node of one of ``node_types`` spanning exactly ``[start, end)``.

    Several nested nodes can share a span (an identifier inside an
    expression, say); any of them with a matching type qualifies.
    """
    node = root
    while True:
        if node.start_byte == start and node.end_byte == end and node.type in node_types:
            return node
        for child in node.children:
            if child.start_byte <= start and end <= child.end_byte:
                node = child
                break
        else:
            return None


def declared_name(node: Any) -> str | None:
    """The ``name`` field of a declaration, as text."""
    name = node.child_by_field_name("name")
    if name is None:
        for child in node.children:
            if child.type == "identifier":
                name = child
                break
    return node_text(name) or None


def modifiers(node: Any) -> frozenset[str]:
    """Modifier keywords on a declaration (``override``, ``static``, ...)."""
    found: set[str] = set()
    for child in node.children:
        if child.type == "modifier":
            found.add(node_text(child).strip())
        elif child.type in _MODIFIER_KEYWORDS:
            found.add(child.type)
    return frozenset(found)


def attribute_names(node: Any) -> list[str]:
    """Names of the attributes applied to a declaration, as written."""
    names: list[str] = []
    for child in node.children:
        if child.type != "attribute_list":
            continue
        for attr in child.named_children:
            if attr.type != "attribute":
                continue
            name = attr.child_by_field_name("name")
            if name is None and attr.named_children:
                name = attr.named_children[0]
            text = node_text(name)
            if text:
                names.append(text.removeprefix("global::"))
    return names


def has_explicit_interface(node: Any) -> bool:
    return any(child.type == "explicit_interface_specifier" for child in node.children)


def simple_name(node: Any) -> str | None:
    """Method name from an ``identifier`` or ``generic_name`` node."""
    if node is None:
        return None
    if node.type == "generic_name":
        for child in node.children:
            if child.type == "identifier":
                return node_text(child)
        return None
    if node.type == "identifier":
        return node_text(node)
    return None


def invoked_name(invocation: Any) -> str | None:
    """Simple name of the method an ``invocation_expression`` calls."""
    function = invocation.child_by_field_name("function")
    if function is None:
        return None
    if function.type == "conditional_access_expression":
        function = function.named_children[-1] if function.named_children else None
        if function is None:
            return None
    if function.type in ("member_access_expression", "member_binding_expression"):
        name = function.child_by_field_name("name")
        if name is None and function.named_children:
            name = function.named_children[-1]
        return simple_name(name)
    return simple_name(function)


def strip_generic_args(name: str) -> str:
    """``List<Dictionary<int, string>>`` -> ``List``."""
    previous = None
    while previous != name:
        previous = name
        name = _GENERIC_ARGS_RE.sub("", name)
    return name.replace(" ", "")


def using_target(node: Any) -> tuple[str | None, str | None, bool]:
    """Split a ``using_directive`` into (target name, alias, is_static).

    Handles the three forms:
    - ``using Namespace;``
    - ``using static Namespace.Type;``
    - ``using Alias = Namespace.Type;``
    """
    children = node.children
    is_static = any(c.type == "static" for c in children)
    has_equals = any(c.type == "=" for c in children)

    alias: str | None = None
    target: str | None = None
    found_equals = False
    for c in children:
        if c.type == "=":
            found_equals = True
            continue
        if c.type not in NAME_NODE_TYPES:
            continue
        if has_equals and not found_equals:
            alias = node_text(c)
        else:
            target = node_text(c)
    if target is not None:
        target = target.removeprefix("global::")
    return target, alias, is_static
