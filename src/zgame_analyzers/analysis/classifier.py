"""Call-site classification.

Two questions are asked about a located invocation or query expression:

1. Does the call bind to a forbidden library? The resolved method's
   namespace is tested, and for an extension method called with instance
   syntax the namespace of its static definition is tested as well, so
   ``Enumerable.Where(xs, f)`` and ``xs.Where(f)`` classify the same.
2. Does it sit inside a restricted (per-frame) routine? That is answered
   from a :class:`CallSiteContext` built from the enclosing routine and the
   containing type's inheritance.

Unresolvable calls and expressions outside any named routine classify as
"not forbidden" and "not restricted".
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from zgame_analyzers.parsing.nodes import attribute_names, declared_name, has_explicit_interface, modifiers
from zgame_analyzers.semantics.model import SemanticModel


@dataclass(frozen=True)
class CallSiteContext:
    """Lexical context of a call site. Built per query, never cached."""

    enclosing_method_name: str | None = None
    is_override_or_interface_impl: bool = False
    attributes_on_method: frozenset[str] = frozenset()
    containing_type_chain: tuple[str, ...] = ()  # Most-derived first
    implemented_interfaces: tuple[str, ...] = ()

    @property
    def has_routine(self) -> bool:
        return self.enclosing_method_name is not None


def classify(node: Any, model: SemanticModel) -> CallSiteContext:
    """Build the :class:`CallSiteContext` of ``node``."""
    routine = model.enclosing_routine(node)
    if routine is None:
        return CallSiteContext()

    mods = modifiers(routine)
    type_full = model.containing_type(routine)
    chain = tuple(model.base_type_chain(type_full)) if type_full else ()
    interfaces = tuple(model.implemented_interfaces(type_full)) if type_full else ()

    return CallSiteContext(
        enclosing_method_name=declared_name(routine),
        is_override_or_interface_impl="override" in mods or has_explicit_interface(routine),
        attributes_on_method=frozenset(attribute_names(routine)),
        containing_type_chain=chain,
        implemented_interfaces=interfaces,
    )


def _starts_with_any(namespace: str | None, prefixes: Iterable[str]) -> bool:
    if not namespace:
        return False
    return any(namespace.startswith(p) for p in prefixes if p)


def is_forbidden_library_call(node: Any, model: SemanticModel, forbidden_prefixes: Sequence[str]) -> bool:
    """True if the invocation binds to a method declared under a forbidden namespace."""
    symbol = model.resolve_invocation(node)
    if symbol is None:
        return False
    if _starts_with_any(symbol.containing_namespace, forbidden_prefixes):
        return True
    if symbol.reduced_from is not None:
        return _starts_with_any(symbol.reduced_from.containing_namespace, forbidden_prefixes)
    return False


def _contains_any(value: str, substrings: Iterable[str]) -> bool:
    lowered = value.lower()
    return any(s.lower() in lowered for s in substrings if s)


def is_in_restricted_method_context(
    node: Any,
    model: SemanticModel,
    names: Iterable[str],
    attribute_substrings: Iterable[str],
    interface_substrings: Iterable[str],
    sentinel_base_type: str | None = None,
) -> bool:
    """True if ``node`` lies in a routine recognized as per-frame.

    Checks, in order:

    a. the routine's name is in ``names`` (case-insensitive);
    b. the routine has an attribute whose name contains one of
       ``attribute_substrings``;
    c. the routine is an override or explicit interface implementation with a
       restricted name;
    d. a type in the containing type's base chain equals
       ``sentinel_base_type`` and the routine has a restricted name;
    e. the containing type implements an interface whose name contains one
       of ``interface_substrings`` and the routine has a restricted name or
       a name containing "update".
    """
    context = classify(node, model)
    if not context.has_routine:
        return False

    routine_name = context.enclosing_method_name or ""
    restricted = {n.lower() for n in names}
    name_matches = routine_name.lower() in restricted

    if name_matches:
        return True
    if any(_contains_any(attr, attribute_substrings) for attr in context.attributes_on_method):
        return True
    if context.is_override_or_interface_impl and name_matches:
        return True
    if sentinel_base_type and sentinel_base_type in context.containing_type_chain and name_matches:
        return True
    if any(_contains_any(i, interface_substrings) for i in context.implemented_interfaces):
        return name_matches or "update" in routine_name.lower()
    return False
