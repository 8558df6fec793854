"""Resolved symbols handed out by the semantic model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

TypeKind = Literal["class", "struct", "interface", "enum", "record"]


def split_full_name(full_name: str) -> tuple[str, str]:
    """``UnityEngine.MonoBehaviour`` -> (``UnityEngine``, ``MonoBehaviour``)."""
    namespace, _, name = full_name.rpartition(".")
    return namespace, name


@dataclass(frozen=True)
class TypeSymbol:
    """A named type, declared in source or known from the catalog."""

    full_name: str
    kind: TypeKind = "class"
    base_types: tuple[str, ...] = ()  # Fully-qualified when resolvable, as written otherwise
    is_external: bool = False

    @property
    def name(self) -> str:
        return split_full_name(self.full_name)[1]

    @property
    def namespace(self) -> str:
        return split_full_name(self.full_name)[0]

    @property
    def is_interface(self) -> bool:
        return self.kind == "interface"


@dataclass(frozen=True)
class MethodSymbol:
    """A resolved method.

    An extension method called with instance syntax (``items.Where(...)``)
    resolves to a *reduced* symbol: it has no containing type or namespace of
    its own and ``reduced_from`` points at the static definition
    (``System.Linq.Enumerable.Where``).
    """

    name: str
    containing_type: str | None
    containing_namespace: str | None
    is_static: bool = False
    is_extension: bool = False
    reduced_from: MethodSymbol | None = field(default=None, compare=False)

    @property
    def original_definition(self) -> MethodSymbol:
        return self.reduced_from or self

    @property
    def is_reduced(self) -> bool:
        return self.reduced_from is not None

    def reduce(self) -> MethodSymbol:
        """The instance-call form of this extension method."""
        return MethodSymbol(
            name=self.name,
            containing_type=None,
            containing_namespace=None,
            is_static=False,
            is_extension=True,
            reduced_from=self,
        )

    @classmethod
    def on_type(
        cls,
        type_full_name: str,
        name: str,
        *,
        is_static: bool = False,
        is_extension: bool = False,
        namespace: str | None = None,
    ) -> MethodSymbol:
        if namespace is None:
            namespace, _ = split_full_name(type_full_name)
        return cls(
            name=name,
            containing_type=type_full_name,
            containing_namespace=namespace,
            is_static=is_static,
            is_extension=is_extension,
        )
