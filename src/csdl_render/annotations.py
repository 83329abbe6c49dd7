"""Out-of-band annotation store for type graph nodes.

Each annotation kind owns an independent side map from node to value. Nodes are
keyed by identity, never by structure. Validation happens when a binding is
set, so the renderer only ever sees bindings on supported node kinds.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator

from csdl_render.types import TypeKind

if TYPE_CHECKING:
    from csdl_render.types import Type


class AnnotationError(Exception):
    """Base class for rejected annotation bindings."""

    def __init__(self, kind: AnnotationKind, node: Any, message: str):
        super().__init__(message)
        self.kind = kind
        self.node = node


class InvalidAnnotationTarget(AnnotationError):
    """The node's variant is not one the kind may attach to."""


class InvalidAnnotationValue(AnnotationError):
    """The value failed the kind's type predicate."""


@dataclass(frozen=True, eq=False)
class AnnotationKind:
    """Handle for one kind of annotation.

    Handles compare by identity: two kinds declared with the same name are
    still distinct keys.
    """

    name: str
    targets: frozenset[TypeKind]
    value_check: Callable[[Any], bool] | None = None
    value_description: str = "any value"

    def accepts_target(self, node: Any) -> bool:
        return getattr(node, "kind", None) in self.targets

    def accepts_value(self, value: Any) -> bool:
        if self.value_check is None:
            return True
        return self.value_check(value)

    def __repr__(self) -> str:
        return f"AnnotationKind({self.name!r})"


def declare_kind(
    name: str,
    targets: set[TypeKind] | frozenset[TypeKind],
    value_check: Callable[[Any], bool] | None = None,
    value_description: str = "any value",
) -> AnnotationKind:
    """Declare a new annotation kind.

    Args:
        name: Namespaced display name, e.g. ``"csdl_render.key"``.
        targets: Node kinds the annotation may be attached to.
        value_check: Predicate the bound value must satisfy.
        value_description: Human readable form of the predicate for diagnostics.

    Returns:
        A fresh kind handle.
    """
    return AnnotationKind(
        name=name,
        targets=frozenset(targets),
        value_check=value_check,
        value_description=value_description,
    )


@dataclass
class AnnotationStore:
    """Table of per-kind node to value maps."""

    _maps: dict[AnnotationKind, dict[Any, Any]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def set(self, kind: AnnotationKind, node: Type, value: Any = True) -> None:
        """Bind ``value`` to ``node`` for ``kind``, replacing any previous value.

        Raises:
            InvalidAnnotationTarget: If the node kind is not allowed.
            InvalidAnnotationValue: If the value fails the kind's predicate.
        """
        if not kind.accepts_target(node):
            node_kind = getattr(node, "kind", None)
            found = node_kind.value if isinstance(node_kind, TypeKind) else type(node).__name__
            allowed = ", ".join(sorted(k.value for k in kind.targets))
            raise InvalidAnnotationTarget(
                kind,
                node,
                f"Cannot apply {kind.name} to {found}; expected {allowed}",
            )
        if not kind.accepts_value(value):
            raise InvalidAnnotationValue(
                kind,
                node,
                f"Invalid value {value!r} for {kind.name}; expected {kind.value_description}",
            )

        with self._lock:
            self._maps.setdefault(kind, {})[node] = value

    def has(self, kind: AnnotationKind, node: Any) -> bool:
        return node in self._maps.get(kind, {})

    def get(self, kind: AnnotationKind, node: Any, default: Any = None) -> Any:
        return self._maps.get(kind, {}).get(node, default)

    def annotations_for(self, node: Any) -> list[tuple[AnnotationKind, Any]]:
        """Get every binding attached to a node, in first-use order of the kinds."""
        return [
            (kind, bindings[node])
            for kind, bindings in self._maps.items()
            if node in bindings
        ]

    def annotated_nodes(self) -> Iterator[Any]:
        """Iterate distinct annotated nodes in first-binding order."""
        seen: set[int] = set()
        for bindings in self._maps.values():
            for node in bindings:
                if id(node) not in seen:
                    seen.add(id(node))
                    yield node

    def __len__(self) -> int:
        return sum(len(bindings) for bindings in self._maps.values())
