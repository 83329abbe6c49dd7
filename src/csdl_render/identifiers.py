"""Qualified identifiers for referenceable types.

The same identifier serves as an anchor id and as a cross-reference value, so
every caller must go through :func:`qualified_id`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from csdl_render.types import TypeKind, literal_text

if TYPE_CHECKING:
    from csdl_render.types import Namespace, Type


def namespace_string(namespace: Namespace | None) -> str:
    """Get the dotted name of a namespace; the unnamed root contributes nothing."""
    names: list[str] = []
    current = namespace
    while current is not None:
        if current.name:
            names.append(current.name)
        current = current.namespace
    return ".".join(reversed(names))


def qualified_id(type: Type) -> str:
    """Compute the namespace-qualified identifier of a type.

    Types without an identifier rule fall back to their variant tag.
    """
    kind = getattr(type, "kind", None)

    if kind == TypeKind.ARRAY:
        return f"Collection({qualified_id(type.element_type)})"
    if kind == TypeKind.NAMESPACE:
        return namespace_string(type)
    if kind in (
        TypeKind.MODEL,
        TypeKind.ENUM,
        TypeKind.UNION,
        TypeKind.OPERATION,
        TypeKind.INTERFACE,
    ):
        return f"{namespace_string(type.namespace)}.{type.name or ''}"
    if kind in (TypeKind.STRING, TypeKind.NUMBER, TypeKind.BOOLEAN):
        return literal_text(type.value)
    return variant_tag(type)


def variant_tag(type: object) -> str:
    """Get the variant tag string of a node, or its class name for foreign objects."""
    kind = getattr(type, "kind", None)
    if isinstance(kind, TypeKind):
        return kind.value
    return type.__class__.__name__


def has_qualified_id(type: Type) -> bool:
    """Check whether a type has an identifier rule other than the tag fallback."""
    kind = getattr(type, "kind", None)
    if kind == TypeKind.ARRAY:
        return has_qualified_id(type.element_type)
    return kind in (
        TypeKind.NAMESPACE,
        TypeKind.MODEL,
        TypeKind.ENUM,
        TypeKind.UNION,
        TypeKind.OPERATION,
        TypeKind.INTERFACE,
        TypeKind.STRING,
        TypeKind.NUMBER,
        TypeKind.BOOLEAN,
    )
