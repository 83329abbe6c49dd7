"""Annotation kinds and the declarations that populate them.

Four declarations are understood:

- ``@id`` marks a model property as the key identifying instances of its model.
  An optional argument supplies an alternate key name; otherwise the property's
  own name is used.
- ``@openModel`` marks a model as open (extensible).
- ``@contains`` marks a property as a navigation property owning its target.
- ``@references`` marks a property as a navigation property pointing to, but
  not owning, its target.

Misapplied declarations are reported as diagnostics on the declaration context
and leave the store untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from csdl_render.annotations import (
    AnnotationError,
    AnnotationKind,
    InvalidAnnotationTarget,
    declare_kind,
)
from csdl_render.errors import DiagnosticCode
from csdl_render.types import TypeKind

if TYPE_CHECKING:
    from csdl_render.annotations import AnnotationStore
    from csdl_render.context import DeclarationContext
    from csdl_render.types import Model, ModelProperty, Type


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def _is_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


KEY = declare_kind(
    "csdl_render.key",
    {TypeKind.MODEL_PROPERTY},
    value_check=_is_str,
    value_description="a non-empty string",
)
OPEN_TYPE = declare_kind(
    "csdl_render.openType",
    {TypeKind.MODEL},
    value_check=_is_bool,
    value_description="a boolean",
)
CONTAINS = declare_kind(
    "csdl_render.contains",
    {TypeKind.MODEL_PROPERTY},
    value_check=_is_bool,
    value_description="a boolean",
)
REFERENCES = declare_kind(
    "csdl_render.references",
    {TypeKind.MODEL_PROPERTY},
    value_check=_is_bool,
    value_description="a boolean",
)


def _bind(context: DeclarationContext, kind: AnnotationKind, target: Any, value: Any) -> bool:
    try:
        context.store.set(kind, target, value)
    except AnnotationError as exc:
        code = (
            DiagnosticCode.INVALID_ANNOTATION_TARGET
            if isinstance(exc, InvalidAnnotationTarget)
            else DiagnosticCode.INVALID_ANNOTATION_VALUE
        )
        context.add_diagnostic(code, str(exc))
        return False
    return True


def apply_id(context: DeclarationContext, target: Type, alt_name: Any = None) -> bool:
    """Mark a model property as the key of its model.

    Args:
        context: Declaration context receiving the binding.
        target: The property being decorated.
        alt_name: Optional alternate key name; empty means none.

    Returns:
        True if the binding was created.
    """
    if getattr(target, "kind", None) != TypeKind.MODEL_PROPERTY:
        return _bind(context, KEY, target, alt_name)
    if alt_name is not None and not isinstance(alt_name, str):
        context.add_diagnostic(
            DiagnosticCode.INVALID_ANNOTATION_VALUE,
            f"Invalid value {alt_name!r} for @id; expected a string",
        )
        return False
    return _bind(context, KEY, target, alt_name or target.name)


def apply_open_model(context: DeclarationContext, target: Type) -> bool:
    """Mark a model as open."""
    return _bind(context, OPEN_TYPE, target, True)


def apply_contains(context: DeclarationContext, target: Type) -> bool:
    """Mark a property as a contained navigation property."""
    return _bind(context, CONTAINS, target, True)


def apply_references(context: DeclarationContext, target: Type) -> bool:
    """Mark a property as a referencing navigation property."""
    return _bind(context, REFERENCES, target, True)


DECORATORS: dict[str, Callable[..., bool]] = {
    "id": apply_id,
    "openModel": apply_open_model,
    "contains": apply_contains,
    "references": apply_references,
}


def apply_decorator(context: DeclarationContext, name: str, target: Type, *args: Any) -> bool:
    """Apply a declaration by name.

    Unknown names and wrong argument counts are reported as diagnostics.
    """
    decorator = DECORATORS.get(name.lstrip("@"))
    if decorator is None:
        context.add_diagnostic(
            DiagnosticCode.UNKNOWN_DECORATOR,
            f"Unknown decorator @{name.lstrip('@')}",
        )
        return False

    max_args = 1 if decorator is apply_id else 0
    if len(args) > max_args:
        context.add_diagnostic(
            DiagnosticCode.INVALID_ANNOTATION_VALUE,
            f"@{name.lstrip('@')} expects at most {max_args} argument(s), got {len(args)}",
        )
        return False
    return decorator(context, target, *args)


def is_key(store: AnnotationStore, prop: ModelProperty) -> bool:
    return store.has(KEY, prop)


def get_key_name(store: AnnotationStore, prop: ModelProperty) -> str:
    """Get the key name for a key property, falling back to the property name."""
    return store.get(KEY, prop) or prop.name


def is_open_model(store: AnnotationStore, model: Model) -> bool:
    return store.has(OPEN_TYPE, model)


def is_contains(store: AnnotationStore, prop: ModelProperty) -> bool:
    return store.has(CONTAINS, prop)


def is_references(store: AnnotationStore, prop: ModelProperty) -> bool:
    return store.has(REFERENCES, prop)
