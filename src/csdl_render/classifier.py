"""Classification of models, properties and scalar type names."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from csdl_render.decorators import is_contains, is_key, is_open_model, is_references
from csdl_render.identifiers import variant_tag
from csdl_render.types import TypeKind, literal_text

if TYPE_CHECKING:
    from csdl_render.annotations import AnnotationStore
    from csdl_render.types import Model, ModelProperty, Type

logger = logging.getLogger(__name__)


class ModelClass(Enum):
    """How a model is rendered."""

    ENTITY = "entity"  # Has a key property
    COMPLEX = "complex"


class PropertyClass(Enum):
    NAVIGATION = "navigation"
    SCALAR = "scalar"


@dataclass(frozen=True)
class PropertyClassification:
    """Classification of one property."""

    property_class: PropertyClass
    contained: bool = False

    @property
    def is_navigation(self) -> bool:
        return self.property_class == PropertyClass.NAVIGATION


SCALAR = PropertyClassification(PropertyClass.SCALAR)

# Intrinsic model names and their Edm equivalents
EDM_TYPE_NAMES: dict[str, str] = {
    "string": "Edm.String",
    "bytes": "Collection(Edm.Byte)",
    "int8": "Edm.Byte",
    "int16": "Edm.Int16",
    "int32": "Edm.Int32",
    "int64": "Edm.Int64",
    "float32": "Edm.Single",
    "float64": "Edm.Double",
    "plainDate": "Edm.Date",
    "plainTime": "Edm.TimeOfDay",
    "zonedDateTime": "Edm.DateTimeOffset",
    "duration": "Edm.Duration",
    "boolean": "Edm.Boolean",
    "stream": "Edm.Stream",
}


def find_key_property(store: AnnotationStore, model: Model) -> ModelProperty | None:
    """Get the first property of the model, in declared order, carrying a key.

    Only the model's own properties are scanned; inherited properties are not.
    """
    keys = [prop for prop in model.properties.values() if is_key(store, prop)]
    if len(keys) > 1:
        logger.debug(
            "Model %s has %d key properties; using %s",
            model.name,
            len(keys),
            keys[0].name,
        )
    return keys[0] if keys else None


def classify_model(store: AnnotationStore, model: Model) -> ModelClass:
    if find_key_property(store, model) is not None:
        return ModelClass.ENTITY
    return ModelClass.COMPLEX


def is_open(store: AnnotationStore, model: Model) -> bool:
    return is_open_model(store, model)


def classify_property(store: AnnotationStore, prop: ModelProperty) -> PropertyClassification:
    """Classify a property as navigation (contained or referenced) or scalar."""
    contained = is_contains(store, prop)
    if contained or is_references(store, prop):
        return PropertyClassification(PropertyClass.NAVIGATION, contained=contained)
    return SCALAR


def scalar_type_name(type: Type) -> str:
    """Get the schema type name used for a scalar property.

    Never raises: kinds without a naming rule fall back to their variant tag.
    """
    kind = getattr(type, "kind", None)

    if kind == TypeKind.ARRAY:
        return f"Collection({scalar_type_name(type.element_type)})"
    if kind == TypeKind.UNION:
        return " | ".join(scalar_type_name(option) for option in type.options)
    if kind == TypeKind.TEMPLATE_PARAMETER:
        return type.name
    if kind in (TypeKind.STRING, TypeKind.NUMBER, TypeKind.BOOLEAN):
        return literal_text(type.value)
    if kind in (TypeKind.NAMESPACE, TypeKind.OPERATION, TypeKind.INTERFACE, TypeKind.ENUM):
        return type.name
    if kind == TypeKind.MODEL:
        return EDM_TYPE_NAMES.get(type.name, type.name)
    return variant_tag(type)


def is_unrenderable(type: Type) -> bool:
    """Check whether naming a type anywhere in its structure needs the tag fallback."""
    kind = getattr(type, "kind", None)
    if kind == TypeKind.ARRAY:
        return is_unrenderable(type.element_type)
    if kind == TypeKind.UNION:
        return any(is_unrenderable(option) for option in type.options)
    return kind not in (
        TypeKind.TEMPLATE_PARAMETER,
        TypeKind.STRING,
        TypeKind.NUMBER,
        TypeKind.BOOLEAN,
        TypeKind.NAMESPACE,
        TypeKind.OPERATION,
        TypeKind.INTERFACE,
        TypeKind.ENUM,
        TypeKind.MODEL,
    )
