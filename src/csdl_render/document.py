"""Document tree builder.

Builds a generic element tree mirroring the CSDL element hierarchy::

    Schema
      EnumType / EnumMember
      EntityType / Key / PropertyRef, Property, NavigationProperty
      ComplexType / Property, NavigationProperty
      EntityContainer / EntitySet

The tree is a plain value; :mod:`csdl_render.serializer` turns it into text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Mapping

from csdl_render.classifier import (
    ModelClass,
    classify_model,
    classify_property,
    find_key_property,
    is_open,
    is_unrenderable,
    scalar_type_name,
)
from csdl_render.decorators import get_key_name
from csdl_render.errors import Diagnostic, DiagnosticCode, DiagnosticSeverity
from csdl_render.flattener import DEFAULT_EXCLUDED_NAMESPACES, flatten_namespaces
from csdl_render.identifiers import has_qualified_id, namespace_string, qualified_id
from csdl_render.types import TypeKind, literal_text

if TYPE_CHECKING:
    from csdl_render.annotations import AnnotationStore
    from csdl_render.types import (
        EnumType,
        Interface,
        Model,
        ModelProperty,
        Namespace,
    )

logger = logging.getLogger(__name__)

RouteResolver = Callable[["Interface"], "str | None"]

ENTITY_CONTAINER_NAME = "container"


@dataclass(frozen=True)
class Element:
    """A labeled tree node with ordered attributes and children."""

    tag: str
    attributes: tuple[tuple[str, str], ...] = ()
    children: tuple[Element, ...] = ()

    def get(self, name: str, default: str | None = None) -> str | None:
        """Get an attribute value."""
        for key, value in self.attributes:
            if key == name:
                return value
        return default

    def find(self, tag: str) -> Element | None:
        """Get the first direct child with the given tag."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def findall(self, tag: str) -> list[Element]:
        return [child for child in self.children if child.tag == tag]

    def iter(self) -> Iterator[Element]:
        """Iterate this element and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()


def element(
    tag: str,
    attributes: Mapping[str, str | None] | None = None,
    children: Iterable[Element] = (),
) -> Element:
    """Create an element, dropping attributes whose value is None."""
    attrs = tuple(
        (name, value) for name, value in (attributes or {}).items() if value is not None
    )
    return Element(tag=tag, attributes=attrs, children=tuple(children))


@dataclass
class EntitySetCandidate:
    """An interface exposed as an entity set."""

    name: str
    path: str
    entity_type: str


def navigation_sources(
    namespace: Namespace, route_resolver: RouteResolver
) -> list[EntitySetCandidate]:
    """Find interfaces of a namespace that can back an entity set.

    An interface qualifies when its resolved route has a ``/`` after the first
    character and it declares a ``Get`` operation with a return type.
    """
    candidates: list[EntitySetCandidate] = []
    for interface in namespace.interfaces.values():
        path = route_resolver(interface)
        if not path or path.rfind("/") <= 0:
            continue
        get = interface.operations.get("Get")
        if get is None or get.return_type is None:
            continue
        return_type = get.return_type
        if return_type.kind == TypeKind.ARRAY:
            return_type = return_type.element_type
        name = path.rstrip("/").rsplit("/", 1)[-1]
        candidates.append(
            EntitySetCandidate(name=name, path=path, entity_type=qualified_id(return_type))
        )
    return candidates


@dataclass
class SchemaBuilder:
    """Builds Schema elements for a program's namespaces.

    Each builder collects the diagnostics produced while building; create one
    per render.
    """

    store: AnnotationStore
    route_resolver: RouteResolver | None = None
    entity_container: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def build_schemas(
        self,
        root: Namespace,
        excluded: Iterable[str] = DEFAULT_EXCLUDED_NAMESPACES,
    ) -> list[Element]:
        """Build one Schema element per included namespace."""
        return [self.build_schema(ns) for ns in flatten_namespaces(root, excluded)]

    def build_schema(self, namespace: Namespace) -> Element:
        """Build the Schema for a namespace: enums first, then models."""
        children: list[Element] = []
        children.extend(self.build_enum_type(enum) for enum in namespace.enums.values())
        children.extend(self.build_model(model) for model in namespace.models.values())

        container = self.build_entity_container(namespace)
        if container is not None:
            children.append(container)

        return element("Schema", {"Namespace": namespace_string(namespace)}, children)

    def build_enum_type(self, enum: EnumType) -> Element:
        members = [
            element(
                "EnumMember",
                {
                    "Name": member.name,
                    "Value": literal_text(member.value) if member.value is not None else None,
                },
            )
            for member in enum.members
        ]
        return element("EnumType", {"Name": enum.name}, members)

    def build_model(self, model: Model) -> Element:
        """Build an EntityType or ComplexType for a model."""
        attributes = {
            "Name": model.name,
            "BaseType": model.base_model.name if model.base_model is not None else None,
            "OpenType": "true" if is_open(self.store, model) else None,
        }
        properties = [self.build_property(prop) for prop in model.properties.values()]

        if classify_model(self.store, model) == ModelClass.ENTITY:
            key_prop = find_key_property(self.store, model)
            key = element(
                "Key",
                children=[element("PropertyRef", {"Name": get_key_name(self.store, key_prop)})],
            )
            return element("EntityType", attributes, [key, *properties])

        return element("ComplexType", attributes, properties)

    def build_property(self, prop: ModelProperty) -> Element:
        """Build a Property or NavigationProperty element."""
        classification = classify_property(self.store, prop)

        if classification.is_navigation:
            if not has_qualified_id(prop.type):
                self._report_fallback(prop, qualified_id(prop.type))
            return element(
                "NavigationProperty",
                {
                    "Name": prop.name,
                    "Type": qualified_id(prop.type),
                    "ContainsTarget": "true" if classification.contained else None,
                },
            )

        if is_unrenderable(prop.type):
            self._report_fallback(prop, scalar_type_name(prop.type))
        return element(
            "Property",
            {
                "Name": prop.name,
                "Type": scalar_type_name(prop.type),
                "Nullable": None if prop.optional else "false",
            },
        )

    def build_entity_container(self, namespace: Namespace) -> Element | None:
        """Build the EntityContainer for a namespace, if enabled and non-empty."""
        if not self.entity_container or self.route_resolver is None:
            return None
        if not namespace.interfaces:
            return None

        candidates = navigation_sources(namespace, self.route_resolver)
        if not candidates:
            return None

        entity_sets = [
            element("EntitySet", {"Name": c.name, "EntityType": c.entity_type})
            for c in candidates
        ]
        return element("EntityContainer", {"Name": ENTITY_CONTAINER_NAME}, entity_sets)

    def _report_fallback(self, prop: ModelProperty, rendered: str) -> None:
        site = _property_site(prop)
        logger.debug("No naming rule for type of %s; rendered as %s", site, rendered)
        self.diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.UNRENDERABLE_TYPE,
                message=f"Type has no naming rule; rendered as '{rendered}'",
                site=site,
                severity=DiagnosticSeverity.INFO,
            )
        )


def _property_site(prop: ModelProperty) -> str:
    model = prop.model
    if model is None:
        return prop.name
    owner = qualified_id(model) if model.name else "<anonymous>"
    return f"{owner}.{prop.name}"


def build_document(
    store: AnnotationStore,
    root: Namespace,
    excluded: Iterable[str] = DEFAULT_EXCLUDED_NAMESPACES,
) -> list[Element]:
    """Build the Schema elements for a namespace tree."""
    return SchemaBuilder(store).build_schemas(root, excluded)
