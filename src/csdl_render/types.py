"""Resolved type graph consumed by the renderer.

The graph is produced by an upstream checker (or by :mod:`csdl_render.loader`)
and is treated as read-only once rendering starts. Every node compares and
hashes by identity, so structurally identical nodes stay distinct when used as
annotation keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union


class TypeKind(Enum):
    """Variant tags of the type graph."""

    NAMESPACE = "Namespace"
    MODEL = "Model"
    MODEL_PROPERTY = "ModelProperty"
    ENUM = "Enum"
    ENUM_MEMBER = "EnumMember"
    INTERFACE = "Interface"
    OPERATION = "Operation"
    UNION = "Union"
    ARRAY = "Array"
    TEMPLATE_PARAMETER = "TemplateParameter"
    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    INTRINSIC = "Intrinsic"


@dataclass(eq=False)
class Namespace:
    """A namespace and its directly declared members."""

    kind: ClassVar[TypeKind] = TypeKind.NAMESPACE

    name: str = ""
    namespace: Namespace | None = None  # Enclosing namespace, None for the root
    namespaces: dict[str, Namespace] = field(default_factory=dict)
    models: dict[str, Model] = field(default_factory=dict)
    enums: dict[str, EnumType] = field(default_factory=dict)
    interfaces: dict[str, Interface] = field(default_factory=dict)
    operations: dict[str, Operation] = field(default_factory=dict)
    unions: dict[str, UnionType] = field(default_factory=dict)

    def add(self, member: NamespaceMember) -> NamespaceMember:
        """Attach a member to this namespace and return it.

        The member's ``namespace`` back-reference is set to this namespace.
        Adding a second member of the same kind and name replaces the first.
        """
        collections: dict[TypeKind, dict] = {
            TypeKind.NAMESPACE: self.namespaces,
            TypeKind.MODEL: self.models,
            TypeKind.ENUM: self.enums,
            TypeKind.INTERFACE: self.interfaces,
            TypeKind.OPERATION: self.operations,
            TypeKind.UNION: self.unions,
        }
        if member.kind not in collections:
            raise TypeError(f"{member.kind.value} cannot be declared in a namespace")
        if not member.name:
            raise ValueError(f"Namespace members must be named ({member.kind.value})")

        member.namespace = self
        collections[member.kind][member.name] = member
        return member

    def child(self, name: str) -> Namespace:
        """Get or create a child namespace."""
        existing = self.namespaces.get(name)
        if existing is not None:
            return existing
        return self.add(Namespace(name=name))


@dataclass(eq=False)
class Model:
    """A model; anonymous models (empty name) are rendered inline."""

    kind: ClassVar[TypeKind] = TypeKind.MODEL

    name: str = ""
    properties: dict[str, ModelProperty] = field(default_factory=dict)
    base_model: Model | None = None
    namespace: Namespace | None = None

    def add_property(self, name: str, type: Type, optional: bool = False) -> ModelProperty:
        """Declare a property owned by this model."""
        prop = ModelProperty(name=name, type=type, optional=optional, model=self)
        self.properties[name] = prop
        return prop


@dataclass(eq=False)
class ModelProperty:
    """A property owned by exactly one model."""

    kind: ClassVar[TypeKind] = TypeKind.MODEL_PROPERTY

    name: str
    type: Type
    optional: bool = False
    model: Model | None = None


@dataclass(eq=False)
class EnumType:
    """An enum with ordered members."""

    kind: ClassVar[TypeKind] = TypeKind.ENUM

    name: str
    members: list[EnumMember] = field(default_factory=list)
    namespace: Namespace | None = None

    def add_member(self, name: str, value: str | int | float | None = None) -> EnumMember:
        member = EnumMember(name=name, value=value, enum=self)
        self.members.append(member)
        return member


@dataclass(eq=False)
class EnumMember:
    kind: ClassVar[TypeKind] = TypeKind.ENUM_MEMBER

    name: str
    value: str | int | float | None = None
    enum: EnumType | None = None


@dataclass(eq=False)
class Interface:
    """A named group of operations."""

    kind: ClassVar[TypeKind] = TypeKind.INTERFACE

    name: str
    operations: dict[str, Operation] = field(default_factory=dict)
    namespace: Namespace | None = None

    def add_operation(self, operation: Operation) -> Operation:
        operation.interface = self
        operation.namespace = self.namespace
        self.operations[operation.name] = operation
        return operation


@dataclass(eq=False)
class Operation:
    """An operation with a parameter bag and a return type."""

    kind: ClassVar[TypeKind] = TypeKind.OPERATION

    name: str
    parameters: Model = field(default_factory=Model)
    return_type: Type | None = None
    namespace: Namespace | None = None
    interface: Interface | None = None


@dataclass(eq=False)
class UnionType:
    kind: ClassVar[TypeKind] = TypeKind.UNION

    name: str | None = None
    options: list[Type] = field(default_factory=list)
    namespace: Namespace | None = None


@dataclass(eq=False)
class ArrayType:
    kind: ClassVar[TypeKind] = TypeKind.ARRAY

    element_type: Type


@dataclass(eq=False)
class TemplateParameter:
    kind: ClassVar[TypeKind] = TypeKind.TEMPLATE_PARAMETER

    name: str


@dataclass(eq=False)
class StringLiteral:
    kind: ClassVar[TypeKind] = TypeKind.STRING

    value: str


@dataclass(eq=False)
class NumberLiteral:
    kind: ClassVar[TypeKind] = TypeKind.NUMBER

    value: int | float


@dataclass(eq=False)
class BooleanLiteral:
    kind: ClassVar[TypeKind] = TypeKind.BOOLEAN

    value: bool


@dataclass(eq=False)
class IntrinsicType:
    """Opaque built-in kinds such as ``void`` or ``unknown``."""

    kind: ClassVar[TypeKind] = TypeKind.INTRINSIC

    name: str


NamespaceMember = Union[Namespace, Model, EnumType, Interface, Operation, UnionType]

Type = Union[
    Namespace,
    Model,
    ModelProperty,
    EnumType,
    EnumMember,
    Interface,
    Operation,
    UnionType,
    ArrayType,
    TemplateParameter,
    StringLiteral,
    NumberLiteral,
    BooleanLiteral,
    IntrinsicType,
]

LiteralType = Union[StringLiteral, NumberLiteral, BooleanLiteral]


def literal_text(value: str | int | float | bool) -> str:
    """Format a literal value the way it appears in schema text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
