"""Load a resolved program from a JSON type graph description.

The description mirrors what a checker hands to the renderer::

    {
      "namespaces": [
        {
          "name": "Zoo",
          "enums": [{"name": "Kind", "members": [{"name": "Dog", "value": "dog"}]}],
          "models": [
            {
              "name": "Pet",
              "baseModel": "Animal",
              "decorators": ["openModel"],
              "properties": [
                {"name": "name", "type": "string", "decorators": [{"name": "id"}]},
                {"name": "toys", "type": "Toy[]", "decorators": ["contains"]}
              ]
            }
          ],
          "interfaces": [
            {"name": "Pets", "route": "/zoo/pets",
             "operations": [{"name": "Get", "returnType": "Pet"}]}
          ]
        }
      ]
    }

Type references are resolved after every declaration is known, so forward
and cyclic references by name are allowed. Decorators are applied last,
through the same declaration surface an external checker would use.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from csdl_render.annotations import declare_kind
from csdl_render.classifier import EDM_TYPE_NAMES
from csdl_render.context import DeclarationContext
from csdl_render.decorators import apply_decorator
from csdl_render.errors import GraphLoadError
from csdl_render.identifiers import namespace_string
from csdl_render.program import Program
from csdl_render.types import (
    ArrayType,
    BooleanLiteral,
    EnumType,
    Interface,
    IntrinsicType,
    Model,
    Namespace,
    NumberLiteral,
    Operation,
    StringLiteral,
    TemplateParameter,
    TypeKind,
    UnionType,
)

if TYPE_CHECKING:
    from csdl_render.annotations import AnnotationStore
    from csdl_render.document import RouteResolver
    from csdl_render.types import Type

logger = logging.getLogger(__name__)

INTRINSIC_NAMESPACE = "Cadl"

# Built-in scalar models declared in the intrinsic namespace
INTRINSIC_MODELS: tuple[str, ...] = (
    *EDM_TYPE_NAMES,
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "safeint",
    "numeric",
    "integer",
    "float",
)

# Built-in opaque kinds
INTRINSIC_KINDS: tuple[str, ...] = ("void", "null", "unknown", "never")

ROUTE = declare_kind(
    "csdl_render.route",
    {TypeKind.INTERFACE},
    value_check=lambda value: isinstance(value, str),
    value_description="a string",
)


def route_resolver(store: AnnotationStore) -> RouteResolver:
    """Get a resolver reading interface routes recorded by the loader."""

    def resolve(interface: Interface) -> str | None:
        return store.get(ROUTE, interface)

    return resolve


class GraphLoader:
    """Builds a :class:`Program` from a parsed JSON description."""

    def __init__(self, source: str = "<memory>"):
        self._source = source
        self._program = Program()
        self._types: dict[str, Any] = {}
        self._intrinsics: dict[str, Model] = {}
        self._resolutions: list[Callable[[], None]] = []
        self._declarations: list[tuple[str, Any, list[Any]]] = []

    def load(self, data: Any) -> Program:
        """Load a program description.

        Raises:
            GraphLoadError: If the description is malformed or references an
                unknown type.
        """
        if not isinstance(data, dict):
            raise GraphLoadError("Type graph description must be a JSON object", self._source)

        root = self._program.global_namespace
        self._declare_intrinsics(root)
        for ns_data in self._list(data, "namespaces", "<root>"):
            self._declare_namespace(root, ns_data)

        for resolve in self._resolutions:
            resolve()

        context = DeclarationContext(self._program)
        for site, target, decorators in self._declarations:
            for decorator in decorators:
                name, args = self._decorator_call(decorator, site)
                apply_decorator(context.at(site), name, target, *args)

        logger.debug(
            "Loaded %d declared types and %d annotation(s) from %s",
            len(self._types),
            len(self._program.store),
            self._source,
        )
        return self._program

    # Declarations

    def _declare_intrinsics(self, root: Namespace) -> None:
        intrinsic_ns = root.child(INTRINSIC_NAMESPACE)
        for name in INTRINSIC_MODELS:
            self._intrinsics[name] = intrinsic_ns.add(Model(name=name))

    def _declare_namespace(self, parent: Namespace, data: Any) -> None:
        name = self._require(data, "name", namespace_string(parent) or "<root>")
        namespace = parent.child(name)
        site = namespace_string(namespace)

        for enum_data in self._list(data, "enums", site):
            self._declare_enum(namespace, enum_data)
        for model_data in self._list(data, "models", site):
            self._declare_model(namespace, model_data)
        for union_data in self._list(data, "unions", site):
            self._declare_union(namespace, union_data)
        for interface_data in self._list(data, "interfaces", site):
            self._declare_interface(namespace, interface_data)
        for operation_data in self._list(data, "operations", site):
            operation = self._declare_operation(namespace, operation_data, site)
            namespace.add(operation)
            self._register(operation)
        for child_data in self._list(data, "namespaces", site):
            self._declare_namespace(namespace, child_data)

    def _declare_enum(self, namespace: Namespace, data: Any) -> None:
        enum = EnumType(name=self._require(data, "name", namespace_string(namespace)))
        namespace.add(enum)
        site = self._register(enum)
        for member_data in self._list(data, "members", site):
            value = member_data.get("value") if isinstance(member_data, dict) else None
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, (str, int, float))
            ):
                raise GraphLoadError(
                    f"Enum member value must be a string or number in {site}", self._source
                )
            enum.add_member(self._require(member_data, "name", site), value)

    def _declare_model(self, namespace: Namespace, data: Any) -> None:
        model = Model(name=self._require(data, "name", namespace_string(namespace)))
        namespace.add(model)
        site = self._register(model)
        self._declarations.append((site, model, self._list(data, "decorators", site)))

        base_ref = data.get("baseModel")
        if base_ref is not None:

            def resolve_base() -> None:
                base = self._resolve(base_ref, namespace, site)
                if base.kind != TypeKind.MODEL:
                    raise GraphLoadError(
                        f"Base of {site} must be a model, got {base.kind.value}", self._source
                    )
                model.base_model = base

            self._resolutions.append(resolve_base)

        self._declare_properties(model, namespace, self._list(data, "properties", site), site)

    def _declare_properties(
        self, model: Model, namespace: Namespace, items: list[Any], site: str
    ) -> None:
        for prop_data in items:
            name = self._require(prop_data, "name", site)
            type_ref = self._require(prop_data, "type", f"{site}.{name}")
            prop = model.add_property(
                name, IntrinsicType("unknown"), optional=bool(prop_data.get("optional", False))
            )
            prop_site = f"{site}.{name}"
            self._declarations.append(
                (prop_site, prop, self._list(prop_data, "decorators", prop_site))
            )

            def resolve_type(prop=prop, type_ref=type_ref, prop_site=prop_site) -> None:
                prop.type = self._resolve(type_ref, namespace, prop_site)

            self._resolutions.append(resolve_type)

    def _declare_union(self, namespace: Namespace, data: Any) -> None:
        union = UnionType(name=self._require(data, "name", namespace_string(namespace)))
        namespace.add(union)
        site = self._register(union)
        option_refs = self._list(data, "options", site)

        def resolve_options() -> None:
            union.options = [self._resolve(ref, namespace, site) for ref in option_refs]

        self._resolutions.append(resolve_options)

    def _declare_interface(self, namespace: Namespace, data: Any) -> None:
        interface = Interface(name=self._require(data, "name", namespace_string(namespace)))
        namespace.add(interface)
        site = self._register(interface)
        for operation_data in self._list(data, "operations", site):
            interface.add_operation(self._declare_operation(namespace, operation_data, site))

        route = data.get("route")
        if route is not None:
            if not isinstance(route, str):
                raise GraphLoadError(f"Route of {site} must be a string", self._source)
            self._program.store.set(ROUTE, interface, route)

    def _declare_operation(self, namespace: Namespace, data: Any, owner_site: str) -> Operation:
        name = self._require(data, "name", owner_site)
        site = f"{owner_site}.{name}"
        operation = Operation(name=name)
        self._declare_properties(
            operation.parameters, namespace, self._list(data, "parameters", site), site
        )

        return_ref = data.get("returnType", "void")

        def resolve_return() -> None:
            operation.return_type = self._resolve(return_ref, namespace, site)

        self._resolutions.append(resolve_return)
        return operation

    def _register(self, member: Any) -> str:
        site = f"{namespace_string(member.namespace)}.{member.name}"
        self._types[site] = member
        return site

    # Type references

    def _resolve(self, ref: Any, namespace: Namespace, site: str) -> Type:
        if isinstance(ref, dict):
            return self._resolve_object(ref, namespace, site)
        if not isinstance(ref, str) or not ref:
            raise GraphLoadError(f"Invalid type reference {ref!r} in {site}", self._source)

        if ref.endswith("[]"):
            return ArrayType(element_type=self._resolve(ref[:-2], namespace, site))
        if ref in INTRINSIC_KINDS:
            return IntrinsicType(name=ref)
        if ref in self._intrinsics:
            return self._intrinsics[ref]

        # Relative to the referencing namespace and its ancestors, then absolute
        scope: Namespace | None = namespace
        while scope is not None:
            prefix = namespace_string(scope)
            found = self._types.get(f"{prefix}.{ref}" if prefix else ref)
            if found is not None:
                return found
            scope = scope.namespace
        raise GraphLoadError(f"Unknown type '{ref}' referenced from {site}", self._source)

    def _resolve_object(self, ref: dict[str, Any], namespace: Namespace, site: str) -> Type:
        kind = ref.get("kind")
        if kind == "Array":
            return ArrayType(element_type=self._resolve(ref.get("elementType"), namespace, site))
        if kind == "Union":
            options = ref.get("options")
            if not isinstance(options, list):
                raise GraphLoadError(f"Union options must be a list in {site}", self._source)
            return UnionType(options=[self._resolve(o, namespace, site) for o in options])
        if kind == "TemplateParameter":
            return TemplateParameter(name=self._require(ref, "name", site))
        if kind == "String" and isinstance(ref.get("value"), str):
            return StringLiteral(value=ref["value"])
        if kind == "Boolean" and isinstance(ref.get("value"), bool):
            return BooleanLiteral(value=ref["value"])
        if (
            kind == "Number"
            and isinstance(ref.get("value"), (int, float))
            and not isinstance(ref.get("value"), bool)
        ):
            return NumberLiteral(value=ref["value"])
        if kind == "Intrinsic":
            return IntrinsicType(name=self._require(ref, "name", site))
        raise GraphLoadError(f"Invalid type reference {ref!r} in {site}", self._source)

    # Helpers

    def _decorator_call(self, decorator: Any, site: str) -> tuple[str, list[Any]]:
        if isinstance(decorator, str):
            return decorator, []
        if isinstance(decorator, dict) and isinstance(decorator.get("name"), str):
            args = decorator.get("args", [])
            if not isinstance(args, list):
                raise GraphLoadError(f"Decorator args must be a list in {site}", self._source)
            return decorator["name"], args
        raise GraphLoadError(f"Invalid decorator {decorator!r} in {site}", self._source)

    def _require(self, data: Any, key: str, site: str) -> Any:
        if not isinstance(data, dict) or key not in data:
            raise GraphLoadError(f"Missing '{key}' in {site}", self._source)
        return data[key]

    def _list(self, data: dict[str, Any], key: str, site: str) -> list[Any]:
        value = data.get(key, [])
        if not isinstance(value, list):
            raise GraphLoadError(f"'{key}' must be a list in {site}", self._source)
        return value


def load_program_data(data: Any, source: str = "<memory>") -> Program:
    """Build a program from an already parsed description."""
    return GraphLoader(source).load(data)


def load_program(path: str | Path) -> Program:
    """Read and build a program from a JSON file.

    Raises:
        GraphLoadError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise GraphLoadError(f"File not found: {path}", str(path)) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise GraphLoadError(f"Cannot read {path}: {exc}", str(path)) from exc
    except json.JSONDecodeError as exc:
        raise GraphLoadError(f"Invalid JSON in {path}: {exc}", str(path)) from exc
    return load_program_data(data, str(path))
