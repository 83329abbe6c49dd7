"""csdl-render - render resolved type graphs as OData CSDL documents.

Example:
    from csdl_render import DeclarationContext, Program, apply_decorator, render_csdl
    from csdl_render.types import Model

    program = Program()
    string = program.global_namespace.child("Cadl").add(Model(name="string"))
    pet = program.global_namespace.child("Zoo").add(Model(name="Pet"))
    name = pet.add_property("name", string)

    apply_decorator(DeclarationContext(program, "Zoo.Pet.name"), "id", name)
    print(render_csdl(program))

    # From a JSON type graph description, written to <out>/csdl.xml
    from csdl_render import emit_csdl, load_program

    result = emit_csdl(load_program("graph.json"), "out")
    for diagnostic in result.diagnostics:
        print(diagnostic)
"""

from csdl_render.annotations import (
    AnnotationError,
    AnnotationKind,
    AnnotationStore,
    InvalidAnnotationTarget,
    InvalidAnnotationValue,
    declare_kind,
)
from csdl_render.classifier import (
    ModelClass,
    PropertyClass,
    PropertyClassification,
    classify_model,
    classify_property,
    is_open,
    scalar_type_name,
)
from csdl_render.context import DeclarationContext
from csdl_render.decorators import (
    CONTAINS,
    KEY,
    OPEN_TYPE,
    REFERENCES,
    apply_contains,
    apply_decorator,
    apply_id,
    apply_open_model,
    apply_references,
)
from csdl_render.document import Element, SchemaBuilder, build_document
from csdl_render.emitter import CsdlRenderer, RenderOptions, emit_csdl, render_csdl
from csdl_render.errors import (
    Diagnostic,
    DiagnosticCode,
    DiagnosticSeverity,
    GraphLoadError,
    RenderResult,
)
from csdl_render.flattener import flatten_namespaces
from csdl_render.identifiers import qualified_id
from csdl_render.loader import load_program, load_program_data
from csdl_render.program import Program
from csdl_render.serializer import format_xml, serialize

__version__ = "0.1.0"

__all__ = [
    # Main API
    "CsdlRenderer",
    "RenderOptions",
    "render_csdl",
    "emit_csdl",
    "Program",
    "load_program",
    "load_program_data",
    # Results and diagnostics
    "RenderResult",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticSeverity",
    "GraphLoadError",
    # Annotations
    "AnnotationStore",
    "AnnotationKind",
    "AnnotationError",
    "InvalidAnnotationTarget",
    "InvalidAnnotationValue",
    "declare_kind",
    "DeclarationContext",
    "KEY",
    "OPEN_TYPE",
    "CONTAINS",
    "REFERENCES",
    "apply_decorator",
    "apply_id",
    "apply_open_model",
    "apply_contains",
    "apply_references",
    # Classification and identifiers
    "ModelClass",
    "PropertyClass",
    "PropertyClassification",
    "classify_model",
    "classify_property",
    "is_open",
    "scalar_type_name",
    "qualified_id",
    "flatten_namespaces",
    # Document tree and serialization
    "Element",
    "SchemaBuilder",
    "build_document",
    "serialize",
    "format_xml",
]
