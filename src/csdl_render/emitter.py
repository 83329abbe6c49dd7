"""Main entry point: render a program to a CSDL document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from csdl_render.document import SchemaBuilder
from csdl_render.errors import RenderResult
from csdl_render.flattener import DEFAULT_EXCLUDED_NAMESPACES
from csdl_render.serializer import DEFAULT_INDENT, DEFAULT_NEWLINE, serialize

if TYPE_CHECKING:
    from csdl_render.document import RouteResolver
    from csdl_render.program import Program

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILENAME = "csdl.xml"


@dataclass(frozen=True)
class RenderOptions:
    """Configuration for one render."""

    excluded_namespaces: tuple[str, ...] = DEFAULT_EXCLUDED_NAMESPACES
    indent: str = DEFAULT_INDENT
    newline: str = DEFAULT_NEWLINE
    output_filename: str = DEFAULT_OUTPUT_FILENAME
    entity_container: bool = False


class CsdlRenderer:
    """Renderer from a program snapshot to CSDL text.

    Rendering never mutates the program or its annotation store, so the same
    renderer can be used for any number of programs.

    Example:
        renderer = CsdlRenderer()
        result = renderer.render(program)
        print(result.text)
    """

    def __init__(
        self,
        options: RenderOptions | None = None,
        route_resolver: RouteResolver | None = None,
    ):
        """Initialize the renderer.

        Args:
            options: Render configuration; defaults apply when omitted.
            route_resolver: Maps an interface to its route path. Only used
                when ``options.entity_container`` is set.
        """
        self._options = options or RenderOptions()
        self._route_resolver = route_resolver

    @property
    def options(self) -> RenderOptions:
        return self._options

    def render(self, program: Program) -> RenderResult:
        """Render a program.

        Returns:
            RenderResult holding the document text plus the program's
            declaration diagnostics and any produced while rendering.
        """
        builder = SchemaBuilder(
            store=program.store,
            route_resolver=self._route_resolver,
            entity_container=self._options.entity_container,
        )
        schemas = builder.build_schemas(
            program.global_namespace, self._options.excluded_namespaces
        )
        logger.debug("Built %d schema(s)", len(schemas))

        text = serialize(schemas, indent=self._options.indent, newline=self._options.newline)
        return RenderResult(
            text=text,
            diagnostics=[*program.diagnostics, *builder.diagnostics],
        )

    def emit(self, program: Program, output_dir: str | Path) -> RenderResult:
        """Render a program and write it under ``output_dir``."""
        result = self.render(program)
        output_path = Path(output_dir) / self._options.output_filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(result.text.encode("utf-8"))
        logger.info("Wrote %s", output_path)
        result.output_path = str(output_path)
        return result


def render_csdl(program: Program, options: RenderOptions | None = None) -> str:
    """Render a program and return the document text."""
    return CsdlRenderer(options).render(program).text


def emit_csdl(
    program: Program,
    output_dir: str | Path,
    options: RenderOptions | None = None,
    route_resolver: RouteResolver | None = None,
) -> RenderResult:
    """Render a program to ``<output_dir>/csdl.xml``.

    Example:
        result = emit_csdl(program, "out")
        for diagnostic in result.diagnostics:
            print(diagnostic)
    """
    return CsdlRenderer(options, route_resolver).emit(program, output_dir)
