"""Command-line interface for csdl-render."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from csdl_render.emitter import CsdlRenderer, RenderOptions
from csdl_render.errors import Diagnostic, DiagnosticSeverity, GraphLoadError, RenderResult
from csdl_render.flattener import DEFAULT_EXCLUDED_NAMESPACES
from csdl_render.identifiers import qualified_id
from csdl_render.loader import load_program, route_resolver
from csdl_render.program import Program
from csdl_render.types import TypeKind

console = Console()
error_console = Console(stderr=True)

SEVERITY_STYLES = {
    DiagnosticSeverity.ERROR: "red",
    DiagnosticSeverity.WARNING: "yellow",
    DiagnosticSeverity.INFO: "blue",
}


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@click.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to write csdl.xml into (prints to stdout when omitted).",
)
@click.option(
    "--exclude",
    "-x",
    "excluded",
    multiple=True,
    help="Namespace prefix to leave out, in addition to the defaults (repeatable).",
)
@click.option(
    "--no-default-excludes",
    is_flag=True,
    help=f"Render the built-in {', '.join(DEFAULT_EXCLUDED_NAMESPACES)} namespace(s) too.",
)
@click.option(
    "--entity-container",
    is_flag=True,
    help="Emit entity sets for routed interfaces.",
)
@click.option(
    "--policy",
    type=click.Choice(["strict", "permissive"], case_sensitive=False),
    default="permissive",
    help="Strict exits with status 1 when declarations were rejected.",
)
@click.option(
    "--diagnostics",
    "diagnostics_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Diagnostics output format.",
)
@click.option(
    "--show-annotations",
    is_flag=True,
    help="List annotated nodes and their bindings.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(
    input_path: Path,
    output_dir: Path | None,
    excluded: tuple[str, ...],
    no_default_excludes: bool,
    entity_container: bool,
    policy: str,
    diagnostics_format: str,
    show_annotations: bool,
    verbose: bool,
) -> None:
    """Render a resolved type graph to an OData CSDL document.

    INPUT is a JSON type graph description.
    """
    _configure_logging(verbose)

    try:
        program = load_program(input_path)
    except GraphLoadError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    options = RenderOptions(
        excluded_namespaces=(
            excluded if no_default_excludes else (*DEFAULT_EXCLUDED_NAMESPACES, *excluded)
        ),
        entity_container=entity_container,
    )
    renderer = CsdlRenderer(options, route_resolver=route_resolver(program.store))

    if output_dir is not None:
        result = renderer.emit(program, output_dir)
        error_console.print(f"[green]✓[/green] Wrote {result.output_path}")
    else:
        result = renderer.render(program)
        click.echo(result.text)

    if show_annotations:
        _output_annotations(program)

    if diagnostics_format == "json":
        _output_json(result)
    else:
        _output_text(result)

    strict = policy == "strict"
    sys.exit(1 if strict and not result.is_clean else 0)


def describe_node(node: object) -> str:
    """Get a readable label for an annotated node."""
    kind = getattr(node, "kind", None)
    if kind == TypeKind.MODEL_PROPERTY:
        owner = node.model
        if owner is not None and owner.name:
            return f"{qualified_id(owner)}.{node.name}"
        return node.name
    return qualified_id(node)


def _output_annotations(program: Program) -> None:
    """Output annotation bindings as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Node")
    table.add_column("Kind", style="dim", width=14)
    table.add_column("Annotation")
    table.add_column("Value")

    for node in program.store.annotated_nodes():
        for kind, value in program.store.annotations_for(node):
            table.add_row(describe_node(node), node.kind.value, kind.name, repr(value))

    error_console.print(table)


def _output_text(result: RenderResult) -> None:
    """Output diagnostics as formatted text."""
    if not result.diagnostics:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="dim", width=26)
    table.add_column("Severity", width=8)
    table.add_column("Site", width=30)
    table.add_column("Message")

    for diagnostic in result.diagnostics:
        style = SEVERITY_STYLES.get(diagnostic.severity, "white")
        table.add_row(
            diagnostic.code.value,
            f"[{style}]{diagnostic.severity.value}[/{style}]",
            diagnostic.site,
            diagnostic.message,
        )

    error_console.print(table)
    error_console.print(
        f"[bold]Summary:[/bold] {result.error_count} error(s), "
        f"{result.warning_count} warning(s)"
    )


def _diagnostic_json(diagnostic: Diagnostic) -> dict[str, str]:
    return {
        "code": diagnostic.code.value,
        "severity": diagnostic.severity.value,
        "site": diagnostic.site,
        "message": diagnostic.message,
    }


def _output_json(result: RenderResult) -> None:
    """Output diagnostics as JSON."""
    output = {
        "output": result.output_path,
        "error_count": result.error_count,
        "warning_count": result.warning_count,
        "diagnostics": [_diagnostic_json(d) for d in result.diagnostics],
    }
    error_console.print_json(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
