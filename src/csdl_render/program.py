"""The resolved program handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field

from csdl_render.annotations import AnnotationStore
from csdl_render.errors import Diagnostic, DiagnosticSeverity
from csdl_render.types import Namespace


@dataclass(eq=False)
class Program:
    """A type graph snapshot plus its annotations and declaration diagnostics."""

    global_namespace: Namespace = field(default_factory=Namespace)
    store: AnnotationStore = field(default_factory=AnnotationStore)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic against this program."""
        self.diagnostics.append(diagnostic)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR)
