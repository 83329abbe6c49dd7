"""Declaration context for applying annotations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from csdl_render.errors import Diagnostic, DiagnosticCode, DiagnosticSeverity

if TYPE_CHECKING:
    from csdl_render.annotations import AnnotationStore
    from csdl_render.program import Program

logger = logging.getLogger(__name__)


@dataclass
class DeclarationContext:
    """Context for one declaration being applied to the type graph.

    Tracks:
    - The program whose annotation store receives bindings
    - The declaration site used to attribute diagnostics
    """

    program: Program
    site: str = ""

    @property
    def store(self) -> AnnotationStore:
        return self.program.store

    def at(self, site: str) -> DeclarationContext:
        """Get a context for another declaration site of the same program."""
        return DeclarationContext(program=self.program, site=site)

    def add_diagnostic(
        self,
        code: DiagnosticCode,
        message: str,
        severity: DiagnosticSeverity = DiagnosticSeverity.ERROR,
    ) -> None:
        """Report a diagnostic at the current declaration site."""
        logger.warning("%s: %s", self.site or "<unknown>", message)
        self.program.report(
            Diagnostic(code=code, message=message, site=self.site, severity=severity)
        )
