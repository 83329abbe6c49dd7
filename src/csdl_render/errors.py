"""Diagnostic types and render results."""

from dataclasses import dataclass, field
from enum import Enum


class DiagnosticCode(Enum):
    """Kinds of problems reported while declaring or rendering."""

    INVALID_ANNOTATION_TARGET = "invalid-annotation-target"
    INVALID_ANNOTATION_VALUE = "invalid-annotation-value"
    UNKNOWN_DECORATOR = "unknown-decorator"
    UNRENDERABLE_TYPE = "unrenderable-type"


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = "error"  # Declaration was rejected
    WARNING = "warning"  # Output may be degraded
    INFO = "info"  # Informational


@dataclass
class Diagnostic:
    """A problem attributed to a declaration site."""

    code: DiagnosticCode
    message: str
    site: str = ""  # e.g., "Zoo.Pet.name"
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR

    def __str__(self) -> str:
        if self.site:
            return f"[{self.code.value}] {self.site}: {self.message}"
        return f"[{self.code.value}] {self.message}"


@dataclass
class RenderResult:
    """Result of rendering a program."""

    text: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    output_path: str = ""

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.severity == DiagnosticSeverity.WARNING)

    @property
    def is_clean(self) -> bool:
        return self.error_count == 0


class GraphLoadError(Exception):
    """Exception raised when a type graph description cannot be loaded."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source
