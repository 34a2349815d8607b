"""Emission errors and colored diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points at a declaration, e.g. ``shapes::Circle``."""

    location: str
    message: str = ""


@dataclass
class Diagnostic:
    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics as ``error[E100]: ...`` blocks."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        color = _COLORS[diag.severity]

        lines.append(
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {label.location}")
            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


# ── Exceptions ─────────────────────────────────────────────────


class EmitError(Exception):
    """Aborts generation of the current module."""

    code = "E000"
    note: str | None = None

    def __init__(self, message: str, location: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.location = location

    def to_diagnostic(self) -> Diagnostic:
        diag = Diagnostic(Severity.ERROR, self.code, self.message)
        if self.location:
            diag.labels.append(DiagnosticLabel(self.location))
        if self.note:
            diag.notes.append(self.note)
        return diag


class UnsupportedNumericWidth(EmitError):
    code = "E100"
    note = "64-bit integers lose precision as JSON numbers; use a narrower type or a string"

    def __init__(self, kind: str, location: str | None = None) -> None:
        super().__init__(f"64-bit type `{kind}` cannot be emitted", location)
        self.kind = kind


class GenericKeyForbidden(EmitError):
    code = "E101"
    note = "map keys must be concrete types"

    def __init__(self, param: str, location: str | None = None) -> None:
        super().__init__(
            f"map key is the open generic parameter `{param}`", location,
        )
        self.param = param


class IOFailure(EmitError):
    code = "E102"

    def __init__(self, reason: str, location: str | None = None) -> None:
        super().__init__(f"output stream rejected write: {reason}", location)


class InvalidIdentifier(EmitError):
    code = "E103"
    note = "rename the member so it maps to a distinct, valid name"


class IRLoadError(EmitError):
    code = "E200"
