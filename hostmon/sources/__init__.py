from .diagnostics import (
    DiagnosticSource,
    UnixDiagnosticSource,
    UnsupportedDiagnosticSource,
    WindowsDiagnosticSource,
    select_diagnostic_source,
)
from .runner import run_tool

__all__ = [
    "DiagnosticSource",
    "UnixDiagnosticSource",
    "UnsupportedDiagnosticSource",
    "WindowsDiagnosticSource",
    "run_tool",
    "select_diagnostic_source",
]
