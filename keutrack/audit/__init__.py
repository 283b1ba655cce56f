"""Diagnostic logging package."""

from keutrack.audit.logger import (
    DiagnosticLogger,
    DiagnosticSinkInterface,
    InMemoryDiagnosticSink,
    configure_logging,
    get_logger,
)

__all__ = [
    "DiagnosticLogger",
    "DiagnosticSinkInterface",
    "InMemoryDiagnosticSink",
    "configure_logging",
    "get_logger",
]
