"""
Diagnostic Logger

DESIGN DECISION: The engine degrades instead of raising, so every
degradation is logged. This provides:
1. Debugging capability when a balance looks wrong
2. A record of which accounts fell through to LAIN
3. Visibility into skipped transactions

The diagnostic logger:
- Is synchronous, like the engine it observes
- Gracefully handles failures (a broken sink never breaks a computation)
- Optionally keeps events in a sink so callers can inspect them
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

import structlog

from keutrack.config import get_settings
from keutrack.models.audit import DiagnosticEvent, DiagnosticSeverity


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog for the keutrack loggers.

    Explicit arguments win over settings. debug_mode forces DEBUG level and
    the console renderer unless overridden here.
    """
    app_settings = get_settings().app
    if app_settings.debug_mode:
        level = level or "DEBUG"
        json_output = False if json_output is None else json_output
    level = level or app_settings.log_level
    json_output = app_settings.log_json if json_output is None else json_output

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("keutrack").setLevel(level)


configure_logging()


def get_logger(name: str = "keutrack"):
    """Get a structlog logger under the keutrack namespace."""
    return structlog.get_logger(name)


class DiagnosticSinkInterface(ABC):
    """
    Abstract interface for keeping diagnostic events.

    Sinks are append-only.
    """

    @abstractmethod
    def append_event(self, event: DiagnosticEvent) -> bool:
        """
        Append a diagnostic event.

        Returns:
            True if stored successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[DiagnosticEvent]:
        """
        Get the most recent events.

        Returns:
            List of recent events (newest first)
        """
        pass


class InMemoryDiagnosticSink(DiagnosticSinkInterface):
    """Thread-safe in-memory sink, bounded to the most recent events."""

    def __init__(self, max_events: int = 1000):
        self._events: list[DiagnosticEvent] = []
        self._max_events = max_events
        self._lock = threading.Lock()

    def append_event(self, event: DiagnosticEvent) -> bool:
        with self._lock:
            self._events.append(event)
            if len(self._events) > self._max_events:
                del self._events[: len(self._events) - self._max_events]
        return True

    def get_recent_events(self, limit: int = 100) -> list[DiagnosticEvent]:
        with self._lock:
            return list(reversed(self._events))[:limit]

    @property
    def events(self) -> list[DiagnosticEvent]:
        """All retained events in chronological order."""
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


class DiagnosticLogger:
    """
    Central diagnostic logging service.

    Logs events both to:
    1. Structured local log
    2. An optional sink (for inspection by callers and tests)
    """

    def __init__(
        self,
        sink: Optional[DiagnosticSinkInterface] = None,
        logger_name: str = "keutrack",
    ):
        """
        Initialize diagnostic logger.

        Args:
            sink: Where to keep events. If None, only logs locally.
            logger_name: structlog logger name.
        """
        self._sink = sink
        self._logger = get_logger(logger_name)

    @property
    def sink(self) -> Optional[DiagnosticSinkInterface]:
        return self._sink

    def log(self, event: DiagnosticEvent) -> bool:
        """
        Log a diagnostic event.

        Always logs locally. Keeps the event in the sink if one is set.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == DiagnosticSeverity.ERROR:
                self._logger.error("diagnostic_event", **log_dict)
            elif event.severity == DiagnosticSeverity.WARNING:
                self._logger.warning("diagnostic_event", **log_dict)
            elif event.severity == DiagnosticSeverity.INFO:
                self._logger.info("diagnostic_event", **log_dict)
            else:
                self._logger.debug("diagnostic_event", **log_dict)
        except Exception:
            # Renderer or handler failure; fall back to plain stdlib logging
            logging.getLogger("keutrack").exception(
                "diagnostic_log_failed event_id=%s", event.event_id
            )

        if self._sink:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "diagnostic_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True
