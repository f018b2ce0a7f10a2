"""
DI Diagnostics - Observability and event tracking for containers.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

logger = logging.getLogger("kestrel.di.diagnostics")


class DIEventType(Enum):
    """Types of DI events."""
    REGISTRATION = "registration"
    INSTANTIATION = "instantiation"
    BINDING = "binding"
    POST_CONSTRUCT = "post_construct"
    RESOLUTION_START = "resolution_start"
    RESOLUTION_SUCCESS = "resolution_success"
    RESOLUTION_FAILURE = "resolution_failure"
    CYCLE_CHECK = "cycle_check"
    BOOTSTRAP_COMPLETE = "bootstrap_complete"


@dataclasses.dataclass
class DIEvent:
    """A diagnostic event in the DI system."""
    type: DIEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    token: Optional[str] = None
    qualifier: Optional[str] = None
    provider_name: Optional[str] = None
    duration: Optional[float] = None
    error: Optional[BaseException] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for DI diagnostic listeners."""
    def on_event(self, event: DIEvent) -> None:
        """Called when a DI event occurs."""
        ...


class LoggingDiagnosticListener:
    """Diagnostic listener that writes events to the ``kestrel.di.diagnostics`` logger."""

    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: DIEvent) -> None:
        if event.type == DIEventType.REGISTRATION:
            logger.log(
                self.log_level,
                "Registered %s (scope=%s, qualifier=%s)",
                event.token, event.metadata.get("scope"), event.qualifier,
            )
        elif event.type == DIEventType.INSTANTIATION:
            logger.log(self.log_level, "Constructed %s", event.token)
        elif event.type == DIEventType.BINDING:
            logger.log(
                self.log_level,
                "Bound %s -> %s",
                event.token, ", ".join(event.metadata.get("dependencies", ())) or "-",
            )
        elif event.type == DIEventType.POST_CONSTRUCT:
            logger.log(self.log_level, "Ran %s.%s()", event.token, event.provider_name)
        elif event.type == DIEventType.RESOLUTION_START:
            logger.log(self.log_level, "Resolving %s...", event.token or event.qualifier)
        elif event.type == DIEventType.RESOLUTION_SUCCESS:
            logger.log(
                self.log_level,
                "✓ Resolved %s in %.4fs",
                event.token or event.qualifier, event.duration or 0.0,
            )
        elif event.type == DIEventType.RESOLUTION_FAILURE:
            logger.error("✗ Failed to resolve %s: %s", event.token or event.qualifier, event.error)
        elif event.type == DIEventType.CYCLE_CHECK:
            logger.log(self.log_level, "Checking %s graph nodes for cycles", event.metadata.get("nodes"))
        elif event.type == DIEventType.BOOTSTRAP_COMPLETE:
            logger.info(
                "Container bootstrap complete: %s components, %s singletons",
                event.metadata.get("components"), event.metadata.get("singletons"),
            )


class DIDiagnostics:
    """Coordinator for DI diagnostic listeners."""

    def __init__(self, listeners: Optional[List[DiagnosticListener]] = None):
        self._listeners: List[DiagnosticListener] = list(listeners or [])

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def remove_listener(self, listener: DiagnosticListener) -> None:
        self._listeners.remove(listener)

    def emit(self, event_type: DIEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return

        event = DIEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception as e:
                logger.error("Diagnostic listener error: %s", e)

    def measure(self, event_type: DIEventType, **kwargs) -> "_DiagnosticMeasure":
        """Context manager to measure duration of an event."""
        return _DiagnosticMeasure(self, event_type, **kwargs)


class _DiagnosticMeasure:
    def __init__(self, diagnostics: DIDiagnostics, event_type: DIEventType, **kwargs):
        self.diagnostics = diagnostics
        self.event_type = event_type
        self.kwargs = kwargs
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time
        if exc_type:
            self.diagnostics.emit(
                DIEventType.RESOLUTION_FAILURE,
                duration=duration,
                error=exc_val,
                **self.kwargs
            )
        else:
            self.diagnostics.emit(
                self.event_type,
                duration=duration,
                **self.kwargs
            )
        return False
