"""
Testing utilities for the DI system.
"""

from typing import Any, List, Mapping, Optional, Tuple, Union

from ..config import ConfigSource
from .catalog import TypeCatalog
from .core import Container
from .diagnostics import DIDiagnostics, DIEvent, DIEventType


class RecordingListener:
    """
    Diagnostic listener for testing.

    Keeps every event for assertions.
    """

    def __init__(self):
        self.events: List[DIEvent] = []

    def on_event(self, event: DIEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: DIEventType) -> List[DIEvent]:
        return [e for e in self.events if e.type == event_type]

    def tokens(self, event_type: DIEventType) -> List[Optional[str]]:
        return [e.token for e in self.of_type(event_type)]

    def reset(self) -> None:
        """Reset tracking."""
        self.events.clear()


def build_container(
    *classes: type,
    config: Union[ConfigSource, Mapping[str, Any], None] = None,
    diagnostics: Optional[DIDiagnostics] = None,
) -> Container:
    """
    Catalog ``classes`` in order and bootstrap a container from them.

    Args:
        classes: Component classes (decorated or not)
        config: A ConfigSource or a plain mapping
        diagnostics: Optional diagnostics coordinator

    Returns:
        Bootstrapped container
    """
    if config is not None and not isinstance(config, ConfigSource):
        config = ConfigSource.from_mapping(config)

    return Container.create(
        TypeCatalog.from_classes(*classes),
        config,
        diagnostics=diagnostics,
    )


def recording_diagnostics() -> Tuple[DIDiagnostics, RecordingListener]:
    """Diagnostics coordinator wired to a fresh RecordingListener."""
    listener = RecordingListener()
    diagnostics = DIDiagnostics()
    diagnostics.add_listener(listener)
    return diagnostics, listener


__all__ = [
    "RecordingListener",
    "build_container",
    "recording_diagnostics",
]
