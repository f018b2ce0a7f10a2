"""
Lifecycle management for component instances.
"""

from typing import Any, List, Optional
from dataclasses import dataclass
import logging

from .catalog import ComponentDefinition
from .errors import LifecycleError

logger = logging.getLogger("kestrel.di.lifecycle")


@dataclass
class LifecycleHook:
    """
    A post-construct hook bound to one instance.

    Hooks run in declaration order, base classes first.
    """

    name: str
    owner: str
    callback: Any

    def __call__(self) -> None:
        self.callback()


class LifecycleManager:
    """
    Fires post-construct hooks once per construction event.

    Failures are not retried: the first failing hook aborts the enclosing
    construction with LifecycleError.
    """

    __slots__ = ("_diagnostics",)

    def __init__(self, diagnostics: Optional[Any] = None):
        self._diagnostics = diagnostics

    def hooks_for(self, definition: ComponentDefinition, instance: Any) -> List[LifecycleHook]:
        """Bind the definition's hook names to ``instance``."""
        return [
            LifecycleHook(name=name, owner=definition.token, callback=getattr(instance, name))
            for name in definition.hooks
        ]

    def fire(self, definition: ComponentDefinition, instance: Any) -> None:
        """
        Run every post-construct hook of ``instance``.

        Raises:
            LifecycleError: If a hook raises
        """
        for hook in self.hooks_for(definition, instance):
            try:
                hook()
            except Exception as exc:
                logger.error("Post-construct hook %s.%s failed: %s", hook.owner, hook.name, exc)
                raise LifecycleError(hook.owner, hook.name, exc) from exc

            if self._diagnostics is not None:
                from .diagnostics import DIEventType
                self._diagnostics.emit(
                    DIEventType.POST_CONSTRUCT,
                    token=definition.token,
                    provider_name=hook.name,
                )
