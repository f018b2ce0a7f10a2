"""
Instantiator - constructs component instances.
"""

from typing import Any, Dict, List
import logging

from .catalog import ComponentDefinition
from .core import ResolveCtx
from .errors import DIError, InstantiationError

logger = logging.getLogger("kestrel.di.instantiator")


class Instantiator:
    """
    Creates a new instance of a component.

    Uses the component's @constructor when it has one, resolving every
    parameter through the registry; otherwise calls the class with no
    arguments.
    """

    __slots__ = ("_registry", "_diagnostics")

    def __init__(self, registry: Any, diagnostics: Any):
        self._registry = registry
        self._diagnostics = diagnostics

    def instantiate(self, definition: ComponentDefinition, ctx: ResolveCtx) -> Any:
        """
        Construct one instance of ``definition``.

        The caller must already have pushed the identity onto ``ctx``; a
        parameter that leads back to it raises CircularDependencyError.

        Raises:
            UnresolvedDependencyError: If a parameter has no candidate
            InstantiationError: If the constructor itself raises
        """
        plan = definition.constructor
        kwargs: Dict[str, Any] = {}
        dependencies: List[type] = []

        if plan is not None:
            for point in plan.parameters:
                target, instance = self._registry.resolve_dependency(definition, point, ctx)
                kwargs[point.name] = instance
                dependencies.append(target)

            if dependencies:
                self._registry.record_dependencies(definition.identity, dependencies)

        cls = definition.identity
        factory = getattr(cls, plan.name) if plan is not None and plan.is_factory else cls

        try:
            instance = factory(**kwargs)
        except DIError:
            raise
        except Exception as exc:
            raise InstantiationError(definition.token, exc) from exc

        from .diagnostics import DIEventType
        self._diagnostics.emit(
            DIEventType.INSTANTIATION,
            token=definition.token,
            provider_name=definition.descriptor.name,
            metadata={
                "scope": definition.scope.value,
                "constructor": plan.name if plan else None,
                "trace": ctx.get_trace(),
            },
        )
        return instance
