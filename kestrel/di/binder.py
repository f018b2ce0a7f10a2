"""
Binder - member dependency binding and scalar configuration binding.
"""

from typing import Any, Callable, Dict, List
import logging

from .catalog import ComponentDefinition, ValuePoint
from .core import ResolveCtx, token_of
from .errors import ConfigurationBindingError, UnresolvedDependencyError

logger = logging.getLogger("kestrel.di.binder")

_TRUE_STRINGS = frozenset(("true", "yes", "on", "1"))
_FALSE_STRINGS = frozenset(("false", "no", "off", "0"))


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError(f"'{raw}' is not a boolean")


# Supported scalar conversions (exact declared type → converter)
_CONVERTERS: Dict[type, Callable[[str], Any]] = {
    str: lambda raw: raw,
    int: lambda raw: int(raw.strip()),
    float: lambda raw: float(raw.strip()),
    bool: _parse_bool,
}


def convert_scalar(declared_type: Any, raw: str) -> Any:
    """
    Convert a configuration string to ``declared_type``.

    Raises:
        TypeError: If the declared type is not str, int, float or bool
        ValueError: If the string cannot be parsed
    """
    converter = _CONVERTERS.get(declared_type)
    if converter is None:
        raise TypeError(f"unsupported target type {token_of(declared_type)}")
    return converter(raw)


class Binder:
    """
    Binds an already-constructed instance.

    Every resolved member dependency is recorded as a graph edge in the
    registry; that edge map is the input of the global cycle check.
    """

    __slots__ = ("_registry", "_config", "_diagnostics")

    def __init__(self, registry: Any, config: Any, diagnostics: Any):
        self._registry = registry
        self._config = config
        self._diagnostics = diagnostics

    def bind(self, definition: ComponentDefinition, instance: Any, ctx: ResolveCtx) -> None:
        """
        Bind members and configuration values of ``instance``.

        Raises:
            UnresolvedDependencyError: If a member dependency has no candidate
                or the member cannot be assigned
            ConfigurationBindingError: If a value is missing, unconvertible
                or cannot be assigned
        """
        dependencies: List[type] = []

        for point in definition.members:
            target, dependency = self._registry.resolve_dependency(definition, point, ctx)
            try:
                setattr(instance, point.name, dependency)
            except (AttributeError, TypeError) as exc:
                raise UnresolvedDependencyError(
                    definition.token,
                    point.name,
                    token_of(point.declared_type),
                    qualifier=point.qualifier,
                    reason=f"member cannot be assigned: {exc}",
                ) from exc
            dependencies.append(target)

        for point in definition.values:
            value = self._convert(definition, point)
            try:
                setattr(instance, point.name, value)
            except (AttributeError, TypeError) as exc:
                raise ConfigurationBindingError(
                    definition.token, point.name, point.key,
                    f"member cannot be assigned: {exc}",
                ) from exc

        # Recorded even when empty so every bound component is a graph node
        self._registry.record_dependencies(definition.identity, dependencies)

        from .diagnostics import DIEventType
        self._diagnostics.emit(
            DIEventType.BINDING,
            token=definition.token,
            provider_name=definition.descriptor.name,
            metadata={
                "dependencies": [token_of(t) for t in dependencies],
                "values": [p.key for p in definition.values],
            },
        )

    def _convert(self, definition: ComponentDefinition, point: ValuePoint) -> Any:
        key = point.key
        raw = self._config.get(key)
        if raw is None:
            raise ConfigurationBindingError(
                definition.token, point.name, key, "key not found in configuration"
            )

        try:
            return convert_scalar(point.declared_type, raw)
        except (TypeError, ValueError) as exc:
            raise ConfigurationBindingError(
                definition.token, point.name, key, str(exc)
            ) from exc
