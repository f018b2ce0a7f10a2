"""
Registry - descriptors, singleton slots, qualifiers and dependency edges.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional
import logging
import threading

from .catalog import ComponentDefinition, InjectionPoint
from .core import ResolveCtx, token_of
from .errors import (
    AmbiguousComponentError,
    ComponentNotFoundError,
    DuplicateQualifierError,
    UnresolvedDependencyError,
)

logger = logging.getLogger("kestrel.di.registry")


class _SingletonCell:
    """
    Compute-once slot for a singleton instance.

    Reads after publication are lock-free; the first construction runs under
    the cell's lock so the constructor can never run twice.
    """

    __slots__ = ("_lock", "_value", "_ready")

    def __init__(self):
        self._lock = threading.RLock()
        self._value: Any = None
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def value(self) -> Any:
        return self._value

    def get_or_create(self, factory: Callable[[], Any]) -> Any:
        if self._ready:
            return self._value

        with self._lock:
            if not self._ready:
                self._value = factory()
                self._ready = True
        return self._value


def _is_subtype(candidate: type, requested: Any) -> bool:
    try:
        return issubclass(candidate, requested)
    except TypeError:
        # Non-runtime protocols and typing constructs: nominal check only
        return requested in getattr(candidate, "__mro__", ())


def _provides(identity: type, declared_type: Any) -> bool:
    """Whether a qualified component can be bound to ``declared_type``."""
    if declared_type is Any or declared_type is object:
        return True
    return _is_subtype(identity, declared_type)


class Registry:
    """
    Owns descriptor-by-identity, instance-by-identity and qualifier mappings,
    plus the dependency edges recorded while binding.

    The registry also drives construction: it holds the instantiator, binder
    and lifecycle manager that turn a definition into a live instance.
    """

    def __init__(self, config: Any, diagnostics: Any):
        from .binder import Binder
        from .instantiator import Instantiator
        from .lifecycle import LifecycleManager

        self._definitions: Dict[type, ComponentDefinition] = {}
        self._cells: Dict[type, _SingletonCell] = {}
        self._qualifiers: Dict[str, type] = {}
        self._edges: Dict[type, Dict[type, None]] = {}  # ordered sets
        self._edges_lock = threading.Lock()
        self._diagnostics = diagnostics

        self.instantiator = Instantiator(self, diagnostics)
        self.binder = Binder(self, config, diagnostics)
        self.lifecycle = LifecycleManager(diagnostics)

    # ── Registration ──

    def register(self, definition: ComponentDefinition) -> None:
        """
        Register a component definition.

        Re-registering a known identity is a no-op.

        Raises:
            DuplicateQualifierError: If another component owns the qualifier
        """
        identity = definition.identity
        if identity in self._definitions:
            logger.debug("Ignoring repeated registration of %s", definition.token)
            return

        qualifier = definition.qualifier
        if qualifier is not None and qualifier in self._qualifiers:
            raise DuplicateQualifierError(
                qualifier,
                existing=token_of(self._qualifiers[qualifier]),
                duplicate=definition.token,
            )

        # Fresh descriptor so recorded dependencies stay per-container
        definition = replace(
            definition,
            descriptor=replace(definition.descriptor, dependency_types=set()),
        )
        self._definitions[identity] = definition
        if definition.scope.cacheable:
            self._cells[identity] = _SingletonCell()
        if qualifier is not None:
            self._qualifiers[qualifier] = identity

        from .diagnostics import DIEventType
        self._diagnostics.emit(
            DIEventType.REGISTRATION,
            token=definition.token,
            qualifier=qualifier,
            provider_name=definition.descriptor.name,
            metadata={"scope": definition.scope.value},
        )

    # ── Lookup ──

    def definition(self, identity: type) -> ComponentDefinition:
        try:
            return self._definitions[identity]
        except KeyError:
            raise ComponentNotFoundError(
                token_of(identity), candidates=self._similar(identity)
            ) from None

    def definitions(self) -> Iterator[ComponentDefinition]:
        """Definitions in registration order."""
        return iter(list(self._definitions.values()))

    def lookup(self, requested: Any) -> type:
        """
        Find the registered identity serving ``requested``.

        Exact identity wins; otherwise the single registered subclass.

        Raises:
            ComponentNotFoundError: If no component satisfies the type
            AmbiguousComponentError: If several do
        """
        if requested in self._definitions:
            return requested

        candidates = [
            identity for identity in self._definitions
            if _is_subtype(identity, requested)
        ]
        if len(candidates) == 1:
            return candidates[0]
        if candidates:
            raise AmbiguousComponentError(
                token_of(requested), [token_of(c) for c in candidates]
            )
        raise ComponentNotFoundError(
            token_of(requested), candidates=self._similar(requested)
        )

    def identity_for_qualifier(self, name: str) -> type:
        """
        Raises:
            ComponentNotFoundError: If no component carries the qualifier
        """
        try:
            return self._qualifiers[name]
        except KeyError:
            raise ComponentNotFoundError(
                name, qualifier=name, candidates=sorted(self._qualifiers)
            ) from None

    def qualifiers(self) -> Dict[str, type]:
        return dict(self._qualifiers)

    # ── Resolution ──

    def resolve(self, identity: type, ctx: Optional[ResolveCtx] = None) -> Any:
        """
        Resolve a registered identity.

        Singletons come from their compute-once cell. Prototypes run a full
        construct, bind and post-construct cycle every time.
        """
        definition = self.definition(identity)
        ctx = ctx or ResolveCtx()

        if definition.scope.cacheable:
            cell = self._cells[identity]
            if cell.ready:
                return cell.value
            return cell.get_or_create(lambda: self._build(definition, ctx, full=False))

        return self._build(definition, ctx, full=True)

    def resolve_by_qualifier(self, name: str, ctx: Optional[ResolveCtx] = None) -> Any:
        return self.resolve(self.identity_for_qualifier(name), ctx)

    def resolve_dependency(
        self,
        consumer: ComponentDefinition,
        point: InjectionPoint,
        ctx: ResolveCtx,
    ) -> tuple:
        """
        Resolve one injection point of ``consumer``.

        Only a failed lookup of the requested dependency itself becomes an
        UnresolvedDependencyError; failures while building it propagate
        unchanged.

        Returns:
            (resolved identity, instance)
        """
        try:
            if point.qualifier is not None:
                target = self.identity_for_qualifier(point.qualifier)
            else:
                target = self.lookup(point.declared_type)
        except AmbiguousComponentError as exc:
            raise AmbiguousComponentError(
                exc.dependency, exc.candidates,
                consumer=consumer.token, member=point.name,
            ) from exc
        except ComponentNotFoundError as exc:
            raise UnresolvedDependencyError(
                consumer.token,
                point.name,
                token_of(point.declared_type),
                qualifier=point.qualifier,
            ) from exc

        if point.qualifier is not None and not _provides(target, point.declared_type):
            raise UnresolvedDependencyError(
                consumer.token,
                point.name,
                token_of(point.declared_type),
                qualifier=point.qualifier,
                reason=(
                    f"{token_of(target)} does not provide "
                    f"{token_of(point.declared_type)}"
                ),
            )

        instance = self.resolve(target, ctx)
        if instance is None:
            raise UnresolvedDependencyError(
                consumer.token,
                point.name,
                token_of(point.declared_type),
                qualifier=point.qualifier,
                reason=f"{token_of(target)} resolved to None",
            )
        return target, instance

    def singleton(self, identity: type) -> Any:
        """The published singleton instance (constructs it if needed)."""
        cell = self._cells[identity]
        if cell.ready:
            return cell.value
        return self.resolve(identity)

    def _build(self, definition: ComponentDefinition, ctx: ResolveCtx, *, full: bool) -> Any:
        ctx.push(definition.identity)
        try:
            instance = self.instantiator.instantiate(definition, ctx)
            if full:
                self.binder.bind(definition, instance, ctx)
                self.lifecycle.fire(definition, instance)
            return instance
        finally:
            ctx.pop()

    # ── Dependency edges ──

    def record_dependencies(self, identity: type, dependencies: Iterable[type]) -> None:
        """Record edges ``identity → dependency`` for cycle detection."""
        with self._edges_lock:
            edges = self._edges.setdefault(identity, {})
            for dependency in dependencies:
                edges[dependency] = None
            self._definitions[identity].descriptor.dependency_types.update(edges)

    def dependency_edges(self) -> Dict[type, List[type]]:
        """Snapshot of all recorded edges, in recording order."""
        with self._edges_lock:
            return {node: list(deps) for node, deps in self._edges.items()}

    # ── Misc ──

    def _similar(self, requested: Any) -> List[str]:
        name = getattr(requested, "__name__", str(requested)).lower()
        return [
            token_of(identity) for identity in self._definitions
            if name in identity.__name__.lower() or identity.__name__.lower() in name
        ]

    def __contains__(self, identity: object) -> bool:
        return identity in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
