"""
Core DI types.

Defines the component descriptor, the per-call resolution context and the
container that owns the whole bootstrap.
"""

from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Optional,
    Set,
    Type,
    TypeVar,
)
from dataclasses import dataclass, field
import logging

from .scopes import ComponentScope

logger = logging.getLogger("kestrel.di")

# Module-level cache: type → "module.qualname" string
_type_key_cache: Dict[type, str] = {}


T = TypeVar("T")


def token_of(obj: Any) -> str:
    """Human-readable key for a type (``module.QualName``) or any other object."""
    if isinstance(obj, str):
        return obj

    if isinstance(obj, type):
        key = _type_key_cache.get(obj)
        if key is None:
            key = f"{obj.__module__}.{obj.__qualname__}"
            _type_key_cache[obj] = key
        return key

    # typing generics and other non-class annotations
    return str(obj)


@dataclass(frozen=True)
class ComponentDescriptor:
    """
    Immutable component metadata.

    ``dependency_types`` is the only part that changes after discovery: it is
    filled in while the component is bound.
    """
    identity: type
    scope: ComponentScope = ComponentScope.SINGLETON
    qualifier: Optional[str] = None
    dependency_types: Set[type] = field(
        default_factory=set, compare=False, hash=False, repr=False
    )

    @property
    def token(self) -> str:
        return token_of(self.identity)

    @property
    def name(self) -> str:
        return self.identity.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for diagnostics output."""
        return {
            "name": self.name,
            "token": self.token,
            "scope": self.scope.value,
            "qualifier": self.qualifier,
            "dependencies": sorted(token_of(t) for t in self.dependency_types),
        }


class ResolveCtx:
    """
    Context for one resolution call.

    Tracks the components currently under construction so that re-entering
    one of them fails fast instead of recursing forever.
    """
    __slots__ = ("container", "stack", "_in_progress")

    def __init__(self, container: Optional["Container"] = None):
        self.container = container
        self.stack: List[type] = []
        self._in_progress: Set[type] = set()

    def push(self, identity: type) -> None:
        """
        Mark identity as in progress.

        Raises:
            CircularDependencyError: If identity is already being constructed
        """
        if identity in self._in_progress:
            from .errors import CircularDependencyError

            start = self.stack.index(identity)
            cycle = [token_of(t) for t in self.stack[start:]] + [token_of(identity)]
            raise CircularDependencyError(cycle, during="construction")

        self.stack.append(identity)
        self._in_progress.add(identity)

    def pop(self) -> None:
        """Pop the innermost in-progress identity."""
        identity = self.stack.pop()
        self._in_progress.discard(identity)

    def in_progress(self, identity: type) -> bool:
        return identity in self._in_progress

    def get_trace(self) -> List[str]:
        """Get current resolution trace for error messages."""
        return [token_of(t) for t in self.stack]


class Container:
    """
    Component container - owns the registry and runs the bootstrap.

    Use :meth:`create` (or :func:`new_container`); a container is only handed
    out once every singleton is constructed, bound, initialised and the
    dependency graph has been checked for cycles.
    """

    __slots__ = (
        "_registry",
        "_config",
        "_diagnostics",
        "_ready",
    )

    def __init__(
        self,
        catalog: Iterable[Any],
        config: Optional[Any] = None,
        *,
        diagnostics: Optional[Any] = None,
    ):
        from ..config import ConfigSource
        from .diagnostics import DIDiagnostics
        from .registry import Registry

        self._config = config if config is not None else ConfigSource.empty()
        self._diagnostics = diagnostics or DIDiagnostics()
        self._registry = Registry(self._config, self._diagnostics)
        self._ready = False

        for definition in catalog:
            self._registry.register(definition)

    @classmethod
    def create(
        cls,
        catalog: Iterable[Any],
        config: Optional[Any] = None,
        *,
        diagnostics: Optional[Any] = None,
    ) -> "Container":
        """
        Build a container and run the full bootstrap.

        Args:
            catalog: Component definitions (usually a TypeCatalog)
            config: Optional ConfigSource for scalar bindings
            diagnostics: Optional DIDiagnostics coordinator

        Returns:
            A fully bootstrapped container

        Raises:
            DIError: Any wiring failure; no container is returned
        """
        container = cls(catalog, config, diagnostics=diagnostics)
        container._bootstrap()
        return container

    def _bootstrap(self) -> None:
        """
        Eager singleton bootstrap.

        Phases run strictly in order: construct every singleton, bind every
        singleton, fire every singleton's hooks, then validate the recorded
        dependency graph once.
        """
        from .diagnostics import DIEventType

        registry = self._registry
        singletons = [
            definition for definition in registry.definitions()
            if definition.scope.cacheable
        ]
        logger.debug(
            "Bootstrapping %d components (%d singletons)",
            len(registry), len(singletons),
        )

        # Phase 1: construction (constructor dependencies resolved recursively)
        for definition in singletons:
            registry.resolve(definition.identity, ResolveCtx(self))

        # Phase 2: member and value binding
        for definition in singletons:
            registry.binder.bind(
                definition,
                registry.singleton(definition.identity),
                ResolveCtx(self),
            )

        # Phase 3: post-construct hooks, dependencies before dependents
        hook_order = self.graph.get_resolution_order(
            [d.identity for d in singletons], strict=False,
        )
        for identity in hook_order:
            definition = registry.definition(identity)
            if definition.scope.cacheable:
                registry.lifecycle.fire(definition, registry.singleton(identity))

        # Phase 4: global cycle check over every recorded edge
        graph = self.graph
        self._diagnostics.emit(
            DIEventType.CYCLE_CHECK,
            metadata={"nodes": len(graph.adj_list)},
        )
        graph.validate()

        self._ready = True
        self._diagnostics.emit(
            DIEventType.BOOTSTRAP_COMPLETE,
            metadata={"components": len(registry), "singletons": len(singletons)},
        )
        logger.info("Container ready: %d components", len(registry))

    def resolve(self, identity: Type[T]) -> T:
        """
        Resolve a component by its type.

        Singletons return the shared instance; prototypes return a freshly
        constructed, bound and initialised instance on every call.

        Raises:
            ComponentNotFoundError: If nothing is registered for identity
        """
        self._check_ready()
        from .diagnostics import DIEventType

        token = token_of(identity)
        self._diagnostics.emit(DIEventType.RESOLUTION_START, token=token)
        with self._diagnostics.measure(DIEventType.RESOLUTION_SUCCESS, token=token):
            target = self._registry.lookup(identity)
            return self._registry.resolve(target, ResolveCtx(self))

    def resolve_by_qualifier(self, name: str) -> Any:
        """
        Resolve a component by its qualifier.

        Raises:
            ComponentNotFoundError: If no component carries the qualifier
        """
        self._check_ready()
        from .diagnostics import DIEventType

        self._diagnostics.emit(DIEventType.RESOLUTION_START, qualifier=name)
        with self._diagnostics.measure(DIEventType.RESOLUTION_SUCCESS, qualifier=name):
            target = self._registry.identity_for_qualifier(name)
            return self._registry.resolve(target, ResolveCtx(self))

    def is_registered(self, identity: type) -> bool:
        """Check if a component is registered for the exact identity."""
        return identity in self._registry

    def descriptors(self) -> List[ComponentDescriptor]:
        """Descriptors of all registered components, in registration order."""
        return [d.descriptor for d in self._registry.definitions()]

    @property
    def config(self) -> Any:
        return self._config

    @property
    def diagnostics(self) -> Any:
        return self._diagnostics

    @property
    def graph(self) -> "DependencyGraph":
        """Snapshot of the recorded dependency graph."""
        from .graph import DependencyGraph

        return DependencyGraph(
            self._registry.dependency_edges(),
            {d.identity: d.descriptor for d in self._registry.definitions()},
        )

    def _check_ready(self) -> None:
        if not self._ready:
            from .errors import DIError

            raise DIError(
                "Container has not been bootstrapped; build it with "
                "Container.create() or new_container()"
            )


def new_container(
    catalog: Iterable[Any],
    config: Optional[Any] = None,
    *,
    diagnostics: Optional[Any] = None,
) -> Container:
    """Build and bootstrap a container (see :meth:`Container.create`)."""
    return Container.create(catalog, config, diagnostics=diagnostics)
