"""
Type catalog and component discovery.

The catalog is the only place that inspects live class structure. Each
component is turned into a ComponentDefinition: its descriptor plus an
explicit wiring plan (constructor parameters, injected members, config
values, post-construct hooks). The container works from that data alone.
"""

from typing import (
    Annotated,
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)
from dataclasses import dataclass
import inspect
import logging

from .core import ComponentDescriptor, token_of
from .decorators import Inject, Value, is_component
from .errors import AmbiguousConstructorError, DIError, DiscoveryError
from .scopes import ComponentScope

logger = logging.getLogger("kestrel.di.catalog")


@dataclass(frozen=True)
class InjectionPoint:
    """A constructor parameter or member that needs another component."""

    name: str
    declared_type: Any
    qualifier: Optional[str] = None


@dataclass(frozen=True)
class ValuePoint:
    """A member bound from the configuration source."""

    name: str
    declared_type: Any
    expression: str

    @property
    def key(self) -> str:
        return Value(self.expression).key


@dataclass(frozen=True)
class ConstructorPlan:
    """The dependency-driven constructor chosen for a component."""

    name: str
    parameters: Tuple[InjectionPoint, ...] = ()

    @property
    def is_factory(self) -> bool:
        """True for classmethod alternate constructors."""
        return self.name != "__init__"


@dataclass(frozen=True)
class ComponentDefinition:
    """Descriptor plus the explicit wiring plan of one component."""

    descriptor: ComponentDescriptor
    constructor: Optional[ConstructorPlan] = None
    members: Tuple[InjectionPoint, ...] = ()
    values: Tuple[ValuePoint, ...] = ()
    hooks: Tuple[str, ...] = ()

    @property
    def identity(self) -> type:
        return self.descriptor.identity

    @property
    def scope(self) -> ComponentScope:
        return self.descriptor.scope

    @property
    def qualifier(self) -> Optional[str]:
        return self.descriptor.qualifier

    @property
    def token(self) -> str:
        return self.descriptor.token


def define_component(
    cls: type,
    *,
    scope: Union[str, ComponentScope, None] = None,
    qualifier: Optional[str] = None,
) -> ComponentDefinition:
    """
    Build the definition of ``cls`` from its declarative markers.

    Explicit ``scope``/``qualifier`` arguments take precedence over the
    values given to @component.

    Raises:
        AmbiguousConstructorError: If more than one @constructor is declared
        DIError: If an annotation cannot be evaluated
    """
    if not isinstance(cls, type):
        raise DIError(f"Components must be classes, got {cls!r}")

    if scope is None:
        scope = cls.__dict__.get("__di_scope__")
    if qualifier is None:
        qualifier = cls.__dict__.get("__di_qualifier__")

    descriptor = ComponentDescriptor(
        identity=cls,
        scope=ComponentScope.parse(scope),
        qualifier=qualifier,
    )
    members, values = _extract_members(cls)

    return ComponentDefinition(
        descriptor=descriptor,
        constructor=_extract_constructor(cls),
        members=members,
        values=values,
        hooks=_extract_hooks(cls),
    )


class TypeCatalog:
    """
    Ordered set of component definitions.

    Registration order is preserved; it is the order in which singletons
    are bootstrapped.
    """

    def __init__(self):
        self._definitions: Dict[type, ComponentDefinition] = {}

    @classmethod
    def from_classes(cls, *classes: type) -> "TypeCatalog":
        """Catalog the given classes in order."""
        catalog = cls()
        for component_cls in classes:
            catalog.add(component_cls)
        return catalog

    def add(
        self,
        cls: type,
        *,
        scope: Union[str, ComponentScope, None] = None,
        qualifier: Optional[str] = None,
    ) -> ComponentDefinition:
        """
        Register a class explicitly.

        The class does not need the @component decorator. Adding the same
        class twice is a no-op and returns the first definition.
        """
        existing = self._definitions.get(cls)
        if existing is not None:
            return existing

        definition = define_component(cls, scope=scope, qualifier=qualifier)
        self._definitions[cls] = definition
        logger.debug(
            "Catalogued %s (scope=%s, qualifier=%s)",
            definition.token, definition.scope.value, definition.qualifier,
        )
        return definition

    def scan(self, package: str, *, recursive: bool = True) -> List[type]:
        """
        Discover @component classes in a package and catalog them.

        Args:
            package: Dotted module or package path
            recursive: Whether to walk subpackages

        Returns:
            The discovered classes, in discovery order

        Raises:
            DiscoveryError: If the package or a submodule fails to import
        """
        from ..utils.scanner import PackageScanner

        try:
            found = PackageScanner().scan_package(
                package,
                predicate=is_component,
                recursive=recursive,
            )
        except ImportError as exc:
            raise DiscoveryError(package, exc) from exc

        for component_cls in found:
            self.add(component_cls)

        logger.info("Discovered %d components in %s", len(found), package)
        return found

    def get(self, cls: type) -> Optional[ComponentDefinition]:
        return self._definitions.get(cls)

    def __iter__(self) -> Iterator[ComponentDefinition]:
        return iter(list(self._definitions.values()))

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, cls: object) -> bool:
        return cls in self._definitions


# ── Marker extraction ──


def _split_annotation(annotation: Any) -> Tuple[Any, Tuple[Any, ...]]:
    """Return (base type, metadata) for ``Annotated[...]``, else (annotation, ())."""
    if get_origin(annotation) is Annotated:
        base_type, *metadata = get_args(annotation)
        return base_type, tuple(metadata)
    return annotation, ()


def _resolve_hints(target: Any, owner: type) -> Dict[str, Any]:
    try:
        return get_type_hints(target, include_extras=True)
    except Exception as exc:
        raise DIError(
            f"Cannot evaluate type annotations of {token_of(owner)}: "
            f"{type(exc).__name__}: {exc}"
        ) from exc


def _extract_members(cls: type) -> Tuple[Tuple[InjectionPoint, ...], Tuple[ValuePoint, ...]]:
    """Collect ``Annotated[T, Inject(...)]`` and ``Annotated[T, Value(...)]`` members."""
    members: List[InjectionPoint] = []
    values: List[ValuePoint] = []

    for name, annotation in _resolve_hints(cls, cls).items():
        base_type, metadata = _split_annotation(annotation)
        for marker in metadata:
            if isinstance(marker, Inject):
                members.append(InjectionPoint(name, base_type, marker.qualifier))
                break
            if isinstance(marker, Value):
                values.append(ValuePoint(name, base_type, marker.expression))
                break

    return tuple(members), tuple(values)


def _walk_attributes(cls: type) -> Iterator[Tuple[str, Any]]:
    """
    Yield (name, raw attribute) as seen from ``cls``.

    Base classes come first, each in declaration order; a name overridden in
    a subclass is reported once, with the subclass attribute.
    """
    seen = set()
    resolved = {}
    for klass in cls.__mro__:
        for name, attr in vars(klass).items():
            if name not in seen:
                seen.add(name)
                resolved[name] = attr

    emitted = set()
    for klass in reversed(cls.__mro__):
        for name in vars(klass):
            if name not in emitted:
                emitted.add(name)
                yield name, resolved[name]


def _unwrap(attr: Any) -> Any:
    if isinstance(attr, (classmethod, staticmethod)):
        return attr.__func__
    return attr


def _extract_constructor(cls: type) -> Optional[ConstructorPlan]:
    marked = [
        name for name, attr in _walk_attributes(cls)
        if getattr(_unwrap(attr), "__di_constructor__", False)
    ]

    if not marked:
        return None
    if len(marked) > 1:
        raise AmbiguousConstructorError(token_of(cls), marked)

    name = marked[0]
    return ConstructorPlan(name=name, parameters=_extract_parameters(cls, name))


def _extract_parameters(cls: type, name: str) -> Tuple[InjectionPoint, ...]:
    """Turn constructor parameters into injection points."""
    attr = inspect.getattr_static(cls, name)
    func = _unwrap(attr)
    hints = _resolve_hints(func, cls)
    points: List[InjectionPoint] = []

    params = list(inspect.signature(func).parameters.values())
    # Drop the bound self/cls parameter
    if params and not isinstance(attr, staticmethod):
        params = params[1:]

    for param in params:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue

        has_default = param.default is not inspect.Parameter.empty
        annotation = hints.get(param.name, inspect.Parameter.empty)
        if annotation is inspect.Parameter.empty:
            if has_default:
                continue
            raise DIError(
                f"Missing type annotation for parameter '{param.name}' "
                f"in {cls.__qualname__}.{name}"
            )

        base_type, metadata = _split_annotation(annotation)
        marker = next((m for m in metadata if isinstance(m, Inject)), None)
        # Parameters with a default keep it unless marked with Inject
        if has_default and marker is None:
            continue
        points.append(
            InjectionPoint(param.name, base_type, marker.qualifier if marker else None)
        )

    return tuple(points)


def _extract_hooks(cls: type) -> Tuple[str, ...]:
    return tuple(
        name for name, attr in _walk_attributes(cls)
        if getattr(_unwrap(attr), "__di_post_construct__", False)
    )
