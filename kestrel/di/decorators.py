"""
Declarative markers for components.

Usage:
    @component(scope="prototype", qualifier="english")
    class EnglishGreeter(Greeter):
        prefix: Annotated[str, Value("${greeting.prefix}")]
        audit: Annotated[AuditLog, Inject()]

        @post_construct
        def ready(self):
            ...

The markers only attach metadata; the catalog reads it once and turns it
into an explicit ComponentDefinition.
"""

from typing import Any, Callable, Optional, Type, TypeVar, Union, overload
from dataclasses import dataclass

from .scopes import ComponentScope


T = TypeVar("T")

PLACEHOLDER_PREFIX = "${"
PLACEHOLDER_SUFFIX = "}"


@dataclass(frozen=True)
class Inject:
    """
    Dependency injection marker.

    Usage:
        repo: Annotated[UserRepo, Inject()]
        greeter: Annotated[Greeter, Inject(qualifier="english")]
    """

    qualifier: Optional[str] = None


@dataclass(frozen=True)
class Value:
    """
    Configuration value marker.

    ``expression`` is a placeholder such as ``"${app.name}"``; a bare key is
    accepted as well.
    """

    expression: str

    @property
    def key(self) -> str:
        """Raw configuration key with the ``${`` ``}`` delimiters stripped."""
        return extract_key(self.expression)


def extract_key(expression: str) -> str:
    """Strip the placeholder delimiters from ``${key.name}``."""
    expression = expression.strip()
    if expression.startswith(PLACEHOLDER_PREFIX) and expression.endswith(PLACEHOLDER_SUFFIX):
        return expression[len(PLACEHOLDER_PREFIX):-len(PLACEHOLDER_SUFFIX)].strip()
    return expression


def inject(qualifier: Optional[str] = None) -> Inject:
    """
    Create injection metadata.

    Example:
        class GreetingClient:
            greeter: Annotated[Greeter, inject("english")]
    """
    return Inject(qualifier=qualifier)


def value(expression: str) -> Value:
    """Create configuration value metadata."""
    return Value(expression)


@overload
def component(cls: Type[T]) -> Type[T]: ...


@overload
def component(
    *,
    scope: Union[str, ComponentScope] = ...,
    qualifier: Optional[str] = ...,
) -> Callable[[Type[T]], Type[T]]: ...


def component(
    cls: Optional[Type[T]] = None,
    *,
    scope: Union[str, ComponentScope] = ComponentScope.SINGLETON,
    qualifier: Optional[str] = None,
):
    """
    Decorator to mark a class as a container-managed component.

    Works bare (``@component``) or with arguments.

    Args:
        scope: ``"singleton"`` (default) or ``"prototype"``
        qualifier: Optional unique name for lookup and disambiguation

    Example:
        @component(scope="prototype")
        class SpanishGreeter:
            ...
    """
    resolved_scope = ComponentScope.parse(scope)

    def decorator(target: Type[T]) -> Type[T]:
        # Attach metadata to class
        target.__di_component__ = True  # type: ignore
        target.__di_scope__ = resolved_scope  # type: ignore
        target.__di_qualifier__ = qualifier  # type: ignore
        return target

    if cls is not None:
        return decorator(cls)
    return decorator


def post_construct(func: Callable[..., Any]) -> Callable[..., Any]:
    """Mark a method to run once after the instance has been bound."""
    func.__di_post_construct__ = True  # type: ignore
    return func


def constructor(func: Any) -> Any:
    """
    Mark the dependency-driven constructor.

    Apply to ``__init__`` or to a classmethod alternate constructor. Its
    parameters are resolved from the container by their annotations.
    """
    target = func.__func__ if isinstance(func, (classmethod, staticmethod)) else func
    target.__di_constructor__ = True
    return func


def is_component(cls: Any) -> bool:
    """True if ``cls`` itself (not only a base class) carries @component."""
    return isinstance(cls, type) and cls.__dict__.get("__di_component__", False) is True
