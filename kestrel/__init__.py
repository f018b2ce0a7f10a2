"""
Kestrel - annotation-driven dependency injection container.

Components are plain classes marked with ``@component``; their
dependencies and configuration values are declared with ``Annotated``
markers and wired by a Container built from a TypeCatalog.

    from typing import Annotated
    from kestrel import component, Inject, TypeCatalog, new_container

    @component
    class Repository:
        ...

    @component
    class Service:
        repo: Annotated[Repository, Inject()]

    container = new_container(TypeCatalog.from_classes(Repository, Service))
    service = container.resolve(Service)
"""

__version__ = "1.0.0"

from .config import ConfigError, ConfigSource

from .di import (
    AmbiguousComponentError,
    AmbiguousConstructorError,
    CircularDependencyError,
    ComponentDescriptor,
    ComponentNotFoundError,
    ComponentScope,
    ConfigurationBindingError,
    Container,
    DIDiagnostics,
    DIError,
    DIEventType,
    DiscoveryError,
    DuplicateQualifierError,
    Inject,
    InstantiationError,
    LifecycleError,
    LoggingDiagnosticListener,
    TypeCatalog,
    UnresolvedDependencyError,
    Value,
    component,
    constructor,
    inject,
    new_container,
    post_construct,
    value,
)

__all__ = [
    "__version__",
    "ConfigError",
    "ConfigSource",
    "AmbiguousComponentError",
    "AmbiguousConstructorError",
    "CircularDependencyError",
    "ComponentDescriptor",
    "ComponentNotFoundError",
    "ComponentScope",
    "ConfigurationBindingError",
    "Container",
    "DIDiagnostics",
    "DIError",
    "DIEventType",
    "DiscoveryError",
    "DuplicateQualifierError",
    "Inject",
    "InstantiationError",
    "LifecycleError",
    "LoggingDiagnosticListener",
    "TypeCatalog",
    "UnresolvedDependencyError",
    "Value",
    "component",
    "constructor",
    "inject",
    "new_container",
    "post_construct",
    "value",
]
