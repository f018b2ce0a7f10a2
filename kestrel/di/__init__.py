"""
Kestrel Dependency Injection System

Annotation-driven component container with eager singleton bootstrap.

Key Features:
- Two scopes: singleton (one shared instance) and prototype (new per resolve)
- Constructor, member and configuration-value injection via ``Annotated``
- Qualifiers to select one implementation among several
- Post-construct hooks fired once per construction
- Cycle detection during construction and over the full binding graph
- Diagnostic events for every registration, construction and resolution
"""

from .core import (
    ComponentDescriptor,
    Container,
    ResolveCtx,
    new_container,
    token_of,
)

from .catalog import (
    ComponentDefinition,
    ConstructorPlan,
    InjectionPoint,
    TypeCatalog,
    ValuePoint,
    define_component,
)

from .registry import Registry

from .scopes import ComponentScope

from .decorators import (
    Inject,
    Value,
    component,
    constructor,
    inject,
    is_component,
    post_construct,
    value,
)

from .binder import Binder, convert_scalar
from .instantiator import Instantiator

from .lifecycle import (
    LifecycleHook,
    LifecycleManager,
)

from .graph import DependencyGraph

from .diagnostics import (
    DIDiagnostics,
    DIEvent,
    DIEventType,
    DiagnosticListener,
    LoggingDiagnosticListener,
)

from .errors import (
    AmbiguousComponentError,
    AmbiguousConstructorError,
    CircularDependencyError,
    ComponentNotFoundError,
    ConfigurationBindingError,
    DIError,
    DiscoveryError,
    DuplicateQualifierError,
    InstantiationError,
    LifecycleError,
    UnresolvedDependencyError,
)

__all__ = [
    # Core types
    "ComponentDescriptor",
    "Container",
    "ResolveCtx",
    "new_container",
    "token_of",

    # Catalog
    "ComponentDefinition",
    "ConstructorPlan",
    "InjectionPoint",
    "TypeCatalog",
    "ValuePoint",
    "define_component",

    # Engine
    "Registry",
    "Binder",
    "Instantiator",
    "convert_scalar",

    # Scopes
    "ComponentScope",

    # Decorators
    "Inject",
    "Value",
    "component",
    "constructor",
    "inject",
    "is_component",
    "post_construct",
    "value",

    # Lifecycle
    "LifecycleHook",
    "LifecycleManager",

    # Graph
    "DependencyGraph",

    # Diagnostics
    "DIDiagnostics",
    "DIEvent",
    "DIEventType",
    "DiagnosticListener",
    "LoggingDiagnosticListener",

    # Errors
    "AmbiguousComponentError",
    "AmbiguousConstructorError",
    "CircularDependencyError",
    "ComponentNotFoundError",
    "ConfigurationBindingError",
    "DIError",
    "DiscoveryError",
    "DuplicateQualifierError",
    "InstantiationError",
    "LifecycleError",
    "UnresolvedDependencyError",
]
