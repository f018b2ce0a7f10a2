"""
DI-specific error types with rich diagnostics.
"""

from typing import List, Optional


class DIError(Exception):
    """Base exception for DI errors."""
    pass


class ComponentNotFoundError(DIError):
    """No component registered for the requested identity or qualifier."""

    def __init__(
        self,
        token: str,
        qualifier: Optional[str] = None,
        candidates: Optional[List[str]] = None,
    ):
        self.token = token
        self.qualifier = qualifier
        self.candidates = candidates or []

        if qualifier:
            msg = f"No component registered under qualifier '{qualifier}'"
        else:
            msg = f"No component registered for {token}"

        if self.candidates:
            msg += "\n\nRegistered components with a similar name:"
            for candidate in self.candidates:
                msg += f"\n  - {candidate}"

        msg += "\n\nSuggested fixes:"
        msg += "\n  - Decorate the class with @component"
        msg += "\n  - Add its module to the scanned package or the catalog"

        super().__init__(msg)


class AmbiguousConstructorError(DIError):
    """More than one constructor is marked as dependency-driven."""

    def __init__(self, token: str, constructors: List[str]):
        self.token = token
        self.constructors = constructors

        msg = f"Component {token} declares {len(constructors)} @constructor methods:"
        for name in constructors:
            msg += f"\n  - {name}"
        msg += "\n\nSuggested fix:"
        msg += "\n  - Keep @constructor on exactly one of them"

        super().__init__(msg)


class UnresolvedDependencyError(DIError):
    """A required dependency could not be found, by type or by qualifier."""

    def __init__(
        self,
        consumer: str,
        member: str,
        dependency: str,
        qualifier: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.consumer = consumer
        self.member = member
        self.dependency = dependency
        self.qualifier = qualifier
        self.reason = reason

        target = f"qualifier '{qualifier}'" if qualifier else dependency
        msg = f"Cannot bind {consumer}.{member}: no component found for {target}"
        if reason:
            msg += f"\nReason: {reason}"

        msg += "\n\nSuggested fixes:"
        if qualifier:
            msg += f"\n  - Register a component with @component(qualifier='{qualifier}')"
            msg += "\n  - Check the qualifier for typos"
        else:
            msg += f"\n  - Register a component providing {dependency}"
            msg += "\n  - Use Inject(qualifier='...') to select an implementation"

        super().__init__(msg)


class AmbiguousComponentError(UnresolvedDependencyError):
    """Several registered components satisfy a type and none is selected."""

    def __init__(
        self,
        dependency: str,
        candidates: List[str],
        consumer: Optional[str] = None,
        member: Optional[str] = None,
    ):
        self.candidates = candidates
        reason = "multiple candidates: " + ", ".join(candidates)
        if consumer is not None:
            super().__init__(consumer, member or "-", dependency, reason=reason)
            return

        # Raised from Container.resolve(): there is no consuming member
        self.consumer = None
        self.member = None
        self.dependency = dependency
        self.qualifier = None
        self.reason = reason

        msg = f"Cannot resolve {dependency}: {len(candidates)} components match"
        for candidate in candidates:
            msg += f"\n  - {candidate}"
        msg += "\n\nSuggested fixes:"
        msg += "\n  - Resolve the concrete component type instead"
        msg += "\n  - Give each implementation a qualifier and use resolve_by_qualifier()"

        DIError.__init__(self, msg)


class ConfigurationBindingError(DIError):
    """A scalar configuration value could not be bound to a member."""

    def __init__(
        self,
        consumer: str,
        member: str,
        key: str,
        reason: str,
    ):
        self.consumer = consumer
        self.member = member
        self.key = key
        self.reason = reason

        super().__init__(
            f"Cannot bind configuration value '{key}' to {consumer}.{member}: {reason}"
        )


class LifecycleError(DIError):
    """A post-construct hook raised."""

    def __init__(self, token: str, hook: str, error: BaseException):
        self.token = token
        self.hook = hook
        self.error = error

        super().__init__(
            f"Post-construct hook {token}.{hook}() failed: "
            f"{type(error).__name__}: {error}"
        )


class InstantiationError(DIError):
    """A component constructor raised."""

    def __init__(self, token: str, error: BaseException):
        self.token = token
        self.error = error

        super().__init__(
            f"Failed to construct {token}: {type(error).__name__}: {error}"
        )


class DuplicateQualifierError(DIError):
    """Two different components claim the same qualifier."""

    def __init__(self, qualifier: str, existing: str, duplicate: str):
        self.qualifier = qualifier
        self.existing = existing
        self.duplicate = duplicate

        msg = (
            f"Qualifier '{qualifier}' is already registered by {existing}; "
            f"refusing to register it again for {duplicate}"
            f"\n\nSuggested fix:"
            f"\n  - Give each implementation a distinct qualifier"
        )
        super().__init__(msg)


class DiscoveryError(DIError):
    """A package or module could not be scanned for components."""

    def __init__(self, package: str, error: BaseException):
        self.package = package
        self.error = error

        super().__init__(
            f"Could not scan '{package}' for components: {type(error).__name__}: {error}"
        )


class CircularDependencyError(DIError):
    """Circular dependency detected in the component graph."""

    def __init__(
        self,
        cycle: List[str],
        during: str = "graph validation",
        path: Optional[List[str]] = None,
    ):
        self.cycle = cycle
        self.during = during
        self.path = path or list(cycle)

        msg = f"Circular dependency detected during {during}:\n"
        for j, token in enumerate(cycle):
            arrow = " → " if j < len(cycle) - 1 else ""
            msg += f"  {token}{arrow}\n"

        if len(self.path) > len(cycle):
            msg += "\nFull path: " + " → ".join(self.path) + "\n"

        msg += "\nSuggested fixes:"
        msg += "\n  1. Break the cycle by refactoring dependencies"
        msg += "\n  2. Extract shared dependencies into a separate component"
        msg += "\n  3. Use events/callbacks instead of direct injection"

        super().__init__(msg)
