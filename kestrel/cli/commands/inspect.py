"""
Inspect command - bootstrap a component package and report on it.
"""

import importlib
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Optional

from ...config import ConfigSource
from ...di import (
    ComponentNotFoundError,
    Container,
    DIDiagnostics,
    LoggingDiagnosticListener,
    TypeCatalog,
)


def load_container(
    package: str,
    config_path: Optional[str] = None,
    *,
    verbose: bool = False,
) -> Container:
    """
    Scan ``package`` and bootstrap a container from it.

    Raises:
        DiscoveryError: If the package cannot be imported
        ConfigError: If the configuration file cannot be read
        DIError: Any wiring failure
    """
    config = ConfigSource.from_file(config_path) if config_path else ConfigSource.empty()

    diagnostics = DIDiagnostics()
    if verbose:
        diagnostics.add_listener(LoggingDiagnosticListener())

    catalog = TypeCatalog()
    catalog.scan(package)
    return Container.create(catalog, config, diagnostics=diagnostics)


def summarize(container: Container) -> Dict[str, Any]:
    """Component counts by scope plus the registered qualifiers."""
    descriptors = container.descriptors()
    by_scope = Counter(d.scope.value for d in descriptors)
    return {
        "components": len(descriptors),
        "singleton": by_scope.get("singleton", 0),
        "prototype": by_scope.get("prototype", 0),
        "qualifiers": sorted(d.qualifier for d in descriptors if d.qualifier),
        "rows": [
            [d.name, d.scope.value, d.qualifier or "-", str(len(d.dependency_types))]
            for d in descriptors
        ],
    }


def render_tree(container: Container) -> str:
    return container.graph.get_tree_view()


def write_dot(container: Container, output: Optional[str] = None) -> str:
    """Render the graph as DOT, writing it to ``output`` when given."""
    dot = container.graph.export_dot()
    if output:
        Path(output).write_text(dot + "\n", encoding="utf-8")
    return dot


def resolve_target(container: Container, target: str) -> Any:
    """
    Resolve ``target``: ``module:Class`` by type, anything else by qualifier.

    Raises:
        ComponentNotFoundError: If the class or qualifier is unknown
    """
    if ":" not in target:
        return container.resolve_by_qualifier(target)

    module_name, _, attr_path = target.partition(":")
    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        raise ComponentNotFoundError(target) from exc

    return container.resolve(obj)
