"""
Package Scanner Utility.

Provides runtime introspection to discover classes within modules
and packages. Backs component auto-discovery.
"""

import importlib
import pkgutil
import inspect
import logging
import time
from types import ModuleType
from typing import Any, Callable, Dict, List, Optional, Set, Type

logger = logging.getLogger("kestrel.scanner")


class PackageScanner:
    """
    Scanner for discovering classes in Python packages.

    Features:
    - Recursive package scanning with depth control
    - Class filtering by base class or predicate
    - Only classes defined in the scanned modules are returned
    - Deterministic order (module walk order, then definition order)
    """

    def __init__(self):
        self._scan_stats = {
            'modules_scanned': 0,
            'classes_found': 0,
            'scan_time': 0.0,
        }

    def get_stats(self) -> Dict[str, Any]:
        """Get scanning statistics."""
        return self._scan_stats.copy()

    def scan_package(
        self,
        package_name: str,
        base_class: Optional[Type] = None,
        predicate: Optional[Callable[[Type], bool]] = None,
        recursive: bool = True,
        max_depth: int = 8,
    ) -> List[Type]:
        """
        Scan a package (or a plain module) for classes matching criteria.

        Args:
            package_name: Dotted python path (e.g. 'myapp.components')
            base_class: Optional base class to filter by (subclass check)
            predicate: Optional custom filter function
            recursive: Whether to scan subpackages
            max_depth: Maximum recursion depth for subpackages

        Returns:
            List of discovered classes

        Raises:
            ImportError: If the package or one of its modules cannot be imported
        """
        start_time = time.time()
        discovered: List[Type] = []

        module = importlib.import_module(package_name)
        self._scan_module(module, discovered, base_class, predicate)
        self._scan_stats['modules_scanned'] += 1

        if recursive and hasattr(module, "__path__") and max_depth > 0:
            seen_modules: Set[str] = {module.__name__}

            def _raise(name: str) -> None:
                raise ImportError(f"Failed to import {name} while walking {package_name}")

            for _, name, _ in pkgutil.walk_packages(
                module.__path__,
                module.__name__ + ".",
                onerror=_raise,
            ):
                current_depth = name.count('.') - package_name.count('.')
                if current_depth > max_depth:
                    continue

                if name in seen_modules:
                    continue
                seen_modules.add(name)

                submodule = importlib.import_module(name)
                self._scan_module(submodule, discovered, base_class, predicate)
                self._scan_stats['modules_scanned'] += 1

        self._scan_stats['classes_found'] += len(discovered)
        self._scan_stats['scan_time'] += time.time() - start_time
        logger.debug(
            "Scanned %s: %d classes found", package_name, len(discovered)
        )

        return discovered

    def _scan_module(
        self,
        module: ModuleType,
        discovered: List[Type],
        base_class: Optional[Type],
        predicate: Optional[Callable[[Type], bool]],
    ) -> None:
        """Internal helper to scan a single module."""
        # vars() keeps definition order, unlike inspect.getmembers()
        for obj in list(vars(module).values()):
            if not inspect.isclass(obj):
                continue

            # Only classes defined here, not re-exports from elsewhere
            if obj.__module__ != module.__name__:
                continue

            if base_class and not issubclass(obj, base_class):
                continue

            if predicate and not predicate(obj):
                continue

            if obj not in discovered:
                discovered.append(obj)
