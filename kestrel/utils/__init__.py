"""
Kestrel Utils Package

Utility modules:
- scanner: Package auto-discovery for components
"""

from .scanner import PackageScanner

__all__ = [
    "PackageScanner",
]
