"""
Kestrel CLI - inspect and exercise a component package.

Usage:
    kestrel check <package>
    kestrel tree <package>
    kestrel graph <package> --output deps.dot
    kestrel resolve <package> <qualifier | module:Class>
"""

from .. import __version__

__cli_name__ = "kestrel"


def main():
    """Wrapper to avoid eager import of __main__ which causes warnings with -m."""
    from .__main__ import main as _main
    return _main()
