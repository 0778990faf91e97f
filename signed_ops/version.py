"""Package version (PEP 440). Bump when publishing."""

from __future__ import annotations

from importlib import metadata

__version__ = "0.1.0"


def version() -> str:
    """
    Version of the installed distribution, falling back to `__version__` when
    running from a source tree that was never installed.
    """
    try:
        return metadata.version("signed-ops")
    except metadata.PackageNotFoundError:
        return __version__


__all__ = ["__version__", "version"]
