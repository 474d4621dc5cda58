"""Version reporting for the installed package."""

from __future__ import annotations

import importlib.metadata

from . import __version__


def get_version_string() -> str:
    """Version of the installed distribution, or the in-tree version."""
    try:
        return importlib.metadata.version("vared")
    except importlib.metadata.PackageNotFoundError:
        return __version__
