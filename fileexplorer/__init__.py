"""Public package surface for fileexplorer.

Exports the navigation engine and request/result types, plus ``main`` for
programmatic CLI invocation.
"""

from __future__ import annotations

from .classifier import Category, ContentClassifier, CustomCategory, InputMode
from .errors import ContainmentError, ExplorerError, Fault, FavoritesPersistError
from .navigation import Explorer
from .types import DirectoryView, FaultView, FileView, NavigationRequest, NavigationResult


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = [
    "Category",
    "ContentClassifier",
    "CustomCategory",
    "InputMode",
    "ContainmentError",
    "ExplorerError",
    "Fault",
    "FavoritesPersistError",
    "Explorer",
    "NavigationRequest",
    "NavigationResult",
    "DirectoryView",
    "FileView",
    "FaultView",
    "main",
]
