"""Fault taxonomy for one navigation request.

Each exception carries the numeric code surfaced to callers plus a details
mapping. The engine converts them into immutable ``Fault`` values attached to
results, so presentation never has to catch anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DOCUMENT_ROOT_FAULT = 1
ROOT_FAULT = 2
CONTAINMENT_FAULT = 3
FAVORITES_FAULT = 4


@dataclass(frozen=True)
class Fault:
    """Fault code plus contextual details reported alongside a result."""

    code: int
    details: dict[str, str] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        """Return whether this fault suppresses listing/file output."""
        return self.code in (DOCUMENT_ROOT_FAULT, ROOT_FAULT)

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "details": dict(self.details)}


class ExplorerError(Exception):
    """Base class for explorer faults."""

    code = 0

    def __init__(self, message: str, **details: str) -> None:
        super().__init__(message)
        self.details = {key: value for key, value in details.items() if value is not None}

    def to_fault(self) -> Fault:
        return Fault(code=self.code, details=dict(self.details))


class ConfigurationError(ExplorerError):
    """Document root or browse root cannot be established."""


class DocumentRootError(ConfigurationError):
    code = DOCUMENT_ROOT_FAULT

    def __init__(self, path: str) -> None:
        super().__init__(f"document root is not a directory: {path!r}", path=path)
        self.path = path


class RootError(ConfigurationError):
    code = ROOT_FAULT

    def __init__(self, path: str) -> None:
        super().__init__(f"browse root is not a directory: {path!r}", path=path)
        self.path = path


class ContainmentError(ExplorerError):
    """Requested path does not exist or escapes the browse root."""

    code = CONTAINMENT_FAULT

    def __init__(self, param: str, value: str, path: str) -> None:
        super().__init__(
            f"{param or 'path'}={value!r} does not resolve under root",
            param=param,
            value=value,
            path=path,
        )
        self.param = param
        self.value = value
        self.path = path


class FavoritesPersistError(ExplorerError):
    """Favorites sidecar could not be written."""

    code = FAVORITES_FAULT

    def __init__(self, path: str, param: str, item: str, reason: str = "") -> None:
        message = f"could not write favorites file {path!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, favorites=path, param=param, value=item)
        self.path = path
        self.param = param
        self.item = item


class FavoritesReadError(ExplorerError):
    """Favorites sidecar exists but could not be read."""

    code = FAVORITES_FAULT

    def __init__(self, path: str, param: str | None = None, item: str | None = None, reason: str = "") -> None:
        message = f"could not read favorites file {path!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, favorites=path, param=param, value=item)
        self.path = path
        self.param = param
        self.item = item


__all__ = [
    "DOCUMENT_ROOT_FAULT",
    "ROOT_FAULT",
    "CONTAINMENT_FAULT",
    "FAVORITES_FAULT",
    "Fault",
    "ExplorerError",
    "ConfigurationError",
    "DocumentRootError",
    "RootError",
    "ContainmentError",
    "FavoritesPersistError",
    "FavoritesReadError",
]
