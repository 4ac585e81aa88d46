"""Persistent JSON config helpers.

Stores the default browse root, favorites settings, classification overrides
and presentation preferences. All access is defensive: malformed or missing
config falls back safely to built-in defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .classifier import ContentClassifier, normalize_extension
from .content import DEFAULT_STYLE
from .navigation import Explorer

logger = logging.getLogger(__name__)

APP_NAME = "fileexplorer"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks browsing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)


def _load_string(key: str, config: dict[str, object] | None = None) -> str | None:
    """Return a stripped non-empty string value or ``None``."""
    value = (load_config() if config is None else config).get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _load_bool(key: str, default: bool, config: dict[str, object] | None = None) -> bool:
    """Only explicit booleans are accepted; anything else yields ``default``."""
    value = (load_config() if config is None else config).get(key)
    return value if isinstance(value, bool) else default


def _save_value(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_root(config: dict[str, object] | None = None) -> str | None:
    return _load_string("root", config)


def save_root(root: Path | str) -> None:
    """Persist the default browse root as an absolute path."""
    stripped = str(root).strip()
    if not stripped:
        return
    _save_value("root", str(Path(stripped).expanduser().resolve()))


def load_document_root(config: dict[str, object] | None = None) -> str | None:
    return _load_string("document_root", config)


def load_favorites_path(config: dict[str, object] | None = None) -> str | None:
    return _load_string("favorites_path", config)


def load_use_favorites(config: dict[str, object] | None = None) -> bool:
    return _load_bool("use_favorites", True, config)


def save_use_favorites(use_favorites: bool) -> None:
    _save_value("use_favorites", bool(use_favorites))


def load_show_hidden(config: dict[str, object] | None = None) -> bool:
    """Return persisted hidden-file visibility preference."""
    return _load_bool("show_hidden", False, config)


def save_show_hidden(show_hidden: bool) -> None:
    """Persist hidden-file visibility preference as a boolean."""
    _save_value("show_hidden", bool(show_hidden))


def load_style(config: dict[str, object] | None = None) -> str:
    """Pygments style used for markup files."""
    return _load_string("style", config) or DEFAULT_STYLE


def load_url_prefix(config: dict[str, object] | None = None) -> str:
    return _load_string("url_prefix", config) or "/"


def load_follow_links(config: dict[str, object] | None = None) -> list[str] | None:
    """Return configured follow-link extensions, ``None`` when unset/invalid.

    Non-string items are dropped; an explicit empty list disables direct
    links entirely.
    """
    value = (load_config() if config is None else config).get("follow_links")
    if not isinstance(value, list):
        return None
    extensions: list[str] = []
    for item in value:
        if not isinstance(item, str):
            continue
        extension = normalize_extension(item)
        if extension and extension not in extensions:
            extensions.append(extension)
    return extensions


def load_contents(config: dict[str, object] | None = None) -> dict[str, str | None]:
    """Return extension -> category-name overrides.

    A ``null`` value removes the extension from the table. Invalid keys or
    values are dropped.
    """
    value = (load_config() if config is None else config).get("contents")
    if not isinstance(value, dict):
        return {}
    contents: dict[str, str | None] = {}
    for raw_extension, category in value.items():
        if not isinstance(raw_extension, str):
            continue
        extension = normalize_extension(raw_extension)
        if not extension:
            continue
        if category is None or isinstance(category, str):
            contents[extension] = category
    return contents


def build_classifier(config: dict[str, object] | None = None) -> ContentClassifier:
    """Default classifier with configured follow links and categories applied."""
    if config is None:
        config = load_config()
    classifier = ContentClassifier()

    follow_links = load_follow_links(config)
    if follow_links is not None:
        classifier.clear_follow_links()
        for extension in follow_links:
            classifier.add_follow_link(extension)

    for extension, category in load_contents(config).items():
        if category is None:
            classifier.remove_contents(extension)
            continue
        try:
            classifier.set_contents(extension, category)
        except ValueError as exc:
            logger.warning("ignoring content category for %r: %s", extension, exc)
    return classifier


def explorer_from_config(**overrides: object) -> Explorer:
    """Build an ``Explorer`` from persisted config.

    Keyword ``overrides`` whose value is not ``None`` replace config values
    and are passed straight to ``Explorer``.
    """
    config = load_config()
    settings: dict[str, object] = {
        "root": load_root(config),
        "document_root": load_document_root(config),
        "favorites_path": load_favorites_path(config),
        "use_favorites": load_use_favorites(config),
        "show_hidden": load_show_hidden(config),
        "classifier": build_classifier(config),
        "style": load_style(config),
        "url_prefix": load_url_prefix(config),
    }
    for key, value in overrides.items():
        if value is not None:
            settings[key] = value
    root = settings.pop("root")
    return Explorer(root, **settings)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_root",
    "save_root",
    "load_document_root",
    "load_favorites_path",
    "load_use_favorites",
    "save_use_favorites",
    "load_show_hidden",
    "save_show_hidden",
    "load_style",
    "load_url_prefix",
    "load_follow_links",
    "load_contents",
    "build_classifier",
    "explorer_from_config",
]
