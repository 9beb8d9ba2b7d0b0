"""Project descriptor parsing.

A project root opts in by carrying a ``.iris-i18n.json`` descriptor::

    {"locale_path": "locales", "display_language": "en-US"}

``locale_path`` is required and resolved against the project root.
``display_language`` selects the locale used for inline previews; without it
only hover annotations are produced. ``languages`` optionally restricts the
editor language ids that get annotated.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from iris_i18n.paths import PathValidationError, validate_path

DESCRIPTOR_NAME = ".iris-i18n.json"

ERR_UNREADABLE = "Could not read descriptor {path}: {error}"
ERR_MALFORMED = "Descriptor {path} is not valid JSON: {error}"
ERR_NOT_OBJECT = "Descriptor {path} must contain a JSON object"
ERR_MISSING_FIELD = "Descriptor {path} is missing required field: {key}"
ERR_FIELD_TYPE = "Descriptor {path} field '{key}' must be {kind}"
ERR_LOCALE_PATH = "Descriptor {path} has an unusable locale_path: {error}"


class ConfigError(ValueError):
    """Raised when a project descriptor is missing, malformed, or incomplete."""


@dataclass(frozen=True)
class SessionConfig:
    """Settings resolved from one project descriptor."""

    locale_path: Path
    display_language: str | None = None
    languages: tuple[str, ...] | None = None

    def accepts_language(self, language_id: str | None) -> bool:
        """Return ``True`` when documents of ``language_id`` get annotated."""
        if self.languages is None or language_id is None:
            return True
        return language_id in self.languages


def descriptor_path(root: str | Path) -> Path:
    """Return the descriptor location for the project ``root``."""
    return Path(root) / DESCRIPTOR_NAME


def parse_descriptor(data: Any, *, root: Path, source: Path) -> SessionConfig:
    """Validate decoded descriptor ``data`` and build a :class:`SessionConfig`."""
    if not isinstance(data, Mapping):
        raise ConfigError(ERR_NOT_OBJECT.format(path=source))

    raw_path = data.get("locale_path")
    if raw_path is None:
        raise ConfigError(ERR_MISSING_FIELD.format(path=source, key="locale_path"))
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise ConfigError(
            ERR_FIELD_TYPE.format(path=source, key="locale_path", kind="a non-empty string")
        )
    try:
        locale_path = validate_path(raw_path, base=root)
    except PathValidationError as exc:
        raise ConfigError(ERR_LOCALE_PATH.format(path=source, error=exc)) from exc

    display = data.get("display_language")
    if display is not None and not isinstance(display, str):
        raise ConfigError(
            ERR_FIELD_TYPE.format(path=source, key="display_language", kind="a string")
        )

    languages = data.get("languages")
    if languages is not None:
        if not isinstance(languages, list) or not all(
            isinstance(item, str) for item in languages
        ):
            raise ConfigError(
                ERR_FIELD_TYPE.format(path=source, key="languages", kind="a list of strings")
            )
        languages = tuple(languages)

    return SessionConfig(
        locale_path=locale_path,
        display_language=display or None,
        languages=languages,
    )


def load_descriptor(root: str | Path) -> SessionConfig:
    """Read and parse the descriptor of the project ``root``.

    Raises:
        ConfigError: If the descriptor cannot be read, is not valid JSON, or
            lacks a usable ``locale_path``.
    """
    root_path = Path(root).resolve()
    path = descriptor_path(root_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(ERR_UNREADABLE.format(path=path, error=exc)) from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ConfigError(ERR_MALFORMED.format(path=path, error=exc)) from exc
    return parse_descriptor(data, root=root_path, source=path)


__all__ = [
    "DESCRIPTOR_NAME",
    "ConfigError",
    "SessionConfig",
    "descriptor_path",
    "load_descriptor",
    "parse_descriptor",
]
