"""Build the in-memory translation index from a locale tree.

Expected layout::

    <locale_root>/
        en/
            common.json
            errors.json
        fr/
            common.json
        de.json

Every immediate subdirectory is a locale; its ``*.json`` documents are merged
into one flat mapping. A ``<code>.json`` file directly in the root is read as
an additional document of locale ``<code>`` before that locale's directory.
Names are processed in lexicographic order so the later document wins on a
key collision regardless of the filesystem's listing order.

Broken documents never abort a build: they are logged and skipped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from iris_i18n.utils import logger

type TranslationIndex = dict[str, dict[str, str]]
type BuildFailure = Literal["missing-directory", "unreadable-entry", "malformed-document"]

JSON_SUFFIX = ".json"

ERR_MISSING_DIRECTORY = "Locale directory does not exist: {path}"
ERR_UNREADABLE_ENTRY = "Could not read locale document {path}: {error}"
ERR_MALFORMED_DOCUMENT = "Locale document {path} is not valid JSON: {error}"
ERR_NOT_OBJECT = "Locale document {path} must contain a JSON object"


class IndexBuildError(OSError):
    """Raised when a locale tree or one of its documents cannot be loaded."""

    def __init__(self, reason: BuildFailure, message: str) -> None:
        """Store the failure ``reason`` next to the human readable message."""
        super().__init__(message)
        self.reason: BuildFailure = reason


def _is_document(path: Path) -> bool:
    return path.suffix.lower() == JSON_SUFFIX and path.is_file()


def _coerce_document(data: dict[Any, Any], path: Path) -> dict[str, str]:
    """Return the string to string entries of ``data``."""
    entries: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(key, str) and isinstance(value, str):
            entries[key] = value
        else:
            logger.debug("Ignoring non-string entry %r in %s", key, path)
    return entries


def load_document(path: Path) -> dict[str, str]:
    """Parse one locale document into a flat key to string mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IndexBuildError(
            "unreadable-entry", ERR_UNREADABLE_ENTRY.format(path=path, error=exc)
        ) from exc
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise IndexBuildError(
            "malformed-document", ERR_MALFORMED_DOCUMENT.format(path=path, error=exc)
        ) from exc
    if not isinstance(data, dict):
        raise IndexBuildError("malformed-document", ERR_NOT_OBJECT.format(path=path))
    return _coerce_document(data, path)


def _merge_documents(documents: list[Path], into: dict[str, str]) -> None:
    for document in documents:
        try:
            into.update(load_document(document))
        except IndexBuildError as exc:
            logger.warning("Skipping locale document (%s): %s", exc.reason, exc)


def locale_documents(locale_dir: Path) -> list[Path]:
    """Return the JSON documents of one locale directory in merge order."""
    try:
        entries = sorted(locale_dir.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning(
            "Skipping locale (unreadable-entry): %s",
            ERR_UNREADABLE_ENTRY.format(path=locale_dir, error=exc),
        )
        return []
    return [entry for entry in entries if _is_document(entry)]


def build_index(locale_root: str | Path) -> TranslationIndex:
    """Read every locale under ``locale_root`` into a fresh index.

    Raises:
        IndexBuildError: With reason ``missing-directory`` when the root
            itself is absent, or ``unreadable-entry`` when it cannot be
            listed. Problems with individual documents are only logged.
    """
    root = Path(locale_root)
    if not root.is_dir():
        raise IndexBuildError(
            "missing-directory", ERR_MISSING_DIRECTORY.format(path=root)
        )
    try:
        entries = sorted(root.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        raise IndexBuildError(
            "unreadable-entry", ERR_UNREADABLE_ENTRY.format(path=root, error=exc)
        ) from exc

    index: TranslationIndex = {}
    for entry in entries:
        if _is_document(entry):
            _merge_documents([entry], index.setdefault(entry.stem, {}))
    for entry in entries:
        if entry.is_dir():
            _merge_documents(locale_documents(entry), index.setdefault(entry.name, {}))

    logger.debug(
        "Indexed %d locale(s) from %s: %s",
        len(index),
        root,
        ", ".join(f"{code}={len(keys)}" for code, keys in index.items()),
    )
    return dict(sorted(index.items()))


__all__ = [
    "IndexBuildError",
    "TranslationIndex",
    "build_index",
    "load_document",
    "locale_documents",
]
