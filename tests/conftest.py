"""Shared fixtures for locale trees, projects and annotation sinks."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from iris_i18n.config import DESCRIPTOR_NAME
from iris_i18n.host import Document, TextDocument
from iris_i18n.planner import HoverAnnotation, InlineAnnotation

type LocaleSpec = dict[str, dict[str, dict[str, str]]]


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_locales(root: Path, locales: LocaleSpec) -> Path:
    """Create ``<root>/<locale>/<document>.json`` files from ``locales``."""
    root.mkdir(parents=True, exist_ok=True)
    for code, documents in locales.items():
        (root / code).mkdir(parents=True, exist_ok=True)
        for name, entries in documents.items():
            write_json(root / code / f"{name}.json", entries)
    return root


class RecordingSink:
    """Annotation sink remembering the latest sets and every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path, tuple[object, ...]]] = []
        self.hover: dict[Path, tuple[HoverAnnotation, ...]] = {}
        self.inline: dict[Path, tuple[InlineAnnotation, ...]] = {}

    def set_hover_annotations(
        self, document: Document, annotations: Sequence[HoverAnnotation]
    ) -> None:
        self.calls.append(("hover", document.path, tuple(annotations)))
        self.hover[document.path] = tuple(annotations)

    def set_inline_annotations(
        self, document: Document, annotations: Sequence[InlineAnnotation]
    ) -> None:
        self.calls.append(("inline", document.path, tuple(annotations)))
        self.inline[document.path] = tuple(annotations)

    def hover_texts(self, path: Path) -> list[str]:
        return [annotation.text for annotation in self.hover.get(path, ())]

    def inline_texts(self, path: Path) -> list[str]:
        return [annotation.text for annotation in self.inline.get(path, ())]


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory creating a project root with descriptor and locales."""

    def factory(
        name: str = "project",
        *,
        locales: LocaleSpec | None = None,
        display_language: str | None = "fr",
        descriptor: object | None = None,
    ) -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        write_locales(
            root / "locales",
            locales
            if locales is not None
            else {
                "en": {"common": {"greet": "Hi", "bye": "Bye"}},
                "fr": {"common": {"greet": "Salut"}},
            },
        )
        if descriptor is None:
            descriptor = {"locale_path": "locales"}
            if display_language is not None:
                descriptor["display_language"] = display_language
        write_json(root / DESCRIPTOR_NAME, descriptor)
        return root.resolve()

    return factory


@pytest.fixture
def make_document() -> Callable[..., TextDocument]:
    def factory(path: Path, text: str, language_id: str | None = "go") -> TextDocument:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return TextDocument(path, text, language_id)

    return factory


@pytest.fixture
def json_file() -> Callable[[Path, object], Path]:
    return write_json


@pytest.fixture
def locale_tree() -> Callable[[Path, LocaleSpec], Path]:
    return write_locales
