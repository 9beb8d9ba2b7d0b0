"""Interfaces of the hosting editor.

The editor owns documents and rendering. Sessions only need a text snapshot
per document and somewhere to put the computed annotations.
"""

from __future__ import annotations

import bisect
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from iris_i18n.planner import HoverAnnotation, InlineAnnotation
from iris_i18n.utils import logger


class Document(Protocol):
    """Immutable snapshot of an open editor document."""

    @property
    def path(self) -> Path: ...

    @property
    def text(self) -> str: ...

    @property
    def language_id(self) -> str | None: ...

    def position_at(self, offset: int) -> tuple[int, int]: ...


class AnnotationSink(Protocol):
    """Receives the annotation sets of a document, replacing previous ones."""

    def set_hover_annotations(
        self, document: Document, annotations: Sequence[HoverAnnotation]
    ) -> None: ...

    def set_inline_annotations(
        self, document: Document, annotations: Sequence[InlineAnnotation]
    ) -> None: ...


@dataclass(frozen=True)
class TextDocument:
    """In-memory :class:`Document` built from a path and its text."""

    path: Path
    text: str
    language_id: str | None = None
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path).resolve())
        starts = [0]
        starts.extend(i + 1 for i, char in enumerate(self.text) if char == "\n")
        object.__setattr__(self, "_line_starts", tuple(starts))

    @classmethod
    def from_file(cls, path: str | Path, language_id: str | None = None) -> TextDocument:
        """Read ``path`` from disk into a document snapshot."""
        return cls(Path(path), Path(path).read_text(encoding="utf-8"), language_id)

    def position_at(self, offset: int) -> tuple[int, int]:
        """Return the zero-based ``(line, column)`` of ``offset``."""
        offset = max(0, min(offset, len(self.text)))
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line, offset - self._line_starts[line]

    def offset_at(self, line: int, column: int) -> int:
        """Return the character offset of a zero-based ``(line, column)``."""
        line = max(0, min(line, len(self._line_starts) - 1))
        return min(self._line_starts[line] + max(column, 0), len(self.text))


class LoggingSink:
    """Sink that reports annotation sets through the package logger."""

    def set_hover_annotations(
        self, document: Document, annotations: Sequence[HoverAnnotation]
    ) -> None:
        for annotation in annotations:
            line, column = document.position_at(annotation.start)
            logger.info(
                "%s:%d:%d hover %s", document.path, line + 1, column + 1,
                annotation.text.replace("\n", " | "),
            )

    def set_inline_annotations(
        self, document: Document, annotations: Sequence[InlineAnnotation]
    ) -> None:
        for annotation in annotations:
            line, column = document.position_at(annotation.start)
            logger.info(
                "%s:%d:%d inline %s", document.path, line + 1, column + 1, annotation.text
            )


__all__ = ["AnnotationSink", "Document", "LoggingSink", "TextDocument"]
