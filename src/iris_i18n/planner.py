"""Turn scanned references into hover and inline annotations.

A reference under the selection gets an inline preview in the display
language so no popup covers the text being edited. Every other reference
gets a hover listing all locales. Missing translations show the raw key.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from iris_i18n.scanner import Reference, scan

HOVER_TITLE = "#### iris-i18n"
_LINE_OPEN = '<div style="line-height:20px;">'
_LINE_CLOSE = "</div>"


@dataclass(frozen=True)
class Selection:
    """Half-open ``[start, end)`` character offsets of the editor selection."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @classmethod
    def at(cls, offset: int) -> Selection:
        """Return a collapsed selection (a plain cursor) at ``offset``."""
        return cls(offset, offset)

    def touches(self, start: int, end: int) -> bool:
        """Return ``True`` when ``[start, end)`` overlaps or borders the selection."""
        return self.start <= end and start <= self.end


@dataclass(frozen=True)
class InlineStyle:
    """Rendering hint for inline previews."""

    color: str = "#9e9e9e"
    border: str = "1px dashed #9e9e9e"
    margin: str = "0 0 0 0.5em"


DEFAULT_INLINE_STYLE = InlineStyle()


@dataclass(frozen=True)
class HoverAnnotation:
    """Multi-locale summary attached to a reference's key range."""

    start: int
    end: int
    key: str
    lines: tuple[tuple[str, str], ...]

    @property
    def text(self) -> str:
        """Plain ``locale: text`` lines."""
        return "\n".join(f"{code}: {value}" for code, value in self.lines)

    @property
    def markdown(self) -> str:
        """Hover message with a title and one HTML line per locale."""
        body = (_LINE_CLOSE + _LINE_OPEN).join(
            f"{code}: {value}" for code, value in self.lines
        )
        return f"{HOVER_TITLE} \n{_LINE_OPEN}{body}{_LINE_CLOSE}"


@dataclass(frozen=True)
class InlineAnnotation:
    """Single display-language label rendered next to a reference."""

    start: int
    end: int
    key: str
    text: str
    style: InlineStyle = field(default=DEFAULT_INLINE_STYLE)


@dataclass(frozen=True)
class Plan:
    """Annotations for one document, both lists in source order."""

    hover: tuple[HoverAnnotation, ...] = ()
    inline: tuple[InlineAnnotation, ...] = ()


EMPTY_PLAN = Plan()


def translate(index: Mapping[str, Mapping[str, str]], locale: str, key: str) -> str:
    """Return the ``locale`` translation of ``key`` or the key itself."""
    value = index.get(locale, {}).get(key)
    return value if value else key


def hover_for(reference: Reference, index: Mapping[str, Mapping[str, str]]) -> HoverAnnotation:
    """Build the hover summary for ``reference`` across every locale."""
    lines = tuple((code, translate(index, code, reference.key)) for code in index)
    return HoverAnnotation(reference.start, reference.end, reference.key, lines)


def plan(
    references: Iterable[Reference],
    index: Mapping[str, Mapping[str, str]],
    preferred_locale: str | None,
    selection: Selection | None,
    *,
    style: InlineStyle = DEFAULT_INLINE_STYLE,
) -> Plan:
    """Split ``references`` into hover and inline annotations.

    Args:
        references: Scanner output for the document.
        index: Translation index of the owning project.
        preferred_locale: Locale shown inline; ``None`` disables inline
            previews.
        selection: Current selection; ``None`` means nothing is selected and
            every reference gets a hover.
        style: Rendering hint attached to inline previews.

    Returns:
        Plan: Hover and inline annotations in source order.
    """
    hover: list[HoverAnnotation] = []
    inline: list[InlineAnnotation] = []
    for reference in references:
        if selection is None or not selection.touches(reference.start, reference.end):
            hover.append(hover_for(reference, index))
        elif preferred_locale:
            inline.append(
                InlineAnnotation(
                    reference.start,
                    reference.end,
                    reference.key,
                    translate(index, preferred_locale, reference.key),
                    style,
                )
            )
    return Plan(tuple(hover), tuple(inline))


def plan_text(
    text: str,
    index: Mapping[str, Mapping[str, str]],
    preferred_locale: str | None,
    selection: Selection | None,
) -> Plan:
    """Scan ``text`` and plan its annotations in one step."""
    return plan(scan(text), index, preferred_locale, selection)


__all__ = [
    "DEFAULT_INLINE_STYLE",
    "EMPTY_PLAN",
    "HoverAnnotation",
    "InlineAnnotation",
    "InlineStyle",
    "Plan",
    "Selection",
    "hover_for",
    "plan",
    "plan_text",
    "translate",
]
