"""Command line interface for inspecting locale trees and previews."""

from __future__ import annotations

import argparse
import json
import sys
import typing as t
from pathlib import Path
from typing import Self

from PySide6.QtCore import QCoreApplication

from iris_i18n.config import DESCRIPTOR_NAME, ConfigError, load_descriptor
from iris_i18n.host import LoggingSink, TextDocument
from iris_i18n.locales import IndexBuildError, build_index
from iris_i18n.manager import SessionManager
from iris_i18n.planner import Selection, plan
from iris_i18n.scanner import scan
from iris_i18n.utils import configure_logging

_Handler = t.Callable[[argparse.Namespace], int]


class CliError(RuntimeError):
    """Raised when CLI arguments cannot be processed."""

    @classmethod
    def unsupported_command(cls, command: str) -> Self:
        return cls(f"unsupported command: {command}")

    @classmethod
    def missing_file(cls, path: Path) -> Self:
        return cls(f"file not found: {path}")

    @classmethod
    def no_project_root(cls, path: Path) -> Self:
        return cls(f"no {DESCRIPTOR_NAME} found above {path}")

    @classmethod
    def invalid_cursor(cls, value: str) -> Self:
        return cls(f"invalid cursor {value!r}; expected LINE:COLUMN")

    @classmethod
    def from_error(cls, exc: Exception) -> Self:
        return cls(str(exc))


def main(argv: t.Sequence[str] | None = None) -> int:
    """Parse *argv* and dispatch the requested command."""
    parser = _create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - argparse handles usage exits
        code = exc.code
        return code if isinstance(code, int) else 1

    configure_logging(args.log_level or ("INFO" if args.command == "watch" else "WARNING"))
    try:
        handler = _resolve_handler(args.command)
        return handler(args)
    except CliError as exc:
        _write_line(sys.stderr, str(exc))
        return 2


def _resolve_handler(command: str) -> _Handler:
    handlers: dict[str, _Handler] = {
        "index": _handle_index,
        "scan": _handle_scan,
        "preview": _handle_preview,
        "watch": _handle_watch,
    }
    try:
        return handlers[command]
    except KeyError as exc:
        raise CliError.unsupported_command(command) from exc


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iris-i18n",
        description="Preview translations of ctx.Tr() lookups.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR); watch defaults to INFO.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser(
        "index",
        help="Print the translation index of a locale tree as JSON.",
    )
    index_parser.add_argument("locale_root", type=Path, help="Locale directory.")

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the translation keys referenced by a file.",
    )
    scan_parser.add_argument("file", type=Path, help="Source file to scan.")

    preview_parser = subparsers.add_parser(
        "preview",
        help="Show the annotations a file would receive.",
    )
    preview_parser.add_argument("file", type=Path, help="Source file to annotate.")
    preview_parser.add_argument(
        "--root",
        type=Path,
        help=f"Project root; defaults to the nearest directory with {DESCRIPTOR_NAME}.",
    )
    preview_parser.add_argument(
        "--cursor",
        help="Cursor position as 1-based LINE:COLUMN.",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Keep sessions for project roots alive and log annotation updates.",
    )
    watch_parser.add_argument("roots", type=Path, nargs="+", help="Project roots.")
    watch_parser.add_argument("--open", type=Path, help="File to treat as focused.")

    return parser


def _handle_index(args: argparse.Namespace) -> int:
    try:
        index = build_index(args.locale_root)
    except IndexBuildError as exc:
        raise CliError.from_error(exc) from exc
    sys.stdout.write(json.dumps(index, indent=2, ensure_ascii=False) + "\n")
    return 0


def _handle_scan(args: argparse.Namespace) -> int:
    document = _read_document(args.file)
    lines: list[str] = []
    for reference in scan(document.text):
        line, column = document.position_at(reference.start)
        lines.append(f"{line + 1}:{column + 1} {reference.key}")
    _write_lines(sys.stdout, lines)
    return 0


def _handle_preview(args: argparse.Namespace) -> int:
    document = _read_document(args.file)
    root = args.root.resolve() if args.root else find_project_root(document.path)
    try:
        config = load_descriptor(root)
        index = build_index(config.locale_path)
    except (ConfigError, IndexBuildError) as exc:
        raise CliError.from_error(exc) from exc

    selection = _parse_cursor(document, args.cursor) if args.cursor else None
    result = plan(scan(document.text), index, config.display_language, selection)
    lines: list[str] = []
    for annotation in result.hover:
        line, column = document.position_at(annotation.start)
        lines.append(f"{line + 1}:{column + 1} {annotation.key}")
        lines.extend(f"    {code}: {value}" for code, value in annotation.lines)
    for inline in result.inline:
        line, column = document.position_at(inline.start)
        lines.append(f"{line + 1}:{column + 1} {inline.key} => {inline.text}")
    _write_lines(sys.stdout, lines)
    return 0


def _handle_watch(args: argparse.Namespace) -> int:
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    manager = SessionManager(LoggingSink())
    try:
        manager.set_roots(args.roots)
        if args.open is not None:
            manager.document_focused(_read_document(args.open))
        return _run_event_loop(app)
    finally:
        manager.close()


def _run_event_loop(app: t.Any) -> int:  # pragma: no cover - blocks until quit
    try:
        return int(app.exec())
    except KeyboardInterrupt:
        return 0


def find_project_root(start: Path) -> Path:
    """Return the nearest directory above ``start`` holding a descriptor."""
    for candidate in [start, *start.parents]:
        if (candidate / DESCRIPTOR_NAME).is_file():
            return candidate
    raise CliError.no_project_root(start)


def _read_document(path: Path) -> TextDocument:
    if not path.is_file():
        raise CliError.missing_file(path)
    try:
        return TextDocument.from_file(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise CliError.from_error(exc) from exc


def _parse_cursor(document: TextDocument, value: str) -> Selection:
    line_s, sep, column_s = value.partition(":")
    try:
        line = int(line_s)
        column = int(column_s) if sep else 1
    except ValueError as exc:
        raise CliError.invalid_cursor(value) from exc
    if line < 1 or column < 1:
        raise CliError.invalid_cursor(value)
    return Selection.at(document.offset_at(line - 1, column - 1))


def _write_line(stream: t.TextIO, text: str) -> None:
    stream.write(f"{text}\n")


def _write_lines(stream: t.TextIO, lines: t.Iterable[str]) -> None:
    collected = list(lines)
    if not collected:
        return
    stream.write("\n".join(collected) + "\n")


__all__ = ["CliError", "find_project_root", "main"]
