"""Filesystem subscriptions backed by :class:`QFileSystemWatcher`.

Qt watches individual paths, not trees, so :class:`LocaleWatch` keeps the
watched set in step with the locale tree after every event. Callbacks run on
the thread owning the watcher, inside the Qt event loop.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from PySide6.QtCore import QFileSystemWatcher, QObject

from iris_i18n.locales import JSON_SUFFIX, locale_documents
from iris_i18n.utils import is_within, logger

type ChangeCallback = Callable[[], None]
type FileSignature = tuple[int, int] | None


def _locale_paths(root: Path) -> set[str]:
    """Return the directories and documents making up the locale tree.

    While ``root`` is absent its nearest existing ancestor is returned so the
    tree appearing later is noticed.
    """
    if not root.is_dir():
        ancestor = _nearest_existing(root)
        return set() if ancestor is None else {str(ancestor)}
    paths = {str(root)}
    try:
        entries = list(root.iterdir())
    except OSError:
        return paths
    for entry in entries:
        if entry.is_dir():
            paths.add(str(entry))
            paths.update(str(document) for document in locale_documents(entry))
        elif entry.suffix.lower() == JSON_SUFFIX and entry.is_file():
            paths.add(str(entry))
    return paths


def _nearest_existing(path: Path) -> Path | None:
    for parent in path.parents:
        if parent.is_dir():
            return parent
    return None


def _signature(path: Path) -> FileSignature:
    try:
        stat = path.stat()
    except OSError:
        return None
    return stat.st_mtime_ns, stat.st_size


class LocaleWatch(QObject):
    """Subscription to every change below one locale root."""

    def __init__(
        self, root: Path, on_change: ChangeCallback, parent: QObject | None = None
    ) -> None:
        """Start watching ``root`` and report changes to ``on_change``."""
        super().__init__(parent)
        self.root = root
        self._on_change = on_change
        self._closed = False
        self._watcher = QFileSystemWatcher(self)
        self._watcher.directoryChanged.connect(self._handle_event)
        self._watcher.fileChanged.connect(self._handle_event)
        self._sync()

    @property
    def closed(self) -> bool:
        return self._closed

    def watched(self) -> set[str]:
        """Return the paths currently registered with Qt."""
        return set(self._watcher.directories()) | set(self._watcher.files())

    def close(self) -> None:
        """Release the subscription; no callback fires afterwards."""
        if self._closed:
            return
        self._closed = True
        current = list(self.watched())
        if current:
            self._watcher.removePaths(current)
        self._watcher.deleteLater()

    def _sync(self) -> None:
        wanted = _locale_paths(self.root)
        current = self.watched()
        stale = current - wanted
        if stale:
            self._watcher.removePaths(sorted(stale))
        fresh = wanted - current
        if fresh:
            failed = self._watcher.addPaths(sorted(fresh))
            if failed:
                logger.debug("Could not watch %s", ", ".join(failed))

    def _handle_event(self, path: str) -> None:
        if self._closed:
            return
        self._sync()
        # events on a placeholder ancestor only matter once the tree exists
        if not self.root.is_dir() and not is_within(Path(path), self.root):
            return
        logger.debug("Locale change detected: %s", path)
        self._on_change()


class FileWatch(QObject):
    """Subscription to one file, surviving deletion and atomic replacement.

    The parent directory is watched too so the file's creation is noticed.
    Directory events only fire the callback when the file's modification time,
    size or existence changed.
    """

    def __init__(
        self, path: Path, on_change: ChangeCallback, parent: QObject | None = None
    ) -> None:
        """Start watching ``path`` and report changes to ``on_change``."""
        super().__init__(parent)
        self.path = path
        self._on_change = on_change
        self._closed = False
        self._signature = _signature(path)
        self._watcher = QFileSystemWatcher(self)
        self._watcher.directoryChanged.connect(self._handle_directory)
        self._watcher.fileChanged.connect(self._handle_file)
        if path.parent.is_dir():
            self._watcher.addPath(str(path.parent))
        self._ensure_file_watched()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the subscription; no callback fires afterwards."""
        if self._closed:
            return
        self._closed = True
        current = self._watcher.directories() + self._watcher.files()
        if current:
            self._watcher.removePaths(current)
        self._watcher.deleteLater()

    def _ensure_file_watched(self) -> None:
        target = str(self.path)
        if target not in self._watcher.files() and self.path.is_file():
            self._watcher.addPath(target)

    def _handle_file(self, _path: str) -> None:
        if self._closed:
            return
        self._signature = _signature(self.path)
        self._ensure_file_watched()
        self._on_change()

    def _handle_directory(self, _path: str) -> None:
        if self._closed:
            return
        signature = _signature(self.path)
        if signature == self._signature:
            return
        self._signature = signature
        self._ensure_file_watched()
        self._on_change()


def watch(locale_root: str | Path, on_change: ChangeCallback) -> LocaleWatch:
    """Subscribe ``on_change`` to changes anywhere in the locale tree."""
    return LocaleWatch(Path(locale_root), on_change)


def watch_file(path: str | Path, on_change: ChangeCallback) -> FileWatch:
    """Subscribe ``on_change`` to changes of a single file."""
    return FileWatch(Path(path), on_change)


__all__ = ["FileWatch", "LocaleWatch", "watch", "watch_file"]
