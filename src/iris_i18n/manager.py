"""Route editor events to the sessions of the open project roots.

Every tracked root carries a watch on its descriptor. A root without a
usable descriptor stays pending until one appears; deleting the descriptor
of an active root tears its session down and puts the root back to pending.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from iris_i18n.config import ConfigError, descriptor_path
from iris_i18n.host import AnnotationSink, Document
from iris_i18n.planner import Selection
from iris_i18n.session import WorkspaceSession
from iris_i18n.throttle import DEFAULT_INTERVAL_MS
from iris_i18n.utils import logger
from iris_i18n.watcher import FileWatch, watch_file


@dataclass
class _TrackedRoot:
    descriptor_watch: FileWatch
    session: WorkspaceSession | None = None


class SessionManager:
    """Own one :class:`WorkspaceSession` per project root."""

    def __init__(
        self, sink: AnnotationSink, *, interval_ms: int = DEFAULT_INTERVAL_MS
    ) -> None:
        """Create a manager that renders into ``sink``."""
        self.sink = sink
        self.interval_ms = interval_ms
        self.active_document: Document | None = None
        self._roots: dict[Path, _TrackedRoot] = {}

    @property
    def roots(self) -> tuple[Path, ...]:
        """Return every tracked root, active or pending."""
        return tuple(self._roots)

    @property
    def sessions(self) -> dict[Path, WorkspaceSession]:
        """Return the active sessions keyed by root."""
        return {
            root: tracked.session
            for root, tracked in self._roots.items()
            if tracked.session is not None
        }

    def session_for(self, path: Path) -> WorkspaceSession | None:
        """Return the session of the deepest active root containing ``path``."""
        owners = [
            session for session in self.sessions.values() if session.contains(path)
        ]
        if not owners:
            return None
        return max(owners, key=lambda session: len(session.root.parts))

    def add_root(self, root: str | Path) -> WorkspaceSession | None:
        """Track ``root`` and activate it when its descriptor is usable."""
        key = Path(root).resolve()
        if key in self._roots:
            return self._roots[key].session
        watch = watch_file(
            descriptor_path(key), lambda: self._descriptor_changed(key)
        )
        self._roots[key] = _TrackedRoot(watch)
        return self._activate(key)

    def remove_root(self, root: str | Path) -> None:
        """Stop tracking ``root`` and dispose its session."""
        key = Path(root).resolve()
        tracked = self._roots.pop(key, None)
        if tracked is None:
            return
        tracked.descriptor_watch.close()
        if tracked.session is not None:
            tracked.session.dispose()
            tracked.session = None
        logger.info("Project root removed: %s", key)

    def set_roots(self, roots: Iterable[str | Path]) -> None:
        """Reconcile the tracked roots with the editor's open set."""
        wanted = [Path(root).resolve() for root in roots]
        for root in list(self._roots):
            if root not in wanted:
                self.remove_root(root)
        for root in wanted:
            self.add_root(root)

    def document_focused(self, document: Document | None) -> None:
        """Handle the editor switching to ``document`` (``None`` for no editor)."""
        self.active_document = document
        owner = None if document is None else self.session_for(document.path)
        for session in self.sessions.values():
            if session is not owner:
                session.focus(None)
        if owner is not None:
            owner.focus(document)

    def text_changed(self, document: Document) -> None:
        """Handle an edit; only the owning session re-scans, immediately."""
        if self.active_document is not None and self.active_document.path == document.path:
            self.active_document = document
        session = self.session_for(document.path)
        if session is not None:
            session.update_text(document)

    def selection_changed(self, document: Document, selection: Selection | None) -> None:
        """Handle a selection move; re-planning is rate limited per session."""
        session = self.session_for(document.path)
        if session is not None:
            session.update_selection(document, selection)

    def close(self) -> None:
        """Dispose every session and release all watches."""
        for root in list(self._roots):
            self.remove_root(root)

    def _activate(self, root: Path) -> WorkspaceSession | None:
        tracked = self._roots[root]
        if not descriptor_path(root).is_file():
            logger.debug("No descriptor in %s; waiting for one", root)
            return None
        try:
            session = WorkspaceSession.open(root, self.sink, interval_ms=self.interval_ms)
        except ConfigError as exc:
            logger.error("Project root %s stays inactive: %s", root, exc)
            return None
        tracked.session = session
        document = self.active_document
        if document is not None and self.session_for(document.path) is session:
            for other in self.sessions.values():
                if other is not session:
                    other.focus(None)
            session.focus(document)
        return session

    def _descriptor_changed(self, root: Path) -> None:
        tracked = self._roots.get(root)
        if tracked is None:
            return
        if not descriptor_path(root).is_file():
            if tracked.session is not None:
                logger.info("Descriptor removed from %s", root)
                tracked.session.dispose()
                tracked.session = None
            return
        if tracked.session is None:
            self._activate(root)
        else:
            tracked.session.reload_config()


__all__ = ["SessionManager"]
