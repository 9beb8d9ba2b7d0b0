"""Per-project annotation state.

A :class:`WorkspaceSession` owns everything derived for one project root: the
descriptor settings, the translation index, the locale watch, the focused
document with its scanned references, and the selection throttle. Nothing in
it is shared with other sessions.
"""

from __future__ import annotations

from pathlib import Path

from iris_i18n.config import ConfigError, SessionConfig, load_descriptor
from iris_i18n.host import AnnotationSink, Document
from iris_i18n.locales import IndexBuildError, TranslationIndex, build_index
from iris_i18n.planner import EMPTY_PLAN, Plan, Selection, plan
from iris_i18n.scanner import Reference, scan
from iris_i18n.throttle import DEFAULT_INTERVAL_MS, Throttle
from iris_i18n.utils import is_within, logger
from iris_i18n.watcher import LocaleWatch, watch


class WorkspaceSession:
    """Annotation engine bound to a single project root."""

    def __init__(
        self,
        root: Path,
        config: SessionConfig,
        sink: AnnotationSink,
        *,
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ) -> None:
        """Create an inactive session; call :meth:`start` to load and watch."""
        self.root = root
        self.config = config
        self.sink = sink
        self.index: TranslationIndex = {}
        self.document: Document | None = None
        self.references: list[Reference] = []
        self.selection: Selection | None = None
        self.last_plan: Plan = EMPTY_PLAN
        self.disposed = False
        self._locale_watch: LocaleWatch | None = None
        self._throttle = Throttle(self.render, interval_ms)

    @classmethod
    def open(
        cls,
        root: Path,
        sink: AnnotationSink,
        *,
        interval_ms: int = DEFAULT_INTERVAL_MS,
    ) -> WorkspaceSession:
        """Load the descriptor of ``root`` and start a session for it.

        Raises:
            ConfigError: If the descriptor is missing or unusable.
        """
        session = cls(root, load_descriptor(root), sink, interval_ms=interval_ms)
        session.start()
        return session

    def start(self) -> None:
        """Build the index and begin watching the locale tree."""
        self._rebuild()
        self._watch_locales()
        logger.info(
            "Session started for %s (locales: %s)",
            self.root,
            ", ".join(self.index) or "none",
        )

    def contains(self, path: Path) -> bool:
        """Return ``True`` when ``path`` lies inside this project root."""
        return is_within(path, self.root)

    def accepts(self, document: Document) -> bool:
        """Return ``True`` when ``document`` should be annotated here."""
        return self.contains(document.path) and self.config.accepts_language(
            document.language_id
        )

    def is_active_document(self, document: Document) -> bool:
        return self.document is not None and self.document.path == document.path

    def focus(self, document: Document | None) -> None:
        """Make ``document`` the annotated document, clearing the previous one."""
        if self.disposed:
            return
        if self.document is not None and (
            document is None or self.document.path != document.path
        ):
            self._clear(self.document)
            self.selection = None
        self._throttle.cancel()
        if document is None or not self.accepts(document):
            self.document = None
            self.references = []
            return
        self.document = document
        self.references = scan(document.text)
        self.render()

    def update_text(self, document: Document) -> None:
        """Re-scan and re-plan after an edit of the active document."""
        if self.disposed or not self.is_active_document(document):
            return
        self.document = document
        self.references = scan(document.text)
        self.render()

    def update_selection(self, document: Document, selection: Selection | None) -> None:
        """Record the selection and schedule a rate-limited re-plan."""
        if self.disposed or not self.is_active_document(document):
            return
        self.selection = selection
        self._throttle.trigger()

    def reload_config(self) -> None:
        """Re-read the descriptor, then rebuild and re-plan.

        A descriptor that cannot be parsed leaves the session untouched.
        """
        if self.disposed:
            return
        try:
            config = load_descriptor(self.root)
        except ConfigError as exc:
            logger.error("Keeping previous settings for %s: %s", self.root, exc)
            return
        self.config = config
        self._watch_locales()
        if self.document is not None and not self.accepts(self.document):
            self.focus(None)
        self.rebuild_index()

    def rebuild_index(self) -> None:
        """Re-read the whole locale tree and re-plan the active document."""
        if self.disposed:
            return
        self._rebuild()
        self.render()

    def render(self) -> None:
        """Plan the active document and push both annotation sets to the sink."""
        if self.disposed or self.document is None:
            return
        self.last_plan = plan(
            self.references,
            self.index,
            self.config.display_language,
            self.selection,
        )
        self.sink.set_hover_annotations(self.document, self.last_plan.hover)
        self.sink.set_inline_annotations(self.document, self.last_plan.inline)

    def dispose(self) -> None:
        """Stop watching, clear rendered annotations and drop all state."""
        if self.disposed:
            return
        self._throttle.cancel()
        if self._locale_watch is not None:
            self._locale_watch.close()
            self._locale_watch = None
        if self.document is not None:
            self._clear(self.document)
        self.disposed = True
        self.document = None
        self.references = []
        self.selection = None
        self.index = {}
        self.last_plan = EMPTY_PLAN
        self._throttle.deleteLater()
        logger.info("Session closed for %s", self.root)

    def _rebuild(self) -> None:
        try:
            self.index = build_index(self.config.locale_path)
        except IndexBuildError as exc:
            logger.warning("No translations for %s (%s): %s", self.root, exc.reason, exc)
            self.index = {}

    def _watch_locales(self) -> None:
        if self._locale_watch is not None:
            self._locale_watch.close()
        self._locale_watch = watch(self.config.locale_path, self.rebuild_index)

    def _clear(self, document: Document) -> None:
        self.last_plan = EMPTY_PLAN
        self.sink.set_hover_annotations(document, ())
        self.sink.set_inline_annotations(document, ())


__all__ = ["WorkspaceSession"]
