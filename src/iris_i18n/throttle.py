"""Coalesce bursts of triggers on the Qt event loop."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

DEFAULT_INTERVAL_MS = 100


class Throttle(QObject):
    """Run a callback at most once per interval.

    The first trigger runs immediately and opens a window of ``interval_ms``.
    Triggers inside the window are folded into one trailing call when it
    closes, which opens the next window.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: int = DEFAULT_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        """Bind ``callback`` and prepare the window timer."""
        super().__init__(parent)
        self._callback = callback
        self._pending = False
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def pending(self) -> bool:
        """Return ``True`` when a trailing call is scheduled."""
        return self._pending

    def trigger(self) -> None:
        """Request a call, immediately or at the end of the open window."""
        if self._timer.isActive():
            self._pending = True
            return
        self._timer.start()
        self._callback()

    def cancel(self) -> None:
        """Drop any scheduled call and close the window."""
        self._pending = False
        self._timer.stop()

    def _on_timeout(self) -> None:
        if not self._pending:
            return
        self._pending = False
        self._timer.start()
        self._callback()


__all__ = ["DEFAULT_INTERVAL_MS", "Throttle"]
