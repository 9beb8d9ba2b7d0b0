"""Live translation previews for ``ctx.Tr("...")`` call sites."""

from iris_i18n.locales import IndexBuildError, TranslationIndex, build_index
from iris_i18n.manager import SessionManager
from iris_i18n.planner import HoverAnnotation, InlineAnnotation, Plan, Selection, plan
from iris_i18n.scanner import Reference, scan
from iris_i18n.utils import configure_logging, logger

__all__ = [
    "HoverAnnotation",
    "IndexBuildError",
    "InlineAnnotation",
    "Plan",
    "Reference",
    "Selection",
    "SessionManager",
    "TranslationIndex",
    "build_index",
    "configure_logging",
    "logger",
    "plan",
    "scan",
]
