"""Path validation utilities."""

from __future__ import annotations

from pathlib import Path

ERR_NULL_BYTES = "path contains null bytes"
ERR_ESCAPES_BASE = "path escapes base directory"
ERR_NOT_EXIST = "path does not exist"


class PathValidationError(ValueError):
    """Raised when a configured path is invalid or unsafe."""


def validate_path(
    path: str | Path,
    *,
    base: str | Path | None = None,
    contain: bool = False,
    must_exist: bool = False,
) -> Path:
    """Return a sanitized absolute path.

    Parameters
    ----------
    path:
        Configured path. Relative paths are resolved against ``base`` when
        one is given, otherwise against the current directory.
    base:
        Optional directory relative paths are anchored to.
    contain:
        When ``True`` the resolved path must lie inside ``base``. Locale
        trees shared between projects usually live next to the project, so
        containment is opt-in.
    must_exist:
        If ``True`` the path must already exist.

    Raises:
    ------
    PathValidationError:
        If the path contains invalid characters, escapes ``base`` while
        ``contain`` is set, or doesn't exist when required.
    """
    if "\x00" in str(path):
        raise PathValidationError(ERR_NULL_BYTES)

    p = Path(path)
    if base is not None:
        base_path = Path(base).resolve()
        candidate = p.resolve() if p.is_absolute() else (base_path / p).resolve()
        if contain and base_path not in [candidate, *candidate.parents]:
            raise PathValidationError(ERR_ESCAPES_BASE)
    else:
        candidate = p.resolve()
    if must_exist and not candidate.exists():
        raise PathValidationError(ERR_NOT_EXIST)
    return candidate


__all__ = ["PathValidationError", "validate_path"]
