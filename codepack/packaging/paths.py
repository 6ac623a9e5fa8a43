"""Path validation for files recovered from untrusted model output.

This is the only barrier between model text and the file system: every path
that ends up in an artifact passes through ``validate_path``.
"""

from pathlib import PurePosixPath, PureWindowsPath

import structlog

logger = structlog.get_logger(__name__)

# Template sources of the tool itself; a generated project may not ship
# replacements for them.
RESERVED_PREFIX = "templates"


def normalize_path(raw: str) -> str:
    """Canonical separators, surrounding whitespace trimmed, one leading ``./`` dropped."""
    path = raw.replace("\\", "/").strip()
    if path.startswith("./"):
        path = path[2:]
    return path


def rejection_reason(path: str) -> str | None:
    """Return why a normalized path is unsafe, or None if it is acceptable."""
    if not path:
        return "empty"

    if PurePosixPath(path).is_absolute() or PureWindowsPath(path).drive or PureWindowsPath(path).root:
        return "absolute"

    segments = path.split("/")
    if ".." in segments:
        return "traversal"

    meaningful = [segment for segment in segments if segment not in ("", ".")]
    if not meaningful:
        return "empty"
    if meaningful[0] == RESERVED_PREFIX and (len(meaningful) > 1 or path.endswith("/")):
        return "reserved_prefix"

    # Names a directory, not a file
    if segments[-1] in ("", "."):
        return "directory"

    return None


def validate_path(raw: str) -> str | None:
    """Normalize a candidate relative path.

    Returns:
        The normalized path, or None when it is empty, absolute, names a
        directory, is under the reserved template prefix or contains a ``..``
        segment.
    """
    path = normalize_path(raw)
    reason = rejection_reason(path)
    if reason is not None:
        logger.warning("packaging_path_rejected", raw_path=raw, reason=reason)
        return None
    return path
