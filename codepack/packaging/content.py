"""Content cleanup for generated and rendered files.

Models routinely wrap a whole file in a code fence or repeat the
``### FILE:`` header inside the body. Both are stripped from source files;
documentation files keep them because fences are real content there.
"""

import re

BOM = "\ufeff"

DOC_SUFFIXES = (".md", ".markdown", ".rst", ".txt", ".adoc")

# A line starting with the file-header marker, e.g. "### FILE: src/lib.rs"
FILE_MARKER_RE = re.compile(r"\A\s*###[ \t]*FILE:[^\n]*(?:\n|\Z)")

# Whole text is one fenced block: opening fence with optional info string,
# content, closing fence of at least the same length, trailing whitespace only.
FULL_FENCE_RE = re.compile(
    r"\A\s*(?P<fence>`{3,})[^\n`]*\n(?P<inner>.*?\n)?(?P=fence)`*\s*\Z",
    re.DOTALL,
)


def is_documentation(path: str) -> bool:
    """Documentation-like files are recognized by suffix, case-insensitively."""
    return path.lower().endswith(DOC_SUFFIXES)


def normalize_newlines(text: str) -> str:
    if "\r" not in text:
        return text
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_bom(text: str) -> str:
    return text.lstrip(BOM)


def strip_leading_file_marker(text: str) -> str:
    return FILE_MARKER_RE.sub("", text, count=1)


def unwrap_full_fence(text: str) -> str | None:
    """Return the inner text if the whole of ``text`` is one fenced block.

    The inner text keeps the newline that precedes the closing fence.
    """
    match = FULL_FENCE_RE.match(text)
    if match is None:
        return None
    return match.group("inner") or ""


def _sanitize_once(path: str, content: str) -> str:
    content = normalize_newlines(strip_bom(content))
    if is_documentation(path):
        return content

    content = strip_leading_file_marker(content)
    inner = unwrap_full_fence(content)
    return inner if inner is not None else content


def sanitize_content(path: str, content: str) -> str:
    """Final content for ``path``: BOM removed, newlines normalized, artifacts stripped.

    Repeats until stable, so calling it on its own output is a no-op.
    """
    while True:
        cleaned = _sanitize_once(path, content)
        if cleaned == content:
            return cleaned
        content = cleaned
