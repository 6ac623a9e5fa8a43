"""Recover file blocks from free-form model output.

Expected block shape::

    ### FILE: relative/path.ext
    ```lang
    <content>
    ```

Blocks are sliced from one header to the next rather than matched up to a
closing fence, so a missing or malformed fence only affects its own block and
never swallows or shifts the file that follows it.
"""

import re
from dataclasses import dataclass
from typing import Iterator

import structlog

from codepack.packaging.content import normalize_newlines, sanitize_content, strip_bom, unwrap_full_fence
from codepack.packaging.paths import validate_path
from codepack.packaging.registry import ArtifactRegistry

logger = structlog.get_logger(__name__)

FILE_HEADER_RE = re.compile(r"^[ \t]*###[ \t]*FILE:[ \t]*(?P<path>[^\n]*)$", re.MULTILINE)


@dataclass(frozen=True)
class RawBlock:
    """A candidate file before path validation and sanitization."""

    header_path: str
    body: str


def iter_raw_blocks(llm_output: str) -> Iterator[RawBlock]:
    """Yield one RawBlock per header line, in order of appearance."""
    text = normalize_newlines(strip_bom(llm_output))
    headers = list(FILE_HEADER_RE.finditer(text))

    for index, header in enumerate(headers):
        # Body starts after the header's newline (if any) and ends where the next header starts
        start = header.end() + 1 if header.end() < len(text) else header.end()
        end = headers[index + 1].start() if index + 1 < len(headers) else len(text)
        yield RawBlock(header_path=header.group("path"), body=text[start:end])


def unwrap_block_body(body: str) -> str:
    """Drop the fence around a block body when the body is exactly one fenced block.

    A whitespace-only body is an empty file.
    """
    if not body.strip():
        return ""
    inner = unwrap_full_fence(body)
    return inner if inner is not None else body


def extract_files(llm_output: str) -> list[tuple[str, str]]:
    """Return the accepted ``(path, content)`` pairs in order of appearance.

    Blocks with an unsafe path are dropped with a warning. Duplicate paths are
    returned as they appear; the registry decides what wins.
    """
    files: list[tuple[str, str]] = []
    for block in iter_raw_blocks(llm_output):
        path = validate_path(block.header_path)
        if path is None:
            logger.warning("packaging_block_skipped", raw_path=block.header_path.strip())
            continue
        files.append((path, sanitize_content(path, unwrap_block_body(block.body))))
    return files


def package_code_files(llm_output: str, registry: ArtifactRegistry) -> int:
    """Extract file blocks from model output into ``registry``.

    Returns:
        Number of accepted blocks (duplicates included). Zero means the model
        produced nothing usable and the bootstrap skeleton should be rendered.
    """
    files = extract_files(llm_output)
    for path, content in files:
        registry.upsert(path, content)
        logger.info("packaging_code_file", path=path, size=len(content))

    if not files:
        logger.warning("packaging_no_code_files", output_length=len(llm_output))
    else:
        logger.info("packaging_code_files_total", count=len(files))
    return len(files)
