"""Ordered, path-keyed collection of output files for one packaging run."""

import structlog

from codepack.schemas.generation import OutputFile

logger = structlog.get_logger(__name__)


class ArtifactRegistry:
    """Insert-or-replace store that keeps first-insertion order.

    Replacing a path updates its content in place; entries are never removed.
    One registry belongs to exactly one packaging run.
    """

    def __init__(self) -> None:
        self._contents: dict[str, str] = {}

    def upsert(self, path: str, content: str) -> None:
        if path in self._contents:
            logger.debug("artifact_file_replaced", path=path)
        self._contents[path] = content

    def get(self, path: str) -> str | None:
        return self._contents.get(path)

    def paths(self) -> list[str]:
        return list(self._contents)

    def files(self) -> list[OutputFile]:
        return [OutputFile(path=path, content=content) for path, content in self._contents.items()]

    def __contains__(self, path: object) -> bool:
        return path in self._contents

    def __len__(self) -> int:
        return len(self._contents)
