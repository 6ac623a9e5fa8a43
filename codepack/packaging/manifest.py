"""Machine-readable listing of every file in the artifact."""

import json

import structlog

from codepack.packaging.registry import ArtifactRegistry

logger = structlog.get_logger(__name__)

MANIFEST_PATH = "codepack-manifest.json"


def render_manifest(paths: list[str]) -> str:
    return json.dumps({"files": [{"path": path} for path in paths]}, indent=2) + "\n"


def emit_manifest(registry: ArtifactRegistry) -> list[str]:
    """Upsert the manifest file. The listing never includes the manifest itself.

    Returns:
        The listed paths, in artifact order
    """
    paths = [path for path in registry.paths() if path != MANIFEST_PATH]
    registry.upsert(MANIFEST_PATH, render_manifest(paths))
    logger.info("packaging_manifest", path=MANIFEST_PATH, listed=len(paths))
    return paths
