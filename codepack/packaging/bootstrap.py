"""Minimal compilable skeleton for runs where the model produced no usable files."""

import structlog

from codepack.packaging.content import sanitize_content
from codepack.packaging.paths import validate_path
from codepack.packaging.registry import ArtifactRegistry
from codepack.rendering.template_set import TemplateRenderer
from codepack.schemas.specification import Archetype, ProjectSpecification

logger = structlog.get_logger(__name__)

# (output path, template name under "<target>/bootstrap/<archetype>/")
BOOTSTRAP_FILES: dict[Archetype, tuple[tuple[str, str], ...]] = {
    Archetype.SERVICE: (
        ("src/main.rs", "main.rs.j2"),
        ("src/config.rs", "config.rs.j2"),
        ("src/routes.rs", "routes.rs.j2"),
    ),
    Archetype.LIBRARY: (
        ("src/lib.rs", "lib.rs.j2"),
        ("tests/smoke.rs", "smoke.rs.j2"),
    ),
    Archetype.DEFAULT: (
        ("src/main.rs", "main.rs.j2"),
    ),
}


def bootstrap_plan(target: str, archetype: Archetype) -> list[tuple[str, str]]:
    """The ``(path, template_id)`` pairs rendered for an archetype."""
    return [
        (path, f"{target}/bootstrap/{archetype.value}/{template_name}")
        for path, template_name in BOOTSTRAP_FILES[archetype]
    ]


def package_bootstrap_files(
    templates: TemplateRenderer,
    spec: ProjectSpecification,
    registry: ArtifactRegistry,
    target: str = "rust",
) -> int:
    """Render the archetype's skeleton into ``registry``.

    Missing templates are skipped with a warning.

    Returns:
        Number of files produced (zero is a legitimate outcome)
    """
    archetype = spec.archetype
    logger.info("packaging_bootstrap_begin", archetype=archetype.value)
    context = spec.template_context()
    available = templates.list_template_ids()
    produced = 0

    for raw_path, template_id in bootstrap_plan(target, archetype):
        path = validate_path(raw_path)
        if path is None:
            continue
        if template_id not in available:
            logger.warning("packaging_bootstrap_template_missing", path=path, template_id=template_id)
            continue

        rendered = templates.render(template_id, context)
        registry.upsert(path, sanitize_content(path, rendered))
        produced += 1
        logger.info("packaging_bootstrap_file", path=path, template_id=template_id)

    return produced
