"""Render the fixed infrastructure files of a generated project.

Each logical output has an ordered list of candidate templates; the first one
present in the template set is rendered. The manifest, build script and readme
are required. The ignore-file is cosmetic and falls back to a built-in
default.
"""

from dataclasses import dataclass

import structlog

from codepack.core.exceptions import PackagingError
from codepack.packaging.content import sanitize_content
from codepack.packaging.registry import ArtifactRegistry
from codepack.rendering.template_set import TemplateRenderer
from codepack.schemas.specification import ProjectSpecification

logger = structlog.get_logger(__name__)

DEFAULT_GITIGNORE = """\
/target
**/*.rs.bk
*.pdb
Cargo.lock.orig
.DS_Store
.idea/
.vscode/
"""


@dataclass(frozen=True)
class InfrastructureOutput:
    path: str
    template_name: str  # file name looked up under the target's template tree
    required: bool = True
    fallback: str | None = None


INFRASTRUCTURE_OUTPUTS: tuple[InfrastructureOutput, ...] = (
    InfrastructureOutput(path="Cargo.toml", template_name="Cargo.toml"),
    InfrastructureOutput(path="Makefile", template_name="Makefile"),
    InfrastructureOutput(path="README.md", template_name="README.md"),
    InfrastructureOutput(
        path=".gitignore",
        template_name="gitignore",
        required=False,
        fallback=DEFAULT_GITIGNORE,
    ),
)


def candidate_templates(target: str, archetype: str, template_name: str) -> list[str]:
    """Ordered template ids for one output: archetype-specific first, then generic."""
    return [
        f"{target}/{archetype}/{template_name}.j2",
        f"{target}/{template_name}.j2",
        f"{target}/{template_name}.template",
    ]


def first_existing(candidates: list[str], available: frozenset[str]) -> str | None:
    return next((template_id for template_id in candidates if template_id in available), None)


def package_infrastructure_files(
    templates: TemplateRenderer,
    spec: ProjectSpecification,
    registry: ArtifactRegistry,
    target: str = "rust",
) -> None:
    """Render infrastructure files into ``registry``, overwriting model output at the same paths.

    Raises:
        PackagingError: If a required output has no existing candidate template
    """
    logger.info("packaging_infrastructure_begin", target=target, archetype=spec.archetype.value)
    context = spec.template_context()
    available = templates.list_template_ids()

    for output in INFRASTRUCTURE_OUTPUTS:
        candidates = candidate_templates(target, spec.archetype.value, output.template_name)
        template_id = first_existing(candidates, available)

        if template_id is None:
            if output.required:
                raise PackagingError(
                    f"No template found for {output.path}; tried: {', '.join(candidates)}"
                )
            logger.info("packaging_infrastructure_default", path=output.path)
            registry.upsert(output.path, output.fallback or "")
            continue

        rendered = templates.render(template_id, context)
        registry.upsert(output.path, sanitize_content(output.path, rendered))
        logger.info("packaging_infrastructure_file", path=output.path, template_id=template_id)
