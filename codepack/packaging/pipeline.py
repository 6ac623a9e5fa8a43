"""ProjectPackager: runs the packaging stages for one model output.

Stages:
    extract code files -> infrastructure files -> bootstrap (only if nothing
    was extracted) -> manifest

A run is synchronous, performs no I/O and owns its registry; the template set
is the only shared state and it is read-only.
"""

from dataclasses import dataclass

import structlog

from codepack.packaging.bootstrap import package_bootstrap_files
from codepack.packaging.extractor import package_code_files
from codepack.packaging.infrastructure import package_infrastructure_files
from codepack.packaging.manifest import emit_manifest
from codepack.packaging.registry import ArtifactRegistry
from codepack.rendering.template_set import TemplateRenderer
from codepack.schemas.generation import OutputFile
from codepack.schemas.specification import ProjectSpecification

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PackagingResult:
    files: list[OutputFile]
    extracted_count: int
    bootstrapped_count: int

    @property
    def bootstrapped(self) -> bool:
        return self.extracted_count == 0


class ProjectPackager:
    """Turns model output plus a specification into an ordered project artifact.

    Args:
        templates: Template capability (a loaded TemplateSet in production)
        target: Template tree to render from (the output ecosystem)
    """

    def __init__(self, templates: TemplateRenderer, target: str = "rust") -> None:
        self.templates = templates
        self.target = target

    def package(self, llm_output: str, spec: ProjectSpecification) -> PackagingResult:
        """Package one model output.

        Raises:
            PackagingError: If a required infrastructure template is missing.
                No partial artifact is returned in that case.
        """
        registry = ArtifactRegistry()

        extracted = package_code_files(llm_output, registry)
        package_infrastructure_files(self.templates, spec, registry, target=self.target)

        bootstrapped = 0
        if extracted == 0:
            bootstrapped = package_bootstrap_files(self.templates, spec, registry, target=self.target)

        emit_manifest(registry)

        logger.info(
            "packaging_complete",
            project=spec.project.name,
            files=len(registry),
            extracted=extracted,
            bootstrapped=bootstrapped,
        )
        return PackagingResult(
            files=registry.files(),
            extracted_count=extracted,
            bootstrapped_count=bootstrapped,
        )
