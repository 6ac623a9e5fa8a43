"""Artifact packaging pipeline.

Provides:
- ProjectPackager: full packaging run (extract, infrastructure, bootstrap, manifest)
- validate_path: the path allowlist applied to every produced file
- sanitize_content: idempotent content cleanup
"""

from codepack.packaging.content import sanitize_content
from codepack.packaging.paths import validate_path
from codepack.packaging.pipeline import PackagingResult, ProjectPackager

__all__ = ["PackagingResult", "ProjectPackager", "sanitize_content", "validate_path"]
