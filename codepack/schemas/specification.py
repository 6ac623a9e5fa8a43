"""Project specification schema and TOML parsing.

The core fields are typed; every other top-level key of the specification
(``[[features]]``, ``[datasets]``, ``binary_name`` ...) is captured verbatim as
an extra and made directly addressable inside templates.
"""

import tomllib
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codepack.core.exceptions import SpecificationError


class Archetype(StrEnum):
    """Declared project shape driving bootstrap skeleton selection."""

    SERVICE = "service"
    LIBRARY = "library"
    DEFAULT = "default"


class ProjectIdentity(BaseModel):
    """The [project] table: name, version, description."""

    name: str
    version: str
    description: str


class ProjectSpecification(BaseModel):
    """Parsed project specification, consumed read-only by the packager."""

    model_config = ConfigDict(extra="allow", frozen=True)

    language: str
    project_type: str | None = Field(None, description="service, library, or anything else for the default skeleton")
    description: str
    project: ProjectIdentity

    @property
    def extras(self) -> dict[str, Any]:
        """Every top-level key that is not a core field."""
        return dict(self.model_extra or {})

    @property
    def archetype(self) -> Archetype:
        declared = (self.project_type or "").strip().lower()
        try:
            return Archetype(declared)
        except ValueError:
            return Archetype.DEFAULT

    def template_context(self) -> dict[str, Any]:
        """Context for template rendering: ``spec`` plus extras flattened to top level.

        Extras are inserted after ``spec``, so an extra named ``spec`` wins.
        """
        context: dict[str, Any] = {"spec": self.model_dump()}
        context.update(self.extras)
        return context


def parse_specification(toml_text: str) -> ProjectSpecification:
    """Parse spec TOML content into a ProjectSpecification.

    Raises:
        SpecificationError: If the TOML is malformed or required fields are missing
    """
    try:
        data = tomllib.loads(toml_text)
    except tomllib.TOMLDecodeError as exc:
        raise SpecificationError(f"Invalid spec TOML: {exc}") from exc

    try:
        return ProjectSpecification.model_validate(data)
    except ValidationError as exc:
        raise SpecificationError(f"Invalid specification: {exc}") from exc
