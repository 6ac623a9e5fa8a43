"""Shared test fixtures for all test groups."""

import pytest

from codepack.core.config import PACKAGE_TEMPLATES_DIR
from codepack.rendering.template_set import TemplateSet, load_template_set
from codepack.schemas.specification import ProjectSpecification

# Smallest template set that satisfies every infrastructure output.
INFRA_SOURCES = {
    "rust/Cargo.toml.j2": '[package]\nname = "{{ spec.project.name }}"\nversion = "{{ spec.project.version }}"\n',
    "rust/Makefile.j2": "build:\n\tcargo build\n",
    "rust/README.md.j2": "# {{ spec.project.name }}\n\n{{ spec.project.description }}\n",
    "rust/gitignore.j2": "/target\n",
}

SPEC_TOML = """\
language = "rust"
project_type = "library"
description = "Parses and formats durations."

[project]
name = "tiny-duration"
version = "0.3.0"
description = "Human friendly durations"

[[features]]
name = "parse"
description = "Parse strings like 1h30m"

[[features]]
name = "format"
"""


@pytest.fixture
def make_spec():
    """Factory for ProjectSpecification with sensible defaults; keyword args override."""

    def _make(**overrides) -> ProjectSpecification:
        data = {
            "language": "rust",
            "project_type": "library",
            "description": "A tiny test crate",
            "project": {"name": "tiny-crate", "version": "0.1.0", "description": "Tiny crate"},
        }
        data.update(overrides)
        return ProjectSpecification.model_validate(data)

    return _make


@pytest.fixture
def infra_templates():
    """In-memory template set with the four infrastructure templates only."""
    return TemplateSet.from_mapping(INFRA_SOURCES)


@pytest.fixture(scope="session")
def bundled_templates():
    """The template set shipped with the package."""
    return load_template_set(PACKAGE_TEMPLATES_DIR)


@pytest.fixture
def spec_toml():
    return SPEC_TOML
