"""Immutable, load-once template set.

All templates are compiled when the set is built. Afterwards the set is never
mutated, so a single instance is shared by reference between concurrent
requests without locking.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Protocol

import structlog
from jinja2 import BaseLoader, DictLoader, Environment, FileSystemLoader, Template

from codepack.core.exceptions import TemplateNotFoundError

logger = structlog.get_logger(__name__)

TEMPLATE_SUFFIXES = (".j2", ".template", ".tera")


class TemplateRenderer(Protocol):
    """The rendering capability the packaging pipeline depends on."""

    def render(self, template_id: str, context: Mapping[str, Any]) -> str: ...

    def list_template_ids(self) -> frozenset[str]: ...


def _build_environment(loader: BaseLoader) -> Environment:
    return Environment(
        loader=loader,
        autoescape=False,  # Generated source files must NOT be escaped
        keep_trailing_newline=True,
    )


class TemplateSet:
    """Compiled templates keyed by id (path relative to the template root)."""

    def __init__(self, templates: Mapping[str, Template]):
        self._templates = MappingProxyType(dict(templates))
        self._ids = frozenset(self._templates)

    @classmethod
    def from_environment(cls, env: Environment) -> "TemplateSet":
        ids = env.list_templates(filter_func=lambda name: name.endswith(TEMPLATE_SUFFIXES))
        return cls({template_id: env.get_template(template_id) for template_id in ids})

    @classmethod
    def from_directory(cls, root: Path) -> "TemplateSet":
        return cls.from_environment(_build_environment(FileSystemLoader(str(root))))

    @classmethod
    def from_mapping(cls, sources: Mapping[str, str]) -> "TemplateSet":
        """Build a set from in-memory ``{template_id: source}`` pairs."""
        return cls.from_environment(_build_environment(DictLoader(dict(sources))))

    def list_template_ids(self) -> frozenset[str]:
        return self._ids

    def render(self, template_id: str, context: Mapping[str, Any]) -> str:
        """Render a template.

        Raises:
            TemplateNotFoundError: If ``template_id`` is not part of the set
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template.render(dict(context))

    def __len__(self) -> int:
        return len(self._ids)


def load_template_set(root: Path) -> TemplateSet:
    """Load every template under ``root``. Called once at application startup."""
    if not root.is_dir():
        raise FileNotFoundError(f"Template directory does not exist: {root}")
    template_set = TemplateSet.from_directory(root)
    logger.info("templates_loaded", root=str(root), count=len(template_set))
    return template_set
