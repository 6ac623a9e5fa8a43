"""FastAPI dependencies shared by the routes."""

from typing import Callable

from fastapi import Depends, Request

from codepack.core.config import Settings, get_settings
from codepack.llm.client import LLMClient
from codepack.packaging.pipeline import ProjectPackager
from codepack.rendering.template_set import TemplateRenderer
from codepack.schemas.generation import LLMConfig

LLMClientFactory = Callable[[LLMConfig], LLMClient]


def get_template_set(request: Request) -> TemplateRenderer:
    """The template set loaded once during application startup."""
    return request.app.state.templates


def get_packager(
    templates: TemplateRenderer = Depends(get_template_set),
    settings: Settings = Depends(get_settings),
) -> ProjectPackager:
    return ProjectPackager(templates, target=settings.template_target)


def get_llm_client_factory(settings: Settings = Depends(get_settings)) -> LLMClientFactory:
    def factory(config: LLMConfig) -> LLMClient:
        return LLMClient(config, default_timeout_s=settings.default_llm_timeout_s)

    return factory
