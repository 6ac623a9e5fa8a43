"""Packaging API routes: package a model output, or generate and package.

Every failure of a run is converted here into an error response for that
request alone; a partially built artifact is never returned.
"""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from codepack.api.deps import LLMClientFactory, get_llm_client_factory, get_packager, get_template_set
from codepack.core.config import Settings, get_settings
from codepack.core.exceptions import (
    LLMProviderError,
    PackagingError,
    SpecificationError,
    TemplateNotFoundError,
)
from codepack.packaging.pipeline import PackagingResult, ProjectPackager
from codepack.rendering.prompts import render_prompt
from codepack.rendering.template_set import TemplateRenderer
from codepack.schemas.generation import GenerateRequest, GenerateResponse, PackageRequest
from codepack.schemas.specification import ProjectSpecification, parse_specification

logger = structlog.get_logger(__name__)

router = APIRouter()


def _parse_spec(spec_toml_content: str) -> ProjectSpecification:
    try:
        return parse_specification(spec_toml_content)
    except SpecificationError as exc:
        logger.error("spec_parse_failed", error=str(exc))
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _run_packager(packager: ProjectPackager, llm_output: str, spec: ProjectSpecification) -> PackagingResult:
    try:
        return packager.package(llm_output, spec)
    except (PackagingError, TemplateNotFoundError) as exc:
        logger.error("packaging_failed", project=spec.project.name, error=str(exc))
        raise HTTPException(status_code=500, detail=f"Failed to package project: {exc}") from exc
    except Exception as exc:
        debug_id = str(uuid.uuid4())
        logger.error(
            "packaging_internal_error",
            project=spec.project.name,
            debug_id=debug_id,
            error_type=type(exc).__name__,
            exc_info=True,
        )
        raise HTTPException(
            status_code=500,
            detail=f"Internal packaging error (debug_id={debug_id})",
        ) from exc


def _to_response(result: PackagingResult) -> GenerateResponse:
    return GenerateResponse(
        files=result.files,
        extracted_count=result.extracted_count,
        bootstrapped=result.bootstrapped,
    )


@router.post("/package", response_model=GenerateResponse)
def package_project(
    request: PackageRequest,
    packager: ProjectPackager = Depends(get_packager),
) -> GenerateResponse:
    """Package an already obtained model output into project files."""
    spec = _parse_spec(request.spec_toml_content)
    result = _run_packager(packager, request.llm_output, spec)
    logger.info("package_request_complete", project=spec.project.name, files=len(result.files))
    return _to_response(result)


@router.post("/generate", response_model=GenerateResponse)
async def generate_project(
    request: GenerateRequest,
    packager: ProjectPackager = Depends(get_packager),
    templates: TemplateRenderer = Depends(get_template_set),
    llm_client_factory: LLMClientFactory = Depends(get_llm_client_factory),
    settings: Settings = Depends(get_settings),
) -> GenerateResponse:
    """Render the prompt, call the text model and package its output."""
    logger.info("generate_request_received", is_review_pass=request.is_review_pass)

    # 1. Parse the specification
    spec = _parse_spec(request.spec_toml_content)

    # 2. LLM configuration is mandatory for this endpoint
    if request.llm_config is None:
        logger.error("llm_config_missing")
        raise HTTPException(status_code=400, detail="LLMConfig is required")

    # 3. Render the prompt
    try:
        prompt = render_prompt(
            templates,
            spec,
            target=settings.template_target,
            is_review_pass=request.is_review_pass,
            initial_code=request.initial_code,
        )
    except TemplateNotFoundError as exc:
        logger.error("prompt_render_failed", error=str(exc))
        raise HTTPException(status_code=500, detail=f"Failed to render prompt: {exc}") from exc

    # 4. Call the text model
    try:
        llm_output = await llm_client_factory(request.llm_config).generate(prompt)
    except LLMProviderError as exc:
        logger.error("llm_generation_failed", provider=exc.provider, error=str(exc))
        raise HTTPException(status_code=502, detail=f"LLM generation failed: {exc}") from exc

    # 5. Package the generated files
    result = await run_in_threadpool(_run_packager, packager, llm_output, spec)
    logger.info("generate_request_complete", project=spec.project.name, files=len(result.files))
    return _to_response(result)
