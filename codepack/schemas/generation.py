"""Request/response schemas for the packaging and generation endpoints."""

from enum import StrEnum

from pydantic import BaseModel, Field


class LLMProvider(StrEnum):
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


class LLMConfig(BaseModel):
    """Text model settings supplied by the calling host."""

    provider: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    api_key: str = ""
    base_url: str = ""
    temperature: float = 0.2
    timeout_s: float | None = None  # falls back to Settings.default_llm_timeout_s
    max_tokens: int = 8192  # Anthropic requires an explicit ceiling


class OutputFile(BaseModel):
    """One file of the produced artifact."""

    path: str
    content: str


class PackageRequest(BaseModel):
    """Request body for POST /api/package."""

    spec_toml_content: str = Field(..., min_length=1)
    llm_output: str = ""


class GenerateRequest(BaseModel):
    """Request body for POST /api/generate."""

    spec_toml_content: str = Field(..., min_length=1)
    llm_config: LLMConfig | None = None
    is_review_pass: bool = False
    initial_code: str = ""


class GenerateResponse(BaseModel):
    """Packaged project returned to the host."""

    files: list[OutputFile]
    extracted_count: int = 0
    bootstrapped: bool = False
