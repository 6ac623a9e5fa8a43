"""Tests for the packaging and generation endpoints."""

import asyncio
import uuid

import pytest

from codepack.api.deps import get_packager
from codepack.core.exceptions import LLMProviderError
from codepack.packaging.manifest import MANIFEST_PATH
from codepack.packaging.pipeline import ProjectPackager
from codepack.rendering.template_set import TemplateSet
from tests.api.conftest import FakeLLMClient
from tests.conftest import INFRA_SOURCES

pytestmark = pytest.mark.integration

LLM_OUTPUT = "### FILE: src/lib.rs\n```rust\npub fn parse() {}\n```\n"
LLM_CONFIG = {"provider": "openai", "model": "gpt-test", "api_key": "sk-test"}


def test_health_reports_loaded_templates(make_client):
    response = make_client().get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["templates"] > 0
    uuid.UUID(response.headers["x-request-id"])


def test_package_returns_ordered_files(make_client, spec_toml):
    response = make_client().post(
        "/api/package",
        json={"spec_toml_content": spec_toml, "llm_output": LLM_OUTPUT},
    )

    assert response.status_code == 200
    body = response.json()
    paths = [f["path"] for f in body["files"]]
    assert paths == ["src/lib.rs", "Cargo.toml", "Makefile", "README.md", ".gitignore", MANIFEST_PATH]
    assert body["files"][0]["content"] == "pub fn parse() {}\n"
    assert body["extracted_count"] == 1
    assert body["bootstrapped"] is False


def test_package_renders_spec_extras(make_client, spec_toml):
    response = make_client().post("/api/package", json={"spec_toml_content": spec_toml, "llm_output": ""})

    files = {f["path"]: f["content"] for f in response.json()["files"]}
    assert "- **parse**: Parse strings like 1h30m" in files["README.md"]
    assert "- **format**\n" in files["README.md"]


def test_package_bootstraps_when_output_empty(make_client, spec_toml):
    response = make_client().post("/api/package", json={"spec_toml_content": spec_toml, "llm_output": "nothing"})

    body = response.json()
    assert body["bootstrapped"] is True
    assert "src/lib.rs" in [f["path"] for f in body["files"]]


def test_invalid_spec_is_400(make_client):
    response = make_client().post(
        "/api/package",
        json={"spec_toml_content": "language = [unclosed", "llm_output": ""},
    )

    assert response.status_code == 400
    assert "Invalid spec TOML" in response.json()["detail"]
    assert "debug_id" in response.json()


def test_spec_missing_fields_is_400(make_client):
    response = make_client().post(
        "/api/package",
        json={"spec_toml_content": 'language = "rust"\n', "llm_output": ""},
    )

    assert response.status_code == 400


def test_missing_required_template_is_500_without_files(make_client, spec_toml):
    client = make_client(templates=TemplateSet.from_mapping({"rust/gitignore.j2": "/target\n"}))

    response = client.post("/api/package", json={"spec_toml_content": spec_toml, "llm_output": LLM_OUTPUT})

    assert response.status_code == 500
    assert "files" not in response.json()
    assert "Cargo.toml" in response.json()["detail"]


def test_internal_fault_is_contained_to_the_request(make_client, spec_toml):
    sources = dict(INFRA_SOURCES)
    sources["rust/Makefile.j2"] = "{{ 1 / 0 }}"
    client = make_client(templates=TemplateSet.from_mapping(sources))

    failed = client.post("/api/package", json={"spec_toml_content": spec_toml, "llm_output": LLM_OUTPUT})
    health = client.get("/api/health")

    assert failed.status_code == 500
    assert "debug_id" in failed.json()
    assert "files" not in failed.json()
    assert health.status_code == 200


def test_generate_calls_llm_and_packages(make_client, spec_toml):
    llm = FakeLLMClient(LLM_OUTPUT)
    client = make_client(llm=llm)

    response = client.post("/api/generate", json={"spec_toml_content": spec_toml, "llm_config": LLM_CONFIG})

    assert response.status_code == 200
    assert response.json()["files"][0] == {"path": "src/lib.rs", "content": "pub fn parse() {}\n"}
    assert "tiny-duration" in llm.prompts[0]


def test_generate_review_pass_sends_initial_code(make_client, spec_toml):
    llm = FakeLLMClient(LLM_OUTPUT)
    client = make_client(llm=llm)

    client.post(
        "/api/generate",
        json={
            "spec_toml_content": spec_toml,
            "llm_config": LLM_CONFIG,
            "is_review_pass": True,
            "initial_code": "fn half_written(",
        },
    )

    assert "fn half_written(" in llm.prompts[0]


def test_generate_requires_llm_config(make_client, spec_toml):
    response = make_client(llm=FakeLLMClient(LLM_OUTPUT)).post(
        "/api/generate", json={"spec_toml_content": spec_toml}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "LLMConfig is required"


def test_generate_provider_failure_is_502(make_client, spec_toml):
    llm = FakeLLMClient(LLMProviderError("openai", "HTTP 503 from provider"))

    response = make_client(llm=llm).post(
        "/api/generate", json={"spec_toml_content": spec_toml, "llm_config": LLM_CONFIG}
    )

    assert response.status_code == 502
    assert "HTTP 503" in response.json()["detail"]


def test_generate_without_prompt_templates_is_500(make_client, spec_toml):
    client = make_client(templates=TemplateSet.from_mapping(INFRA_SOURCES), llm=FakeLLMClient(LLM_OUTPUT))

    response = client.post("/api/generate", json={"spec_toml_content": spec_toml, "llm_config": LLM_CONFIG})

    assert response.status_code == 500
    assert "Failed to render prompt" in response.json()["detail"]


class LoopRecordingPackager(ProjectPackager):
    """Records whether each run happened on the event loop thread."""

    def __init__(self, templates):
        super().__init__(templates)
        self.ran_on_event_loop: list[bool] = []

    def package(self, llm_output, spec):
        try:
            asyncio.get_running_loop()
            self.ran_on_event_loop.append(True)
        except RuntimeError:
            self.ran_on_event_loop.append(False)
        return super().package(llm_output, spec)


@pytest.mark.parametrize(
    ("endpoint", "extra"),
    [("/api/package", {"llm_output": LLM_OUTPUT}), ("/api/generate", {"llm_config": LLM_CONFIG})],
)
def test_packaging_runs_off_the_event_loop(make_client, spec_toml, endpoint, extra):
    client = make_client(llm=FakeLLMClient(LLM_OUTPUT))
    packager = LoopRecordingPackager(client.app.state.templates)
    client.app.dependency_overrides[get_packager] = lambda: packager

    response = client.post(endpoint, json={"spec_toml_content": spec_toml, **extra})

    assert response.status_code == 200
    assert packager.ran_on_event_loop == [False]
