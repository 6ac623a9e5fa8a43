"""API-specific test fixtures."""

import pytest
from fastapi.testclient import TestClient

from codepack.api.deps import get_llm_client_factory
from codepack.main import create_app


class FakeLLMClient:
    """Returns a canned completion and records prompts."""

    def __init__(self, output: str | Exception):
        self.output = output
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if isinstance(self.output, Exception):
            raise self.output
        return self.output


@pytest.fixture
def make_client():
    """Build a TestClient; optionally with preloaded templates and a fake LLM."""
    clients = []

    def _make(templates=None, llm: FakeLLMClient | None = None) -> TestClient:
        app = create_app(templates=templates)
        if llm is not None:
            app.dependency_overrides[get_llm_client_factory] = lambda: (lambda config: llm)
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
