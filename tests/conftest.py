# tests/conftest.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from g6pd_agent.errors import TransportError  # noqa: E402
from g6pd_agent.models import BaseInvoker  # noqa: E402
from g6pd_agent.service import ClassificationService  # noqa: E402

FAVA_JSON = (
    '{"item":"Fava Beans","safety":"unsafe",'
    '"reason":"Contains compounds that trigger hemolysis",'
    '"alternatives":["kidney beans","chickpeas"],"severity":"high"}'
)


class FakeInvoker(BaseInvoker):
    """Returns a canned completion (or raises) and records every prompt."""

    provider = "fake"

    def __init__(self, answer: str = FAVA_JSON, error: Optional[Exception] = None) -> None:
        super().__init__(api_key="test-key", model_id="fake-model")
        self.answer = answer
        self.error = error
        self.prompts: List[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture()
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()


@pytest.fixture()
def failing_invoker() -> FakeInvoker:
    return FakeInvoker(error=TransportError("API Error: 500"))


@pytest.fixture()
def client_for():
    """Returns a factory building a TestClient whose service uses the given invoker."""
    from g6pd_agent.main import app, get_service

    def make(invoker: BaseInvoker) -> TestClient:
        app.dependency_overrides[get_service] = lambda: ClassificationService(invoker)
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()
