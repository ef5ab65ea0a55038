"""Test configuration and fixtures."""

import json
from typing import Any, Dict, Generator, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from automation_hub.api import app
from automation_hub.db.base import Base, create_db_engine, get_db
from automation_hub.integrations.openrouter import OpenRouterClient, get_llm_client

# In-memory SQLite with foreign keys enabled, shared across connections
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_db_engine(TEST_DATABASE_URL)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override the get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class StubLLM:
    """Stands in for OpenRouter behind an ``httpx.MockTransport``.

    Replies are consumed in order; once exhausted every call gets an empty
    assistant message. Each request body is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.api_key: Optional[str] = "test-key"
        self.replies: List[Tuple[int, Any]] = []
        self.requests: List[Dict[str, Any]] = []

    def reply(self, content: str) -> None:
        self.replies.append(
            (200, {"choices": [{"message": {"role": "assistant", "content": content}}]})
        )

    def reply_json(self, payload: Dict[str, Any]) -> None:
        self.reply(json.dumps(payload))

    def fail(self, status: int = 500, body: Any = None) -> None:
        self.replies.append((status, body if body is not None else {"error": "boom"}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.replies:
            status, body = self.replies.pop(0)
        else:
            status, body = 200, {"choices": [{"message": {"content": ""}}]}
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def client(self) -> OpenRouterClient:
        return OpenRouterClient(
            api_key=self.api_key, transport=httpx.MockTransport(self.handler)
        )


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    """Create all tables before each test, drop them after."""
    # Import models to register them with Base
    from automation_hub.db import models  # noqa: F401

    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def llm() -> Generator[StubLLM, None, None]:
    """Route every model call made by the API to a ``StubLLM``."""
    stub = StubLLM()

    async def override_get_llm_client():
        client = stub.client()
        try:
            yield client
        finally:
            await client.close()

    app.dependency_overrides[get_llm_client] = override_get_llm_client
    yield stub
    app.dependency_overrides.pop(get_llm_client, None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def alice() -> Dict[str, str]:
    return {"X-User-Id": "alice"}


@pytest.fixture
def bob() -> Dict[str, str]:
    return {"X-User-Id": "bob"}


@pytest.fixture
def session_factory() -> sessionmaker:
    """The session factory bound to the test engine, for code outside the API."""
    return TestSessionLocal
