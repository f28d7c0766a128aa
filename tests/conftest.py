"""
Test fixtures for Vidya Varadhi.

Every test gets its own file-based SQLite database seeded with the reference
catalog, an app built through create_app, and an httpx client that keeps
cookies between requests. The LLM is replaced by StubLLM, so no provider is
ever called.
"""

from __future__ import annotations

import json
import os

# Settings are read at import time; configure them before vidya is imported
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["GOOGLE_GEMINI_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

import pytest
from httpx import ASGITransport, AsyncClient

from vidya.core.security import hash_password
from vidya.database import Database
from vidya.main import create_app
from vidya.services.ai_service import AdvisoryService, AIProviderError
from vidya.services.seed import seed_reference_data
from vidya.services.storage import Storage

PASSWORD = "longenough1"

SURVEY = {
    "academicBackground": "B.Sc. Statistics",
    "priorSkillsFreeform": "Excel, basic Python",
    "socioEconomicContext": "Tier-2 city",
    "learningPace": "moderate",
    "aspirations": "data analysis",
}


class StubLLM:
    """Stands in for LLMClient: replays queued responses and records prompts."""

    def __init__(self):
        self.responses: list[str] = []
        self.prompts: list[str] = []
        self.error: Exception | None = None

    def queue(self, payload) -> None:
        self.responses.append(payload if isinstance(payload, str) else json.dumps(payload))

    async def complete(self, system_prompt: str, prompt: str, json_mode: bool = True) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        if not self.responses:
            raise AIProviderError("No stub response queued")
        return self.responses.pop(0)


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    async with db.session() as session:
        await seed_reference_data(session)
    yield db
    await db.dispose()


@pytest.fixture
def llm():
    return StubLLM()


@pytest.fixture
def app(database, llm):
    return create_app(database=database, advisor=AdvisoryService(llm))


@pytest.fixture
async def client(app):
    """Unauthenticated client."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def other_client(app):
    """A second, independent cookie jar against the same app."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def storage(database):
    async with database.session() as session:
        yield Storage(session)


async def register(client, email="learner@example.com", password=PASSWORD, **extra):
    body = {"email": email, "password": password, "firstName": "Asha", "lastName": "Rao"}
    body.update(extra)
    return await client.post("/api/auth/register", json=body)


async def fetch_user(database, email):
    """Read a user through a short-lived session so no lock outlives the call."""
    async with database.session() as session:
        return await Storage(session).get_user_by_email(email)


async def create_user(database, email, role, password=PASSWORD):
    async with database.session() as session:
        return await Storage(session).create_user(
            email=email,
            password_hash=hash_password(password),
            first_name="Test",
            last_name=role.title(),
            role=role,
        )


@pytest.fixture
async def auth_client(client):
    """Client logged in as a freshly registered learner (survey not taken)."""
    resp = await register(client)
    assert resp.status_code == 201
    return client


@pytest.fixture
async def surveyed_client(auth_client):
    """Learner who has completed the onboarding survey."""
    resp = await auth_client.post("/api/survey/me", json=SURVEY)
    assert resp.status_code == 200
    return auth_client


@pytest.fixture
async def policymaker_client(database, other_client):
    await create_user(database, "policy@example.com", "policymaker")
    resp = await other_client.post(
        "/api/auth/login", json={"email": "policy@example.com", "password": PASSWORD}
    )
    assert resp.status_code == 200
    return other_client
