"""Tests for application wiring: health routes, logging and error handlers."""

import asyncio
import json
import logging
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from vidya.config import settings
from vidya.database import Database
from vidya.logging_config import JSONFormatter, RequestIdFilter, request_id_var
from vidya.main import create_app
from vidya.services.ai_service import LLMClient, AIProviderError


class TestHealth:
    async def test_root(self, client):
        resp = await client.get("/")
        assert resp.status_code == 200
        assert resp.json()["service"] == settings.APP_NAME

    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.json() == {"status": "healthy"}

    async def test_request_id_header(self, client):
        resp = await client.get("/health")
        assert len(resp.headers["X-Request-ID"]) == 12


class TestErrorHandlers:
    async def test_database_errors_are_generic(self, app, client, monkeypatch):
        from vidya.services.storage import Storage

        async def broken(self, *args, **kwargs):
            raise OperationalError("SELECT secret", {}, Exception("disk I/O error"))

        monkeypatch.setattr(Storage, "list_courses", broken)
        resp = await client.get("/api/courses")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}
        assert "secret" not in resp.text

    async def test_unexpected_errors_are_generic(self, client, monkeypatch):
        from vidya.services.storage import Storage

        async def broken(self, *args, **kwargs):
            raise RuntimeError("internal detail")

        monkeypatch.setattr(Storage, "list_skills", broken)
        resp = await client.get("/api/skills")
        assert resp.status_code == 500
        assert "internal detail" not in resp.text


class TestLogging:
    def test_json_formatter(self):
        record = logging.LogRecord("vidya.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        token = request_id_var.set("abc123")
        try:
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["message"] == "hello world"
        assert entry["request_id"] == "abc123"
        assert entry["level"] == "INFO"


class TestLLMClient:
    async def test_unconfigured_client_raises(self):
        client = LLMClient(gemini_api_key="", openai_api_key="")
        with pytest.raises(AIProviderError):
            await client.complete("system", "prompt")


def test_create_app_accepts_injected_database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'wired.db'}")
    app = create_app(database=database)
    assert app.state.database is database
    paths = set(app.openapi()["paths"])
    assert {"/api/auth/login", "/api/courses", "/api/survey/status", "/api/admin/users/{user_id}/unlock"} <= paths


class _FailingGemini:
    async def generate_content_async(self, prompt, generation_config=None):
        raise RuntimeError("quota exceeded")


class _SlowGemini:
    async def generate_content_async(self, prompt, generation_config=None):
        await asyncio.sleep(5)
        return SimpleNamespace(text="{}")


class _FakeOpenAI:
    def __init__(self):
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content='{"ok": true}')
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class TestProviderFallback:
    async def test_openai_used_when_gemini_fails(self):
        client = LLMClient()
        client._gemini_client = _FailingGemini()
        client._openai_client = openai = _FakeOpenAI()
        assert await client.complete("system", "prompt") == '{"ok": true}'
        assert openai.calls[0]["response_format"] == {"type": "json_object"}

    async def test_gemini_timeout_falls_back(self):
        client = LLMClient(timeout=0.05)
        client._gemini_client = _SlowGemini()
        client._openai_client = _FakeOpenAI()
        assert await client.complete("system", "prompt") == '{"ok": true}'

    async def test_text_mode_skips_json_format(self):
        client = LLMClient()
        client._openai_client = openai = _FakeOpenAI()
        await client.complete("system", "prompt", json_mode=False)
        assert "response_format" not in openai.calls[0]
