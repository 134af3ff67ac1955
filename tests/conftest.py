"""Shared test fixtures."""

import json
from typing import Callable

import httpx
import pytest
import pytest_asyncio

from blaaiz.audit import UploadAuditTrail, create_audit_engine, create_session_factory, init_audit_db
from blaaiz.client import HttpClient
from blaaiz.config import Settings

TEST_BASE_URL = "https://api.blaaiz.test"
PRESIGNED_URL = "https://s3.example/bucket/file"

Handler = Callable[[httpx.Request], httpx.Response]


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content) if request.content else {}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        api_key="test-key",
        base_url=TEST_BASE_URL,
        timeout_seconds=5.0,
        download_timeout_seconds=5.0,
        max_redirects=5,
        max_file_size_bytes=1024,
    )


@pytest.fixture
def sent_requests() -> list[httpx.Request]:
    """Every request that reached a mock transport, in order."""
    return []


@pytest.fixture
def mock_transport(sent_requests) -> Callable[[Handler], httpx.MockTransport]:
    def factory(handler: Handler) -> httpx.MockTransport:
        def recording(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            return handler(request)

        return httpx.MockTransport(recording)

    return factory


@pytest.fixture
def make_client(settings, mock_transport) -> Callable[[Handler], HttpClient]:
    """Build an HttpClient whose API and external traffic both hit ``handler``."""

    def factory(handler: Handler) -> HttpClient:
        return HttpClient(settings=settings, transport=mock_transport(handler))

    return factory


@pytest_asyncio.fixture
async def audit_trail(tmp_path):
    """Audit ledger backed by a fresh SQLite file per test."""
    engine = create_audit_engine(f"sqlite+aiosqlite:///{tmp_path / 'audit.db'}")
    await init_audit_db(engine)
    yield UploadAuditTrail(create_session_factory(engine))
    await engine.dispose()
