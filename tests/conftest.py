"""Shared pytest fixtures.

The application is exercised against an on-disk SQLite database (aiosqlite)
and an in-memory stand-in for the MinIO bucket, so no external services are
needed.
"""

import asyncio
import os
from typing import Dict, Optional

# Must be set before docgen modules create their engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.pop("FILE_UPLOADS_MAX_FILE_SIZE", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from docgen.api.v1.endpoints import reports as reports_endpoints
from docgen.api.v1.endpoints import template as template_endpoints
from docgen.core.database import get_db
from docgen.main import app
from docgen.models.base import Base
import docgen.models.report  # noqa: F401  (registers tables)
from helpers import b64, make_docx


class FakeStorage:
    """Dict-backed replacement for StorageService."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.metadata: Dict[str, Optional[dict]] = {}

    def upload_file(self, object_name: str, file_content: bytes, metadata: dict = None) -> str:
        self.objects[object_name] = file_content
        self.metadata[object_name] = metadata
        return object_name

    def download_file(self, object_name: str) -> Optional[bytes]:
        return self.objects.get(object_name)

    def find_object(self, prefix: str) -> Optional[str]:
        for name in sorted(self.objects):
            if name.startswith(prefix):
                return name
        return None

    def delete_file(self, object_name: str):
        self.objects.pop(object_name, None)


@pytest.fixture
def fake_storage(monkeypatch) -> FakeStorage:
    storage = FakeStorage()
    monkeypatch.setattr(template_endpoints, "storage_service", storage)
    monkeypatch.setattr(reports_endpoints, "storage_service", storage)
    return storage


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'docgen.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_factory, fake_storage):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def template_payload():
    """A fully valid inline-template render request."""
    return {
        "data": {"name": "Ada"},
        "options": {"convertTo": "docx", "reportName": "letter"},
        "template": {
            "content": b64(make_docx("Hello {{ d.name }}")),
            "encodingType": "base64",
            "fileType": "docx",
        },
    }
