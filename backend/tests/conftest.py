import importlib
import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import get_settings
from app.services import storage as storage_service

PUBLIC_BASE_URL = "http://files.test/nft"


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["ENV"] = "test"
    os.environ["PUBLIC_BASE_URL"] = PUBLIC_BASE_URL
    os.environ["LOG_LEVEL"] = "DEBUG"
    os.environ.pop("FILE_OWNER", None)
    os.environ.pop("MAX_UPLOAD_BYTES", None)
    get_settings.cache_clear()
    storage_service.reset_storage_service()


@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    root = tmp_path / "nft"
    monkeypatch.setenv("STORAGE_ROOT", str(root))
    get_settings.cache_clear()
    storage_service.reset_storage_service()
    yield root
    get_settings.cache_clear()
    storage_service.reset_storage_service()


@pytest.fixture
def file_store(storage_root):
    return storage_service.LocalFileStore(root=storage_root, public_base_url=PUBLIC_BASE_URL)


@pytest.fixture(scope="session")
def app_instance(configure_environment):
    from app import main as app_module

    importlib.reload(app_module)
    return app_module.app


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
