import sys
from pathlib import Path

import pytest

# Ensure the repository 'src' directory is on sys.path so tests can import `rentcar`.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rentcar import create_app
from rentcar.config.config import Config
from rentcar.services.local_backend import LocalBackend


class AppTestConfig(Config):
    TESTING = True
    LOG_LEVEL = "WARNING"
    FONNTE_API_KEY = "test-fonnte-key"
    OPENAI_API_KEY = "test-openai-key"
    USE_S3 = False


IMAGE_DATA_URL = "data:image/png;base64,aGVsbG8="


@pytest.fixture
def backend():
    return LocalBackend()


@pytest.fixture
def app(backend):
    app = create_app(AppTestConfig, backend=backend)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def image():
    return IMAGE_DATA_URL


@pytest.fixture(autouse=True)
def local_storage(monkeypatch):
    # uploads go to the in-memory backend unless a test opts into S3
    monkeypatch.setattr(Config, "USE_S3", False)
