from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.config import Config
from fakes import FakeOpenAI
from server import create_app


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def config(upload_dir: Path) -> Config:
    return Config(openai_api_key="sk-test", upload_dir=upload_dir)


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def client(config: Config, fake_openai: FakeOpenAI):
    app = create_app(config, client=fake_openai)
    with TestClient(app) as test_client:
        yield test_client
