import os
from collections.abc import AsyncIterator
from unittest.mock import MagicMock

os.environ["S3_BUCKET"] = "test-bucket"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["API_KEYS"] = "validkey123"

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.api.deps import get_image_store  # noqa: E402
from src.config import Settings  # noqa: E402
from src.main import create_app  # noqa: E402
from src.services.object_storage import S3ImageStore  # noqa: E402

VALID_KEY = "validkey123"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        s3_bucket="test-bucket",
        aws_region="us-east-1",
        api_keys=f"{VALID_KEY}, second-key",
        _env_file=None,
    )


@pytest.fixture
def store() -> MagicMock:
    mock_store = MagicMock(spec=S3ImageStore)
    mock_store.put.return_value = True
    mock_store.delete.return_value = True
    mock_store.object_url.side_effect = lambda key: f"https://test-bucket.s3.us-east-1.amazonaws.com/{key}"
    return mock_store


@pytest.fixture
def app(settings: Settings, store: MagicMock) -> FastAPI:
    application = create_app(settings)
    application.dependency_overrides[get_image_store] = lambda: store
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
