from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.core.exceptions import (
    AppError,
    AuthError,
    ClientInputError,
    DependencyError,
    PayloadTooLargeError,
)


class TestAppError:
    def test_stores_status_and_detail(self) -> None:
        err = AppError(status_code=404, detail="Not found")
        assert err.status_code == 404
        assert err.detail == "Not found"
        assert str(err) == "Not found"

    def test_subclass_status_codes(self) -> None:
        assert ClientInputError("bad").status_code == 400
        assert AuthError().status_code == 401
        assert AuthError().detail == "Invalid API key"
        assert PayloadTooLargeError().status_code == 413
        assert DependencyError("Upload failed").status_code == 500


class TestAppErrorHandler:
    async def test_renders_status_and_error(self, app: FastAPI) -> None:
        @app.get("/_teapot")
        async def _teapot() -> None:
            raise AppError(status_code=418, detail="I'm a teapot")

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/_teapot")
        assert response.status_code == 418
        assert response.json() == {"status": 418, "error": "I'm a teapot"}

    async def test_dependency_error_hides_cause(self, app: FastAPI) -> None:
        @app.get("/_store_down")
        async def _store_down() -> None:
            try:
                raise ConnectionError("s3.internal:443 refused")
            except ConnectionError as e:
                raise DependencyError("Upload failed") from e

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/_store_down")
        assert response.status_code == 500
        assert "refused" not in response.text
