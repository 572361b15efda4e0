import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class AppError(Exception):
    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail)


class ClientInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=400, detail=detail)


class AuthError(AppError):
    def __init__(self, detail: str = "Invalid API key") -> None:
        super().__init__(status_code=401, detail=detail)


class PayloadTooLargeError(AppError):
    def __init__(self, detail: str = "Image too large") -> None:
        super().__init__(status_code=413, detail=detail)


class DependencyError(AppError):
    """Raised when the object store rejects a call; the cause is logged, never returned."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=500, detail=detail)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, status=exc.status_code, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": exc.status_code, "error": exc.detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
