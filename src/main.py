import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.router import router
from src.config import Settings
from src.core.exceptions import register_exception_handlers
from src.core.logging import configure_logging
from src.services.auth import ApiKeyAuthorizer
from src.services.object_storage import S3ImageStore

logger = structlog.get_logger()


def create_app(settings: Settings) -> FastAPI:
    configure_logging(settings.log_level, json_logs=not settings.debug)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.authorizer = ApiKeyAuthorizer(settings.api_key_set)
    app.state.image_store = S3ImageStore(bucket=settings.s3_bucket, region=settings.aws_region)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router)

    if not settings.api_key_set:
        logger.warning("no_api_keys_configured")
    logger.info("app_configured", bucket=settings.s3_bucket, region=settings.aws_region)
    return app


app = create_app(Settings())


if __name__ == "__main__":
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
