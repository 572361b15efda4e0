import contextlib
from typing import Any

from fastapi import Depends, Request

from src.config import Settings
from src.core.exceptions import AuthError, PayloadTooLargeError
from src.services.auth import ApiKeyAuthorizer
from src.services.object_storage import S3ImageStore

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
# Room for multipart boundaries and the small text fields sent next to the image.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_store(request: Request) -> S3ImageStore:
    return request.app.state.image_store


def get_authorizer(request: Request) -> ApiKeyAuthorizer:
    return request.app.state.authorizer


async def _extract_api_key(request: Request) -> str | None:
    key = request.query_params.get("key")
    if key:
        return key

    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        value = form.get("key")
        return value if isinstance(value, str) else None
    if content_type.startswith("application/json"):
        body: Any = None
        with contextlib.suppress(ValueError):
            body = await request.json()
        if isinstance(body, dict) and isinstance(body.get("key"), str):
            return body["key"]
    return None


async def require_api_key(request: Request, authorizer: ApiKeyAuthorizer = Depends(get_authorizer)) -> None:
    if not authorizer.is_authorized(await _extract_api_key(request)):
        raise AuthError()


async def reject_oversized_upload(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """Refuse bodies whose declared length cannot fit under the upload limit.

    Runs before the multipart body is parsed, so such uploads are never
    spooled to disk. Bodies without a Content-Length are still caught after
    parsing by the per-file size check.
    """
    content_length = request.headers.get("content-length", "")
    limit = settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
    if content_length.isdigit() and (len(content_length) > len(str(limit)) or int(content_length) > limit):
        raise PayloadTooLargeError()
