import asyncio
import time

import structlog
from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData, UploadFile

from src.api.deps import get_image_store, get_settings, reject_oversized_upload, require_api_key
from src.config import Settings
from src.core.exceptions import AppError, ClientInputError, DependencyError, PayloadTooLargeError
from src.schemas.images import ImageDeleteResponse, ImageUploadResponse, StoredImage
from src.services import image_hosting
from src.services.object_storage import S3ImageStore

logger = structlog.get_logger()

router = APIRouter(dependencies=[Depends(require_api_key)])


def _single_image(form: FormData) -> UploadFile:
    files = form.getlist("image")
    if len(files) != 1 or not isinstance(files[0], UploadFile):
        raise ClientInputError('Missing "image" field')
    return files[0]


def _form_text(form: FormData, field: str) -> str | None:
    value = form.get(field)
    return value if isinstance(value, str) else None


async def _store_upload(request: Request, store: S3ImageStore, settings: Settings) -> StoredImage:
    form = await request.form()
    upload = _single_image(form)
    body = await upload.read()
    if len(body) > settings.max_upload_bytes:
        raise PayloadTooLargeError()

    content_type = upload.content_type or image_hosting.DEFAULT_CONTENT_TYPE
    image_id = image_hosting.generate_image_id()
    extension = image_hosting.resolve_extension(upload.filename, content_type)
    filename = image_hosting.build_filename(image_id, extension)
    title = image_hosting.resolve_title(_form_text(form, "name"), upload.filename)
    expiration = image_hosting.clamp_expiration(
        request.query_params.get("expiration") or _form_text(form, "expiration")
    )
    dimensions = image_hosting.probe_dimensions(body)
    uploaded_at = int(time.time())

    stored = await asyncio.to_thread(
        store.put,
        filename,
        body,
        content_type,
        {"expiration": str(expiration), "uploaded": str(uploaded_at)},
    )
    if not stored:
        raise DependencyError("Upload failed")

    logger.info("image_uploaded", filename=filename, size=len(body), expiration=expiration)
    return StoredImage(
        image_id=image_id,
        filename=filename,
        title=title,
        mime=content_type,
        extension=extension,
        url=store.object_url(filename),
        size=len(body),
        time=uploaded_at,
        expiration=expiration,
        dimensions=dimensions,
    )


@router.post("/upload", response_model=ImageUploadResponse, dependencies=[Depends(reject_oversized_upload)])
async def upload_image(
    request: Request,
    store: S3ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_settings),
) -> ImageUploadResponse:
    try:
        stored = await _store_upload(request, store, settings)
    except AppError:
        raise
    except Exception as e:
        logger.exception("image_upload_unexpected_error", error=str(e))
        raise AppError(status_code=500, detail="Upload failed") from e
    return ImageUploadResponse.from_stored(stored)


@router.delete("/image/", include_in_schema=False)
async def delete_image_without_filename() -> None:
    raise ClientInputError("Missing filename")


@router.delete("/image/{filename}", response_model=ImageDeleteResponse)
async def delete_image(filename: str, store: S3ImageStore = Depends(get_image_store)) -> ImageDeleteResponse:
    if not filename.strip():
        raise ClientInputError("Missing filename")

    try:
        deleted = await asyncio.to_thread(store.delete, filename)
    except Exception as e:
        logger.exception("image_delete_unexpected_error", filename=filename, error=str(e))
        raise AppError(status_code=500, detail="Delete failed") from e
    if not deleted:
        raise DependencyError("Delete failed")
    return ImageDeleteResponse()
