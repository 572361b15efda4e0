import re
import uuid
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePosixPath

import structlog
from PIL import Image

logger = structlog.get_logger()

IMAGE_ID_LENGTH = 7
MIN_EXPIRATION = 60
MAX_EXPIRATION = 15552000  # 180 days

DEFAULT_CONTENT_TYPE = "application/octet-stream"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int


def generate_image_id() -> str:
    return uuid.uuid4().hex[:IMAGE_ID_LENGTH]


def resolve_extension(original_filename: str | None, content_type: str | None) -> str:
    """Return the stored extension, dot included.

    The original filename wins; otherwise the MIME subtype is used, so an
    unnamed ``image/png`` upload is stored as ``.png``.
    """
    suffix = PurePosixPath(original_filename or "").suffix
    if suffix:
        return suffix
    mime = (content_type or DEFAULT_CONTENT_TYPE).split(";", 1)[0].strip()
    subtype = mime.split("/", 1)[-1]
    return f".{subtype}"


def resolve_title(name: str | None, original_filename: str | None) -> str:
    title = name if name else PurePosixPath(original_filename or "").stem
    return _WHITESPACE_RE.sub("_", title)


def build_filename(image_id: str, extension: str) -> str:
    return f"{image_id}{extension}"


def clamp_expiration(raw: str | int | None) -> int:
    """Parse an expiration hint in seconds.

    Absent or unparseable values mean no expiration (0). Anything else is
    clamped to [MIN_EXPIRATION, MAX_EXPIRATION]. The value is only recorded
    as object metadata; nothing here deletes expired objects.
    """
    if raw is None or raw == "":
        return 0
    if isinstance(raw, int):
        seconds = raw
    else:
        match = _LEADING_INT_RE.match(raw)
        if not match:
            return 0
        digits = match.group(1)
        if len(digits.lstrip("+-").lstrip("0")) > len(str(MAX_EXPIRATION)):
            return MIN_EXPIRATION if digits.startswith("-") else MAX_EXPIRATION
        seconds = int(digits)
    return max(MIN_EXPIRATION, min(seconds, MAX_EXPIRATION))


def probe_dimensions(image_bytes: bytes) -> ImageDimensions | None:
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            width, height = img.size
    except Exception as e:
        logger.debug("image_probe_failed", size=len(image_bytes), error=str(e))
        return None
    return ImageDimensions(width=width, height=height)
