from dataclasses import dataclass

from pydantic import BaseModel

from src.services.image_hosting import ImageDimensions


@dataclass(frozen=True)
class StoredImage:
    image_id: str
    filename: str
    title: str
    mime: str
    extension: str
    url: str
    size: int
    time: int
    expiration: int
    dimensions: ImageDimensions | None = None


class ImageFile(BaseModel):
    filename: str
    name: str
    mime: str
    extension: str
    url: str


class ImageData(BaseModel):
    id: str
    title: str
    url_viewer: str
    url: str
    display_url: str
    width: str
    height: str
    size: str
    time: str
    expiration: str
    image: ImageFile
    thumb: ImageFile


class ImageUploadResponse(BaseModel):
    """imgbb-compatible upload response; numeric fields are sent as strings."""

    data: ImageData
    status: int = 200
    success: bool = True

    @classmethod
    def from_stored(cls, stored: StoredImage) -> "ImageUploadResponse":
        image_file = ImageFile(
            filename=stored.filename,
            name=stored.title,
            mime=stored.mime,
            extension=stored.extension.lstrip("."),
            url=stored.url,
        )
        dims = stored.dimensions
        return cls(
            data=ImageData(
                id=stored.image_id,
                title=stored.title,
                url_viewer=stored.url,
                url=stored.url,
                display_url=stored.url,
                width=str(dims.width) if dims else "",
                height=str(dims.height) if dims else "",
                size=str(stored.size),
                time=str(stored.time),
                expiration=str(stored.expiration),
                image=image_file,
                thumb=image_file.model_copy(),
            ),
        )


class ImageDeleteResponse(BaseModel):
    status: int = 200
    success: bool = True
    message: str = "Image deleted"
