"""
Pydantic schemas for request and response data validation.
Storage is snake_case; the JSON wire format is camelCase. Every schema
accepts both spellings on input and emits camelCase on output.
"""
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union


class CamelModel(BaseModel):
    """Base schema translating snake_case fields to camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Enable conversion from SQLAlchemy models
    )


def _require_text(value, field_name: str) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


# Artworks

class ArtworkResponse(CamelModel):
    """Artwork as returned by the catalog and admin endpoints."""
    id: int
    title: str
    image_url: str
    dimensions: str = ""
    technique: str
    year: str
    description: str = ""
    category: Optional[str] = None
    additional_images: List[str] = []
    is_visible: bool = True
    show_in_slider: bool = True
    order: int = 0

    @field_validator("additional_images", mode="before")
    @classmethod
    def default_additional_images(cls, v):
        return v or []

    @field_validator("dimensions", "description", mode="before")
    @classmethod
    def default_blank_text(cls, v):
        return v or ""


class ArtworkCreate(CamelModel):
    """
    Request schema for POST /api/artworks.
    The image is uploaded beforehand through POST /api/upload.
    """
    title: str
    technique: str
    year: Union[str, int]
    image_url: str
    dimensions: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_visible: Optional[bool] = None
    show_in_slider: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("title", "technique", "year", "image_url", mode="before")
    @classmethod
    def validate_required_text(cls, v, info):
        return _require_text(v, info.field_name)


class AdditionalImagesResponse(CamelModel):
    success: bool = True
    additional_images: List[str]
    new_images: List[str]


# Exhibitions

class GalleryImageItem(BaseModel):
    """One exhibition gallery entry."""
    url: str
    caption: Optional[str] = ""

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        return _require_text(v, "url")


class ExhibitionResponse(CamelModel):
    id: int
    title: str
    location: str
    year: str
    image_url: str
    description: str
    theme: Optional[str] = None
    gallery_images: List[GalleryImageItem] = []
    video_url: Optional[str] = None
    order: int = 0

    @field_validator("gallery_images", mode="before")
    @classmethod
    def default_gallery_images(cls, v):
        return v or []


class ExhibitionCreate(CamelModel):
    """Request schema for POST /api/exhibitions."""
    title: str
    location: str
    year: Union[str, int]
    image_url: str
    description: str
    theme: Optional[str] = None
    gallery_images: Optional[List[GalleryImageItem]] = None
    video_url: Optional[str] = None
    order: Optional[int] = None

    @field_validator("title", "location", "year", "image_url", mode="before")
    @classmethod
    def validate_required_text(cls, v, info):
        return _require_text(v, info.field_name)


# Ordering

class OrderEntry(BaseModel):
    """One (id, order) pair of a full-collection reorder submission."""
    id: int
    order: int


class PositionUpdate(BaseModel):
    """Move a single record to a destination index within its collection."""
    position: int


# Authentication

class LoginRequest(BaseModel):
    username: str
    password: str


# Contact

class ContactMessageCreate(BaseModel):
    """Request schema for POST /api/contact."""
    name: str
    email: str
    message: str

    @field_validator("name", "message")
    @classmethod
    def validate_required_text(cls, v, info):
        return _require_text(v, info.field_name)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = _require_text(v, "email")
        local, _, domain = v.partition("@")
        if not local or not domain:
            raise ValueError("email is invalid")
        return v


# Uploads

class UploadResponse(CamelModel):
    image_url: str


# Featured works (free-standing promotional records stored as a site setting)

class FeaturedWork(CamelModel):
    id: int
    image_url: str
    title: str
    description: Optional[str] = None
    year: Optional[str] = None
    technique: Optional[str] = None


class FeaturedWorkCreate(CamelModel):
    image_url: str
    title: str
    description: Optional[str] = None
    year: Optional[str] = None
    technique: Optional[str] = None

    @field_validator("image_url", "title", mode="before")
    @classmethod
    def validate_required_text(cls, v, info):
        return _require_text(v, info.field_name)


class FeaturedWorkUpdate(CamelModel):
    """Partial update; only the fields present in the request are applied."""
    image_url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    year: Optional[str] = None
    technique: Optional[str] = None

    # Only runs for fields present in the request: an explicit null is rejected
    @field_validator("image_url", "title", mode="before")
    @classmethod
    def validate_required_text(cls, v, info):
        return _require_text(v, info.field_name)
