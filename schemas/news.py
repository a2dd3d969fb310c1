"""
News Admin Validation Schemas

Pydantic models for every operation exposed by the news admin surface.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from models.constants import (
    ALL_CATEGORIES,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    EntityKind,
    NewsStatus,
)

MAX_PAGE_SIZE = 100


class NewsSchema(BaseModel):
    """Base schema: strips strings, accepts camelCase or snake_case keys."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )


def first_error_message(exc: ValidationError) -> str:
    """
    Turn a Pydantic ValidationError into the message of its first failing rule.

    Custom validator messages are returned verbatim; built-in errors are
    prefixed with the offending field.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid data"

    error = errors[0]
    custom = (error.get('ctx') or {}).get('error')
    if custom:
        return str(custom)

    field = '.'.join(str(part) for part in error.get('loc', ()))
    if error.get('type') == 'missing':
        return f"{field} is required" if field else "Required value missing"
    return f"{field}: {error['msg']}" if field else error['msg']


def _require_text(value: Optional[str], message: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class SortSpec(NewsSchema):
    """One sort column, as emitted by the data table."""
    id: str = Field(..., min_length=1, description="Sort field name")
    desc: bool = Field(default=False, description="Descending when true")


class NewsFiltersSchema(NewsSchema):
    search: str = Field(default="", max_length=200)
    status: NewsStatus = Field(default=NewsStatus.ALL)
    category_id: str = Field(default=ALL_CATEGORIES)

    @field_validator('status', mode='before')
    @classmethod
    def normalize_status(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return NewsStatus.ALL
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator('category_id', mode='before')
    @classmethod
    def default_category(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return ALL_CATEGORIES
        return v


class GetCategoriesParams(NewsSchema):
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sorting: Optional[List[SortSpec]] = None
    filters: Optional[NewsFiltersSchema] = None


class GetArticlesParams(GetCategoriesParams):
    category_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

class CreateCategorySchema(NewsSchema):
    name: str = Field(..., max_length=255, description="Display name")
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=1024)
    icon: Optional[str] = Field(default=None, max_length=64)
    order: int = Field(default=0)
    is_active: bool = Field(default=True)
    is_featured: bool = Field(default=False)

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _require_text(v, "Name is required")

    @field_validator('description', 'image', 'icon', mode='before')
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class UpdateCategorySchema(NewsSchema):
    """Partial update: only fields present in the payload are written."""
    id: str = Field(..., description="Category id")
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=1024)
    icon: Optional[str] = Field(default=None, max_length=64)
    order: Optional[int] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator('id')
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        return _require_text(v, "Category ID is required")

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Name is required")
        return _require_text(v, "Name is required")

    @field_validator('description', 'image', 'icon', mode='before')
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller, minus the id."""
        return self.model_dump(exclude_unset=True, exclude={'id'})


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------

class ImageInputSchema(NewsSchema):
    url: str = Field(..., max_length=1024)
    alt: Optional[str] = Field(default=None, max_length=255)
    order: int = Field(default=0, ge=0)

    @field_validator('url')
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        return _require_text(v, "Image URL is required")


def _dense_image_order(images: Optional[List[ImageInputSchema]]) -> Optional[List[ImageInputSchema]]:
    """Re-number images 0..n-1 keeping their requested relative order."""
    if images is None:
        return None
    ordered = sorted(enumerate(images), key=lambda pair: (pair[1].order, pair[0]))
    return [image.model_copy(update={'order': index}) for index, (_, image) in enumerate(ordered)]


class CreateArticleSchema(NewsSchema):
    category_id: Optional[str] = None
    title: str = Field(..., max_length=255)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=1024)
    images: Optional[List[ImageInputSchema]] = None
    published_at: Optional[datetime] = None
    is_active: bool = Field(default=False)
    is_featured: bool = Field(default=False)

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return _require_text(v, "Title is required")

    @field_validator('category_id', 'excerpt', 'content', 'image', mode='before')
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator('images')
    @classmethod
    def dense_order(cls, v):
        return _dense_image_order(v)

    @field_validator('published_at')
    @classmethod
    def naive_utc(cls, v):
        return _to_naive_utc(v)


class UpdateArticleSchema(NewsSchema):
    """Partial update: only fields present in the payload are written."""
    id: str = Field(..., description="Article id")
    category_id: Optional[str] = None
    title: Optional[str] = Field(default=None, max_length=255)
    excerpt: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=1024)
    images: Optional[List[ImageInputSchema]] = None
    published_at: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None

    @field_validator('id')
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        return _require_text(v, "Article ID is required")

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("Title is required")
        return _require_text(v, "Title is required")

    @field_validator('category_id', 'excerpt', 'content', 'image', mode='before')
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator('images')
    @classmethod
    def dense_order(cls, v):
        if v is None:
            raise ValueError("Images must be a list")
        return _dense_image_order(v)

    @field_validator('published_at')
    @classmethod
    def naive_utc(cls, v):
        return _to_naive_utc(v)

    def changes(self) -> dict:
        """Fields explicitly supplied by the caller, minus the id and images."""
        return self.model_dump(exclude_unset=True, exclude={'id', 'images'})

    @property
    def replaces_images(self) -> bool:
        return 'images' in self.model_fields_set


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

class RecordIdSchema(NewsSchema):
    id: str = Field(...)

    @field_validator('id')
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        return _require_text(v, "ID is required")


class ToggleStatusSchema(RecordIdSchema):
    is_active: bool = Field(...)


class ToggleFeaturedSchema(RecordIdSchema):
    is_featured: bool = Field(...)


class ImageUploadRequestSchema(NewsSchema):
    entity_type: EntityKind = Field(..., description="category or article")
    entity_id: str = Field(..., max_length=64)
    file_name: str = Field(..., max_length=255)
    content_type: str = Field(..., max_length=100)
    image_index: Optional[int] = Field(default=None, ge=0)

    @field_validator('entity_id')
    @classmethod
    def entity_id_not_blank(cls, v: str) -> str:
        return _require_text(v, "Entity ID is required")

    @field_validator('file_name')
    @classmethod
    def file_name_not_blank(cls, v: str) -> str:
        return _require_text(v, "File name is required")

    @field_validator('content_type')
    @classmethod
    def image_content_type(cls, v: str) -> str:
        v = v.strip().lower()
        if not v.startswith('image/'):
            raise ValueError("Only image uploads are allowed")
        return v
