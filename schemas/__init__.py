"""
Validation Schemas Package

Contains Pydantic models for input validation and data sanitization.
"""

from .news import (
    CreateArticleSchema,
    CreateCategorySchema,
    GetArticlesParams,
    GetCategoriesParams,
    ImageInputSchema,
    ImageUploadRequestSchema,
    NewsFiltersSchema,
    RecordIdSchema,
    SortSpec,
    ToggleFeaturedSchema,
    ToggleStatusSchema,
    UpdateArticleSchema,
    UpdateCategorySchema,
    first_error_message,
)

__all__ = [
    'CreateArticleSchema',
    'CreateCategorySchema',
    'GetArticlesParams',
    'GetCategoriesParams',
    'ImageInputSchema',
    'ImageUploadRequestSchema',
    'NewsFiltersSchema',
    'RecordIdSchema',
    'SortSpec',
    'ToggleFeaturedSchema',
    'ToggleStatusSchema',
    'UpdateArticleSchema',
    'UpdateCategorySchema',
    'first_error_message',
]
