"""
News Mutation Service - create, update, delete, and toggle news records

Each operation checks its business rules, persists, and invalidates the
cached listings. Input is expected to be validated already; authorization
is the caller's job (see AdminNewsActions).
"""

import functools
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models.constants import NEWS_CACHE_TAG
from models.news import NewsArticle, NewsCategory
from schemas.news import (
    CreateArticleSchema,
    CreateCategorySchema,
    UpdateArticleSchema,
    UpdateCategorySchema,
)
from services.list_cache import TaggedListCache
from services.news_repository import NewsRepository
from services.slug_service import SlugResolver
from utils.errors import (
    AdminNewsError,
    BusinessRuleViolation,
    NotFoundError,
    SlugConflictError,
    StorageFault,
)

logger = logging.getLogger(__name__)

# One retry with a fresh slug scan after a unique-constraint collision
SLUG_WRITE_ATTEMPTS = 2

CATEGORY_NOT_FOUND = "Category not found"
ARTICLE_NOT_FOUND = "Article not found"


@dataclass(frozen=True)
class MutationOutcome:
    message: str
    record_id: Optional[str] = None


def _is_slug_violation(exc: IntegrityError) -> bool:
    return 'slug' in str(getattr(exc, 'orig', exc)).lower()


def storage_boundary(failure_message: str):
    """
    Roll back and replace database errors with ``failure_message``.

    Admin-facing errors raised inside the operation pass through untouched.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            try:
                return func(self, *args, **kwargs)
            except AdminNewsError:
                self.repository.rollback()
                raise
            except SQLAlchemyError as exc:
                logger.exception("%s failed", func.__name__)
                self.repository.rollback()
                raise StorageFault(failure_message) from exc
        return wrapper
    return decorator


class NewsMutationService:
    """Write side of the news admin."""

    def __init__(
        self,
        repository: NewsRepository,
        cache: Optional[TaggedListCache] = None,
        category_slugs: Optional[SlugResolver] = None,
        article_slugs: Optional[SlugResolver] = None,
    ):
        self.repository = repository
        self.cache = cache or TaggedListCache(ttl_seconds=0)
        self.category_slugs = category_slugs or SlugResolver(repository.category_slugs_starting_with)
        self.article_slugs = article_slugs or SlugResolver(repository.article_slugs_starting_with)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _changed(self):
        self.cache.invalidate(NEWS_CACHE_TAG)

    def _write_with_slug(self, resolver: SlugResolver, name: str, exclude_id: Optional[str],
                         write: Callable[[str], object]):
        """
        Resolve a slug and run ``write(slug)``, which must stage and commit.

        A unique-constraint hit on the slug (another writer got there first)
        triggers one fresh scan and retry before giving up.

        Raises:
            SlugConflictError: the retry collided too
        """
        for attempt in range(1, SLUG_WRITE_ATTEMPTS + 1):
            slug = resolver.resolve(name, exclude_id)
            try:
                return write(slug)
            except IntegrityError as exc:
                self.repository.rollback()
                if not _is_slug_violation(exc):
                    raise
                logger.warning("Slug '%s' taken concurrently (attempt %d)", slug, attempt)
        raise SlugConflictError()

    def _require_category(self, category_id: str) -> NewsCategory:
        category = self.repository.get_category(category_id)
        if category is None:
            raise NotFoundError(CATEGORY_NOT_FOUND)
        return category

    def _require_article(self, article_id: str) -> NewsArticle:
        article = self.repository.get_article(article_id)
        if article is None:
            raise NotFoundError(ARTICLE_NOT_FOUND)
        return article

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    @storage_boundary("Error creating category")
    def create_category(self, data: CreateCategorySchema) -> MutationOutcome:
        fields = data.model_dump()

        def write(slug):
            category = self.repository.add(NewsCategory(slug=slug, **fields))
            self.repository.commit()
            return category

        category = self._write_with_slug(self.category_slugs, data.name, None, write)
        self._changed()
        logger.info("Created news category %s (%s)", category.id, category.slug)
        return MutationOutcome("Category created successfully", category.id)

    @storage_boundary("Error updating category")
    def update_category(self, data: UpdateCategorySchema) -> MutationOutcome:
        existing = self._require_category(data.id)
        changes = data.changes()
        rename = 'name' in changes and changes['name'] != existing.name

        def write(slug=None):
            category = self._require_category(data.id)
            for field, value in changes.items():
                setattr(category, field, value)
            if slug is not None:
                category.slug = slug
            self.repository.commit()
            return category

        if rename:
            self._write_with_slug(self.category_slugs, changes['name'], data.id, write)
        else:
            write()
        self._changed()
        logger.info("Updated news category %s (%s)", data.id, ', '.join(sorted(changes)) or 'no fields')
        return MutationOutcome("Category updated successfully", data.id)

    @storage_boundary("Error deleting category")
    def delete_category(self, category_id: str) -> MutationOutcome:
        category = self._require_category(category_id)
        if self.repository.count_articles_in(category_id) > 0:
            raise BusinessRuleViolation("Cannot delete a category that has articles")

        self.repository.delete(category)
        self.repository.commit()
        self._changed()
        logger.info("Deleted news category %s", category_id)
        return MutationOutcome("Category deleted successfully", category_id)

    @storage_boundary("Error changing category status")
    def toggle_category_status(self, category_id: str, is_active: bool) -> MutationOutcome:
        category = self._require_category(category_id)
        category.is_active = is_active
        self.repository.commit()
        self._changed()
        return MutationOutcome("Category activated" if is_active else "Category deactivated", category_id)

    @storage_boundary("Error changing category featured flag")
    def toggle_category_featured(self, category_id: str, is_featured: bool) -> MutationOutcome:
        category = self._require_category(category_id)
        category.is_featured = is_featured
        self.repository.commit()
        self._changed()
        return MutationOutcome("Category featured" if is_featured else "Category unfeatured", category_id)

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    @storage_boundary("Error creating article")
    def create_article(self, data: CreateArticleSchema) -> MutationOutcome:
        if data.category_id is not None:
            self._require_category(data.category_id)

        fields = data.model_dump(exclude={'images'})
        images = data.images or []

        def write(slug):
            article = self.repository.add(NewsArticle(slug=slug, **fields))
            self.repository.replace_images(article, images)
            self.repository.commit()
            return article

        article = self._write_with_slug(self.article_slugs, data.title, None, write)
        self._changed()
        logger.info("Created news article %s (%s)", article.id, article.slug)
        return MutationOutcome("Article created successfully", article.id)

    @storage_boundary("Error updating article")
    def update_article(self, data: UpdateArticleSchema) -> MutationOutcome:
        existing = self._require_article(data.id)
        changes = data.changes()
        if changes.get('category_id') is not None:
            self._require_category(changes['category_id'])
        rename = 'title' in changes and changes['title'] != existing.title

        # Record fields and the image set commit together or not at all
        def write(slug=None):
            article = self._require_article(data.id)
            for field, value in changes.items():
                setattr(article, field, value)
            if slug is not None:
                article.slug = slug
            if data.replaces_images:
                self.repository.replace_images(article, data.images)
            self.repository.commit()
            return article

        if rename:
            self._write_with_slug(self.article_slugs, changes['title'], data.id, write)
        else:
            write()
        self._changed()
        logger.info("Updated news article %s (%s)", data.id, ', '.join(sorted(changes)) or 'no fields')
        return MutationOutcome("Article updated successfully", data.id)

    @storage_boundary("Error deleting article")
    def delete_article(self, article_id: str) -> MutationOutcome:
        article = self._require_article(article_id)
        self.repository.delete(article)
        self.repository.commit()
        self._changed()
        logger.info("Deleted news article %s", article_id)
        return MutationOutcome("Article deleted successfully", article_id)

    @storage_boundary("Error changing article status")
    def toggle_article_status(self, article_id: str, is_active: bool) -> MutationOutcome:
        article = self._require_article(article_id)
        article.is_active = is_active
        self.repository.commit()
        self._changed()
        return MutationOutcome("Article activated" if is_active else "Article deactivated", article_id)

    @storage_boundary("Error changing article featured flag")
    def toggle_article_featured(self, article_id: str, is_featured: bool) -> MutationOutcome:
        article = self._require_article(article_id)
        article.is_featured = is_featured
        self.repository.commit()
        self._changed()
        return MutationOutcome("Article featured" if is_featured else "Article unfeatured", article_id)
