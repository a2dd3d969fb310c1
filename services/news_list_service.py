"""
News List Service - paginated retrieval of categories and articles

Runs the repository queries for one page, wraps them in a PageEnvelope, and
turns any storage failure into a generic message so database details never
reach the admin UI.
"""

import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from models.constants import NEWS_CACHE_TAG
from models.news import utcnow
from models.pagination import NewsStats, PageEnvelope
from schemas.news import GetArticlesParams, GetCategoriesParams
from services.list_cache import TaggedListCache
from services.news_repository import NewsRepository
from utils.errors import StorageFault

logger = logging.getLogger(__name__)


class NewsListService:
    """Read side of the news admin."""

    def __init__(
        self,
        repository: NewsRepository,
        cache: Optional[TaggedListCache] = None,
        clock: Callable = utcnow,
    ):
        self.repository = repository
        self.cache = cache or TaggedListCache(ttl_seconds=0)
        self.clock = clock

    def list_categories(self, params: GetCategoriesParams) -> Tuple[PageEnvelope, NewsStats]:
        """
        One page of categories plus the aggregate counters.

        Raises:
            StorageFault: the database could not be read
        """
        key = ('categories', params.model_dump_json())
        return self.cache.get_or_load(NEWS_CACHE_TAG, key, lambda: self._load_categories(params))

    def list_articles(self, params: GetArticlesParams) -> PageEnvelope:
        """
        One page of articles.

        Raises:
            StorageFault: the database could not be read
        """
        key = ('articles', params.model_dump_json())
        return self.cache.get_or_load(NEWS_CACHE_TAG, key, lambda: self._load_articles(params))

    def categories_for_select(self) -> List[dict]:
        """Active categories as ``{id, name}`` pairs for dropdowns."""
        try:
            return self.cache.get_or_load(
                NEWS_CACHE_TAG, ('categories-select',), self.repository.categories_for_select
            )
        except SQLAlchemyError:
            logger.exception("Failed to load categories for select")
            self.repository.rollback()
            return []

    def _load_categories(self, params: GetCategoriesParams) -> Tuple[PageEnvelope, NewsStats]:
        try:
            now = self.clock()
            categories, total = self.repository.list_categories(
                params.page, params.limit, params.sorting, params.filters
            )
            stats = self.repository.get_stats(now)
            items = [category.to_dict() for category in categories]
        except SQLAlchemyError as exc:
            logger.exception("Failed to list news categories")
            self.repository.rollback()
            raise StorageFault("Error fetching categories") from exc

        logger.debug("Listed %d of %d categories (page %d)", len(items), total, params.page)
        return PageEnvelope.build(items, params.page, params.limit, total), stats

    def _load_articles(self, params: GetArticlesParams) -> PageEnvelope:
        try:
            articles, total = self.repository.list_articles(
                params.page,
                params.limit,
                params.sorting,
                params.filters,
                category_id=params.category_id,
                now=self.clock(),
            )
            items = [article.to_dict() for article in articles]
        except SQLAlchemyError as exc:
            logger.exception("Failed to list news articles")
            self.repository.rollback()
            raise StorageFault("Error fetching articles") from exc

        logger.debug("Listed %d of %d articles (page %d)", len(items), total, params.page)
        return PageEnvelope.build(items, params.page, params.limit, total)
