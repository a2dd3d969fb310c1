"""
Page envelope returned by every list retrieval.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple


@dataclass(frozen=True)
class PageEnvelope:
    """
    One page of results plus the pagination arithmetic derived from it.

    Built fresh for each retrieval and never mutated afterwards.
    """
    items: Tuple[Any, ...]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, items, page: int, page_size: int, total_items: int) -> "PageEnvelope":
        """
        Compute total pages and navigation flags for a page of items.

        Args:
            items: Items on the requested page
            page: 1-based page number
            page_size: Requested page size (must be positive)
            total_items: Total number of items matching the filters

        Returns:
            PageEnvelope with ``total_pages = ceil(total_items / page_size)``
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")

        total_pages = math.ceil(total_items / page_size) if total_items else 0
        return cls(
            items=tuple(items),
            page=page,
            page_size=page_size,
            total_items=total_items,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )

    @staticmethod
    def offset_for(page: int, page_size: int) -> int:
        return (page - 1) * page_size

    def pagination_dict(self) -> dict:
        """Pagination block of the wire envelope."""
        return {
            "page": self.page,
            "limit": self.page_size,
            "total": self.total_items,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next,
            "hasPrevPage": self.has_prev,
        }

    def to_dict(self, serialize: Optional[Callable[[Any], Any]] = None) -> dict:
        if serialize is None:
            serialize = lambda item: item if isinstance(item, dict) else item.to_dict()  # noqa: E731
        return {
            "items": [serialize(item) for item in self.items],
            "pagination": self.pagination_dict(),
        }


@dataclass(frozen=True)
class NewsStats:
    """Aggregate counters shown above the category list."""
    total_categories: int = 0
    total_articles: int = 0
    active_categories: int = 0
    active_articles: int = 0
    featured_categories: int = 0
    featured_articles: int = 0
    published_articles: int = 0

    def to_dict(self) -> dict:
        return {
            "totalCategories": self.total_categories,
            "totalArticles": self.total_articles,
            "activeCategories": self.active_categories,
            "activeArticles": self.active_articles,
            "featuredCategories": self.featured_categories,
            "featuredArticles": self.featured_articles,
            "publishedArticles": self.published_articles,
        }
