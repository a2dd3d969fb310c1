"""
News Repository - persistence for categories, articles, and images

Thin layer over the SQLAlchemy session. It stages and commits changes but
makes no business decisions; those live in the list and mutation services.
"""

from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import joinedload

from models.constants import EntityKind
from models.news import NewsArticle, NewsCategory, NewsImage
from models.pagination import NewsStats, PageEnvelope
from services.news_query_builder import (
    build_ordering,
    build_predicate,
    published_clause,
)


class NewsRepository:
    """Reads and writes news records through one SQLAlchemy session."""

    def __init__(self, session):
        """
        Args:
            session: SQLAlchemy session (``db.session`` inside the app)
        """
        self.session = session

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def _page(self, model, clauses, ordering, page: int, page_size: int, options=()) -> Tuple[List, int]:
        # The total rides along as a window count, so rows and total come from
        # one statement and therefore one snapshot at any isolation level.
        stmt = (
            select(model, func.count().over().label("total"))
            .options(*options)
            .where(*clauses)
            .order_by(*ordering)
            .offset(PageEnvelope.offset_for(page, page_size))
            .limit(page_size)
        )
        rows = self.session.execute(stmt).all()
        if rows:
            return [row[0] for row in rows], rows[0].total
        if page == 1:
            return [], 0
        # Past the last page: no rows to disagree with, only the total is needed
        total = self.session.scalar(select(func.count(model.id)).where(*clauses)) or 0
        return [], total

    def list_categories(self, page: int, page_size: int, sorting=None, filters=None) -> Tuple[List[NewsCategory], int]:
        clauses = build_predicate(EntityKind.CATEGORY, filters)
        ordering = build_ordering(EntityKind.CATEGORY, sorting)
        return self._page(NewsCategory, clauses, ordering, page, page_size)

    def list_articles(
        self,
        page: int,
        page_size: int,
        sorting=None,
        filters=None,
        category_id: Optional[str] = None,
        now=None,
    ) -> Tuple[List[NewsArticle], int]:
        clauses = build_predicate(EntityKind.ARTICLE, filters, now=now, category_id=category_id)
        ordering = build_ordering(EntityKind.ARTICLE, sorting)
        return self._page(
            NewsArticle, clauses, ordering, page, page_size,
            options=(joinedload(NewsArticle.category),),
        )

    def get_stats(self, now) -> NewsStats:
        """All counters in one round trip."""

        def count(model, *clauses):
            return select(func.count(model.id)).where(*clauses).scalar_subquery()

        row = self.session.execute(
            select(
                count(NewsCategory),
                count(NewsArticle),
                count(NewsCategory, NewsCategory.is_active.is_(True)),
                count(NewsArticle, NewsArticle.is_active.is_(True)),
                count(NewsCategory, NewsCategory.is_featured.is_(True)),
                count(NewsArticle, NewsArticle.is_featured.is_(True)),
                count(NewsArticle, published_clause(now)),
            )
        ).one()
        return NewsStats(*(value or 0 for value in row))

    def categories_for_select(self) -> List[dict]:
        rows = self.session.execute(
            select(NewsCategory.id, NewsCategory.name)
            .where(NewsCategory.is_active.is_(True))
            .order_by(NewsCategory.order.asc(), NewsCategory.created_at.desc(), NewsCategory.id.asc())
        )
        return [{"id": row.id, "name": row.name} for row in rows]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_category(self, category_id: str) -> Optional[NewsCategory]:
        return self.session.get(NewsCategory, category_id)

    def get_article(self, article_id: str) -> Optional[NewsArticle]:
        return self.session.get(NewsArticle, article_id)

    def count_articles_in(self, category_id: str) -> int:
        return self.session.scalar(
            select(func.count(NewsArticle.id)).where(NewsArticle.category_id == category_id)
        ) or 0

    def _slugs_starting_with(self, model, base: str, exclude_id: Optional[str]) -> List[str]:
        stmt = select(model.slug).where(model.slug.startswith(base, autoescape=True))
        if exclude_id:
            stmt = stmt.where(model.id != exclude_id)
        return list(self.session.scalars(stmt))

    def category_slugs_starting_with(self, base: str, exclude_id: Optional[str] = None) -> List[str]:
        return self._slugs_starting_with(NewsCategory, base, exclude_id)

    def article_slugs_starting_with(self, base: str, exclude_id: Optional[str] = None) -> List[str]:
        return self._slugs_starting_with(NewsArticle, base, exclude_id)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add(self, record):
        self.session.add(record)
        return record

    def delete(self, record) -> None:
        self.session.delete(record)

    def replace_images(self, article: NewsArticle, images: Iterable) -> None:
        """
        Swap the article's image set for ``images`` in the current transaction.

        The old rows are removed and the new ones inserted; nothing is merged.
        """
        article.images = [
            NewsImage(url=image.url, alt=image.alt, order=image.order)
            for image in images
        ]

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def refresh(self, record) -> None:
        self.session.refresh(record)
