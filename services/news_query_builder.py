"""
News Query Builder - filter and sort state to SQLAlchemy clauses

Translates the list filters (search, status, category) and the table
sorting into WHERE and ORDER BY clauses for categories and articles.
Only the fixed field sets of the two entities are supported.
"""

from typing import List, Optional, Sequence

from sqlalchemy import and_, or_

from models.constants import ALL_CATEGORIES, EntityKind, NewsStatus
from models.news import NewsArticle, NewsCategory

CATEGORY_SORT_COLUMNS = {
    'name': NewsCategory.name,
    'order': NewsCategory.order,
    'createdAt': NewsCategory.created_at,
    'isActive': NewsCategory.is_active,
    'isFeatured': NewsCategory.is_featured,
}

ARTICLE_SORT_COLUMNS = {
    'title': NewsArticle.title,
    'publishedAt': NewsArticle.published_at,
    'createdAt': NewsArticle.created_at,
    'isActive': NewsArticle.is_active,
    'isFeatured': NewsArticle.is_featured,
}


def _contains(column, term: str):
    """Case-insensitive literal substring match (``%`` and ``_`` are escaped)."""
    escaped = term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return column.ilike(f'%{escaped}%', escape='\\')


def _search_clause(columns: Sequence, search: Optional[str]):
    term = (search or '').strip()
    if not term:
        return None
    return or_(*[_contains(column, term) for column in columns])


def published_clause(now):
    """Active, with a publish date at or before ``now``."""
    return and_(
        NewsArticle.is_active.is_(True),
        NewsArticle.published_at.isnot(None),
        NewsArticle.published_at <= now,
    )


def draft_clause():
    """
    Inactive OR never given a publish date.

    Active articles scheduled for the future are neither published nor
    matched here.
    """
    return or_(
        NewsArticle.is_active.is_(False),
        NewsArticle.published_at.is_(None),
    )


def build_category_predicate(filters=None) -> List:
    clauses = []
    if filters is None:
        return clauses

    search = _search_clause((NewsCategory.name, NewsCategory.description), filters.search)
    if search is not None:
        clauses.append(search)

    status = NewsStatus(filters.status)
    if status == NewsStatus.ACTIVE:
        clauses.append(NewsCategory.is_active.is_(True))
    elif status == NewsStatus.INACTIVE:
        clauses.append(NewsCategory.is_active.is_(False))
    elif status == NewsStatus.FEATURED:
        clauses.append(NewsCategory.is_featured.is_(True))
    # published/draft do not apply to categories

    return clauses


def build_article_predicate(filters=None, now=None, category_id: Optional[str] = None) -> List:
    clauses = []

    # A category chosen in the filters takes precedence over the argument
    effective_category = category_id
    if filters is not None and filters.category_id and filters.category_id != ALL_CATEGORIES:
        effective_category = filters.category_id
    if effective_category and effective_category != ALL_CATEGORIES:
        clauses.append(NewsArticle.category_id == effective_category)

    if filters is None:
        return clauses

    search = _search_clause(
        (NewsArticle.title, NewsArticle.excerpt, NewsArticle.content),
        filters.search,
    )
    if search is not None:
        clauses.append(search)

    status = NewsStatus(filters.status)
    if status == NewsStatus.ACTIVE:
        clauses.append(NewsArticle.is_active.is_(True))
    elif status == NewsStatus.INACTIVE:
        clauses.append(NewsArticle.is_active.is_(False))
    elif status == NewsStatus.FEATURED:
        clauses.append(NewsArticle.is_featured.is_(True))
    elif status == NewsStatus.PUBLISHED:
        if now is None:
            raise ValueError("'now' is required for the published filter")
        clauses.append(published_clause(now))
    elif status == NewsStatus.DRAFT:
        clauses.append(draft_clause())

    return clauses


def build_predicate(entity_kind, filters=None, now=None, category_id: Optional[str] = None) -> List:
    """
    Build the WHERE clauses for a listing.

    Args:
        entity_kind: EntityKind.CATEGORY or EntityKind.ARTICLE
        filters: Object with ``search``, ``status`` and ``category_id``
        now: Reference time for the published filter
        category_id: Extra category narrowing (articles only)

    Returns:
        List of clauses to AND together (empty list = no constraint)
    """
    kind = EntityKind(entity_kind)
    if kind == EntityKind.CATEGORY:
        return build_category_predicate(filters)
    return build_article_predicate(filters, now=now, category_id=category_id)


def build_ordering(entity_kind, sorting=None) -> List:
    """
    Build the ORDER BY clauses for a listing.

    Unknown sort fields fall back to newest-first creation time. The primary
    key is always appended last so equal keys page deterministically.
    """
    kind = EntityKind(entity_kind)
    if kind == EntityKind.CATEGORY:
        model, columns = NewsCategory, CATEGORY_SORT_COLUMNS
        default = [NewsCategory.order.asc(), NewsCategory.created_at.desc()]
    else:
        model, columns = NewsArticle, ARTICLE_SORT_COLUMNS
        default = [NewsArticle.published_at.desc(), NewsArticle.created_at.desc()]

    if not sorting:
        ordering = default
    else:
        ordering = []
        for spec in sorting:
            column = columns.get(spec.id)
            if column is None:
                ordering.append(model.created_at.desc())
            else:
                ordering.append(column.desc() if spec.desc else column.asc())

    return ordering + [model.id.asc()]
