"""
Shared constants and enums for the news admin.

Centralizes the closed value sets used by the list filters, the URL codec,
and the dialog state machine so every layer agrees on spelling.
"""

from enum import Enum


class NewsStatus(str, Enum):
    """Status filter applied to category and article listings."""
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"
    FEATURED = "featured"
    PUBLISHED = "published"  # Articles only
    DRAFT = "draft"  # Articles only


class EntityKind(str, Enum):
    """The two record kinds managed by the admin screen."""
    CATEGORY = "category"
    ARTICLE = "article"


class NewsTab(str, Enum):
    """Tabs of the admin screen, each with its own list state."""
    CATEGORIES = "categories"
    ARTICLES = "articles"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


ALL_CATEGORIES = "all"

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (10, 20, 50, 100)
DEFAULT_SORT = "createdAt"
DEFAULT_SORT_DIR = SortDirection.DESC

# Cache tag shared by every news listing
NEWS_CACHE_TAG = "news"

# Folder names inside the media bucket, keyed by entity kind
MEDIA_FOLDERS = {
    EntityKind.CATEGORY: "news-categories",
    EntityKind.ARTICLE: "news-articles",
}
