"""
Services Package - Business Logic Layer

This package contains service classes that encapsulate business logic,
keeping route handlers thin and focused on HTTP concerns.
"""

from .admin_news_actions import ActionResult, AdminNewsActions
from .auth_service import AuthorizationGate
from .list_cache import TaggedListCache
from .news_list_service import NewsListService
from .news_mutation_service import NewsMutationService
from .news_repository import NewsRepository
from .slug_service import SlugResolver, slugify
from .storage_service import StorageService

__all__ = [
    'ActionResult',
    'AdminNewsActions',
    'AuthorizationGate',
    'TaggedListCache',
    'NewsListService',
    'NewsMutationService',
    'NewsRepository',
    'SlugResolver',
    'slugify',
    'StorageService',
]
