"""
Models package for the Newsroom admin.

Provides the persisted news records, the admin user, and the client-side
list and dialog state types.
"""
from .constants import EntityKind, NewsStatus, NewsTab, SortDirection, UserRole
from .news import NewsArticle, NewsCategory, NewsImage
from .user import User
from .pagination import NewsStats, PageEnvelope
from .view_state import DEFAULT_VIEW_STATE, ViewState
from .dialog_state import DialogKind, DialogState, DialogTarget

__all__ = [
    'EntityKind',
    'NewsStatus',
    'NewsTab',
    'SortDirection',
    'UserRole',
    'NewsArticle',
    'NewsCategory',
    'NewsImage',
    'User',
    'NewsStats',
    'PageEnvelope',
    'DEFAULT_VIEW_STATE',
    'ViewState',
    'DialogKind',
    'DialogState',
    'DialogTarget',
]
