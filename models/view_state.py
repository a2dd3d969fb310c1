"""
List view state for the news admin screen.

A ViewState is reconstructed from the URL on every load and never stored
server-side. It is immutable: every user action produces a new instance.
"""

from dataclasses import dataclass

from models.constants import (
    ALL_CATEGORIES,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    DEFAULT_SORT_DIR,
    NewsStatus,
    NewsTab,
    SortDirection,
)


@dataclass(frozen=True)
class ViewState:
    """What the list on the active tab should display."""
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    sort_field: str = DEFAULT_SORT
    sort_direction: SortDirection = DEFAULT_SORT_DIR
    search_text: str = ""
    status_filter: NewsStatus = NewsStatus.ALL
    category_filter: str = ALL_CATEGORIES
    active_tab: NewsTab = NewsTab.CATEGORIES

    @property
    def is_descending(self) -> bool:
        return self.sort_direction == SortDirection.DESC

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "sort": self.sort_field,
            "sortDir": self.sort_direction.value,
            "search": self.search_text,
            "status": self.status_filter.value,
            "category": self.category_filter,
            "tab": self.active_tab.value,
        }


DEFAULT_VIEW_STATE = ViewState()
