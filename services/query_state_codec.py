"""
Query State Codec - ViewState <-> URL query parameters

The admin screen keeps its list state in the URL so a reload or a shared
link shows the same page. Parameters are namespaced with ``news_`` so the
screen can share a query string with other widgets; anything without the
prefix is passed through untouched.
"""

import dataclasses
from typing import Iterable, List, Mapping, Optional

from models.constants import (
    ALL_CATEGORIES,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    DEFAULT_SORT_DIR,
    PAGE_SIZE_OPTIONS,
    NewsStatus,
    NewsTab,
    SortDirection,
)
from models.view_state import DEFAULT_VIEW_STATE, ViewState

PREFIX = "news"
MAX_SEARCH_LENGTH = 200
TAB_PARAM = "tab"


def param_name(name: str, prefix: str = PREFIX) -> str:
    return f"{prefix}_{name}"


def _positive_int(raw, default: int) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return value if value >= 1 else default


def _enum_value(enum_cls, raw, default):
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        return default


def decode(params: Optional[Mapping[str, str]], prefix: str = PREFIX,
           page_size_options: Iterable[int] = PAGE_SIZE_OPTIONS) -> ViewState:
    """
    Build a ViewState from query parameters.

    Absent or malformed values fall back to their defaults; decoding never
    fails. A page size outside ``page_size_options`` is treated as malformed.

    Args:
        params: Query parameters (``request.args`` or a plain dict)
        prefix: Namespace prefix of the list parameters
        page_size_options: Allowed page sizes

    Returns:
        ViewState
    """
    params = params or {}

    def get(name):
        value = params.get(param_name(name, prefix))
        return value if value not in (None, "") else None

    page = _positive_int(get("page"), DEFAULT_PAGE)

    page_size = _positive_int(get("pageSize"), DEFAULT_PAGE_SIZE)
    if page_size not in tuple(page_size_options):
        page_size = DEFAULT_PAGE_SIZE

    sort_field = (get("sort") or DEFAULT_SORT).strip() or DEFAULT_SORT
    sort_direction = _enum_value(SortDirection, get("sortDir"), DEFAULT_SORT_DIR)

    search_text = (get("search") or "").strip()[:MAX_SEARCH_LENGTH]
    status = _enum_value(NewsStatus, get("status"), NewsStatus.ALL)
    category = (get("category") or ALL_CATEGORIES).strip() or ALL_CATEGORIES
    tab = _enum_value(NewsTab, get(TAB_PARAM), NewsTab.CATEGORIES)

    return ViewState(
        page=page,
        page_size=page_size,
        sort_field=sort_field,
        sort_direction=sort_direction,
        search_text=search_text,
        status_filter=status,
        category_filter=category,
        active_tab=tab,
    )


def encode(view_state: ViewState, previous_params: Optional[Mapping[str, str]] = None,
           prefix: str = PREFIX) -> dict:
    """
    Turn a ViewState into query parameters.

    Parameters equal to their default are omitted, so the default state
    encodes to nothing. ``sort`` and ``sortDir`` travel as a pair: both are
    written unless both are default. Parameters from ``previous_params``
    outside the prefix are kept as they were.

    Returns:
        dict of query parameters
    """
    params = {
        key: value for key, value in (previous_params or {}).items()
        if not key.startswith(f"{prefix}_")
    }
    default = DEFAULT_VIEW_STATE

    def put(name, value):
        params[param_name(name, prefix)] = str(value)

    if view_state.page != default.page:
        put("page", view_state.page)
    if view_state.page_size != default.page_size:
        put("pageSize", view_state.page_size)
    if (view_state.sort_field, view_state.sort_direction) != (default.sort_field, default.sort_direction):
        put("sort", view_state.sort_field)
        put("sortDir", SortDirection(view_state.sort_direction).value)
    if view_state.search_text:
        put("search", view_state.search_text)
    if view_state.status_filter != default.status_filter:
        put("status", NewsStatus(view_state.status_filter).value)
    if view_state.category_filter != default.category_filter:
        put("category", view_state.category_filter)
    if view_state.active_tab != default.active_tab:
        put(TAB_PARAM, NewsTab(view_state.active_tab).value)
    return params


# ----------------------------------------------------------------------
# Transitions
# ----------------------------------------------------------------------

def switch_tab(view_state: ViewState, tab) -> ViewState:
    """Move to ``tab``; both tabs start over from the default list state."""
    return dataclasses.replace(DEFAULT_VIEW_STATE, active_tab=NewsTab(tab))


def set_page(view_state: ViewState, page: int) -> ViewState:
    if page < 1:
        raise ValueError("page must be >= 1")
    return dataclasses.replace(view_state, page=page)


def set_page_size(view_state: ViewState, page_size: int,
                  page_size_options: Iterable[int] = PAGE_SIZE_OPTIONS) -> ViewState:
    if page_size not in tuple(page_size_options):
        raise ValueError(f"page size must be one of {tuple(page_size_options)}")
    return dataclasses.replace(view_state, page=DEFAULT_PAGE, page_size=page_size)


def set_sort(view_state: ViewState, sort_field: Optional[str], descending: bool = False) -> ViewState:
    """Sort by ``sort_field``; an empty field restores the default ordering."""
    if not sort_field:
        return dataclasses.replace(
            view_state, page=DEFAULT_PAGE, sort_field=DEFAULT_SORT, sort_direction=DEFAULT_SORT_DIR
        )
    direction = SortDirection.DESC if descending else SortDirection.ASC
    return dataclasses.replace(view_state, page=DEFAULT_PAGE, sort_field=sort_field, sort_direction=direction)


def set_search(view_state: ViewState, search_text: str) -> ViewState:
    return dataclasses.replace(
        view_state, page=DEFAULT_PAGE, search_text=(search_text or "").strip()[:MAX_SEARCH_LENGTH]
    )


def set_filters(view_state: ViewState, status=None, category: Optional[str] = None) -> ViewState:
    """Change the status and/or category filter; unspecified ones are kept."""
    changes = {"page": DEFAULT_PAGE}
    if status is not None:
        changes["status_filter"] = NewsStatus(status)
    if category is not None:
        changes["category_filter"] = category or ALL_CATEGORIES
    return dataclasses.replace(view_state, **changes)


def reset_filters(view_state: ViewState) -> ViewState:
    """Back to the default list state, staying on the current tab."""
    return dataclasses.replace(DEFAULT_VIEW_STATE, active_tab=view_state.active_tab)


# ----------------------------------------------------------------------
# Retrieval parameters
# ----------------------------------------------------------------------

def to_sorting(view_state: ViewState) -> List[dict]:
    return [{"id": view_state.sort_field, "desc": view_state.is_descending}]


def to_filters(view_state: ViewState) -> dict:
    return {
        "search": view_state.search_text,
        "status": NewsStatus(view_state.status_filter).value,
        "categoryId": view_state.category_filter,
    }


def to_list_params(view_state: ViewState) -> dict:
    """Payload for getCategories / getArticles built from the view state."""
    return {
        "page": view_state.page,
        "limit": view_state.page_size,
        "sorting": to_sorting(view_state),
        "filters": to_filters(view_state),
    }
