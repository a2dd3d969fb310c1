"""
Admin News Client - view model of the news admin screen

Holds everything the screen shows (lists, stats, view state, open dialog,
notifications) and turns UI events into calls on an async news API. The API
is anything exposing the AdminNewsActions operations as coroutines; see
InProcessNewsApi for the one backed by this application.
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from models.constants import PAGE_SIZE_OPTIONS, NewsTab
from models.dialog_state import CLOSED, DialogKind, DialogState, close_dialog, open_dialog
from models.view_state import ViewState
from services import query_state_codec as codec
from services.refresh_coordinator import MutationGuard, RefreshCoordinator

logger = logging.getLogger(__name__)


def empty_page(view_state: ViewState) -> dict:
    return {
        "items": [],
        "pagination": {
            "page": view_state.page,
            "limit": view_state.page_size,
            "total": 0,
            "totalPages": 0,
            "hasNextPage": False,
            "hasPrevPage": view_state.page > 1,
        },
    }


@dataclass(frozen=True)
class Notification:
    """Dismissible toast shown after a mutation."""
    message: str
    is_error: bool = False


class AdminNewsClient:
    """State and event handlers for the news admin screen."""

    def __init__(self, api, params: Optional[Mapping[str, str]] = None,
                 page_size_options=PAGE_SIZE_OPTIONS):
        """
        Args:
            api: Async news API (coroutine methods named like AdminNewsActions)
            params: Current URL query parameters
            page_size_options: Page sizes offered by the table
        """
        self.api = api
        self.page_size_options = tuple(page_size_options)
        self.url_params = dict(params or {})
        self.view_state = codec.decode(self.url_params, page_size_options=self.page_size_options)
        self.dialog: DialogState = CLOSED
        self.categories = empty_page(self.view_state)
        self.articles = empty_page(self.view_state)
        self.stats: Optional[dict] = None
        self.categories_for_select = []
        self.list_errors: dict = {NewsTab.CATEGORIES: None, NewsTab.ARTICLES: None}
        self.notification: Optional[Notification] = None
        self.coordinator = RefreshCoordinator()
        self.guard = MutationGuard()

    @property
    def list_error(self) -> Optional[str]:
        """Error banner text for the tab on screen."""
        return self.list_errors[self.view_state.active_tab]

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Initial load: both lists, the stats, and the category dropdown."""
        await asyncio.gather(
            self.reload_categories(),
            self.reload_articles(),
            self.reload_categories_for_select(),
        )

    async def reload_categories(self) -> None:
        result = await self.coordinator.run(
            NewsTab.CATEGORIES, self.view_state,
            lambda state: self.api.get_categories(codec.to_list_params(state)),
        )
        if result is None:
            return
        if result.error:
            self.list_errors[NewsTab.CATEGORIES] = result.error
            return
        data = dict(result.data)
        self.stats = data.pop("stats", self.stats)
        self.categories = data
        self.list_errors[NewsTab.CATEGORIES] = None

    async def reload_articles(self) -> None:
        result = await self.coordinator.run(
            NewsTab.ARTICLES, self.view_state,
            lambda state: self.api.get_articles(codec.to_list_params(state)),
        )
        if result is None:
            return
        if result.error:
            self.list_errors[NewsTab.ARTICLES] = result.error
            return
        self.articles = result.data
        self.list_errors[NewsTab.ARTICLES] = None

    async def reload_categories_for_select(self) -> None:
        result = await self.api.get_categories_for_select()
        if result.ok:
            self.categories_for_select = result.data or []

    async def reload_active_tab(self) -> None:
        if self.view_state.active_tab == NewsTab.ARTICLES:
            await self.reload_articles()
        else:
            await self.reload_categories()

    async def retry(self) -> None:
        """Retry button of the list error banner."""
        await self.reload_active_tab()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def _navigate(self, view_state: ViewState) -> None:
        self.view_state = view_state
        self.url_params = codec.encode(view_state, self.url_params)
        await self.reload_active_tab()

    async def change_page(self, page: int) -> None:
        await self._navigate(codec.set_page(self.view_state, page))

    async def change_page_size(self, page_size: int) -> None:
        await self._navigate(codec.set_page_size(self.view_state, page_size, self.page_size_options))

    async def change_sort(self, sort_field: Optional[str], descending: bool = False) -> None:
        await self._navigate(codec.set_sort(self.view_state, sort_field, descending))

    async def change_search(self, search_text: str) -> None:
        await self._navigate(codec.set_search(self.view_state, search_text))

    async def change_filters(self, status=None, category: Optional[str] = None) -> None:
        await self._navigate(codec.set_filters(self.view_state, status, category))

    async def reset_filters(self) -> None:
        await self._navigate(codec.reset_filters(self.view_state))

    async def switch_tab(self, tab) -> None:
        await self._navigate(codec.switch_tab(self.view_state, tab))

    # ------------------------------------------------------------------
    # Dialogs
    # ------------------------------------------------------------------

    def open_dialog(self, kind: DialogKind, record=None) -> None:
        self.dialog = open_dialog(self.dialog, kind, record)

    def close_dialog(self) -> None:
        self.dialog = close_dialog(self.dialog)

    def dismiss_notification(self) -> None:
        self.notification = None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _mutate(self, operation: str, target_id: Optional[str],
                      call: Callable[[], Any], after: Callable[[], Any]):
        result = await self.guard.run(operation, target_id, call)
        if result is None:
            return None

        if result.error:
            # Dialog stays open so the admin can fix the input
            self.notification = Notification(result.error, is_error=True)
            return result

        self.notification = Notification(result.success or "Done")
        self.dialog = close_dialog(self.dialog)
        await after()
        return result

    async def _full_refresh(self) -> None:
        # Category changes move article counts and the dropdown too
        await asyncio.gather(self.reload_categories(), self.reload_categories_for_select())

    def is_pending(self, operation: str, target_id: Optional[str] = None) -> bool:
        return self.guard.is_pending(operation, target_id)

    async def create_category(self, payload: Mapping):
        return await self._mutate("create_category", None,
                                  lambda: self.api.create_category(payload), self._full_refresh)

    async def update_category(self, category_id: str, payload: Mapping):
        return await self._mutate("update_category", category_id,
                                  lambda: self.api.update_category(category_id, payload), self._full_refresh)

    async def delete_category(self, category_id: str):
        return await self._mutate("delete_category", category_id,
                                  lambda: self.api.delete_category(category_id), self._full_refresh)

    async def toggle_category_status(self, category_id: str, is_active: bool):
        return await self._mutate("toggle_category_status", category_id,
                                  lambda: self.api.toggle_category_status(category_id, is_active),
                                  self._full_refresh)

    async def toggle_category_featured(self, category_id: str, is_featured: bool):
        return await self._mutate("toggle_category_featured", category_id,
                                  lambda: self.api.toggle_category_featured(category_id, is_featured),
                                  self._full_refresh)

    async def create_article(self, payload: Mapping):
        return await self._mutate("create_article", None,
                                  lambda: self.api.create_article(payload), self.reload_articles)

    async def update_article(self, article_id: str, payload: Mapping):
        return await self._mutate("update_article", article_id,
                                  lambda: self.api.update_article(article_id, payload), self.reload_articles)

    async def delete_article(self, article_id: str):
        return await self._mutate("delete_article", article_id,
                                  lambda: self.api.delete_article(article_id), self.reload_articles)

    async def toggle_article_status(self, article_id: str, is_active: bool):
        return await self._mutate("toggle_article_status", article_id,
                                  lambda: self.api.toggle_article_status(article_id, is_active),
                                  self.reload_articles)

    async def toggle_article_featured(self, article_id: str, is_featured: bool):
        return await self._mutate("toggle_article_featured", article_id,
                                  lambda: self.api.toggle_article_featured(article_id, is_featured),
                                  self.reload_articles)


class InProcessNewsApi:
    """
    Async facade over AdminNewsActions for callers inside this process.

    The actions do blocking SQLAlchemy work, so each call runs on a worker
    thread under its own application context while the event loop stays
    free. The default pool has a single worker: one SQLite connection may
    not be used from two threads at once. Call ``close`` when done.
    """

    def __init__(self, app, actions, executor: Optional[Executor] = None):
        self.app = app
        self.actions = actions
        self.executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="news-admin")

    def _run_in_app_context(self, action, args, kwargs):
        with self.app.app_context():
            return action(*args, **kwargs)

    def __getattr__(self, name):
        action = getattr(self.actions, name)
        if not callable(action):
            raise AttributeError(name)

        async def call(*args, **kwargs):
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(
                self.executor, functools.partial(self._run_in_app_context, action, args, kwargs),
            )
        return call

    def close(self) -> None:
        self.executor.shutdown(wait=True)
