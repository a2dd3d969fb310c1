"""
Refresh coordination for the admin client

Reloads are fire-and-forget from the UI's point of view, so responses can
arrive out of order. Every reload takes a ticket for its tab; only the
response holding the newest ticket for that tab may be applied. Older
responses are dropped on arrival.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Hashable, Optional, Set, TypeVar

from models.constants import NewsTab
from models.view_state import ViewState

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RefreshTicket:
    tab: NewsTab
    sequence: int
    view_state: ViewState


class RefreshCoordinator:
    """Issues per-tab tickets and decides which responses are still wanted."""

    def __init__(self):
        self._sequence = itertools.count(1)
        self._latest: Dict[NewsTab, int] = {}

    def issue(self, tab: NewsTab, view_state: ViewState) -> RefreshTicket:
        ticket = RefreshTicket(NewsTab(tab), next(self._sequence), view_state)
        self._latest[ticket.tab] = ticket.sequence
        return ticket

    def is_current(self, ticket: RefreshTicket) -> bool:
        return self._latest.get(ticket.tab) == ticket.sequence

    def latest_sequence(self, tab: NewsTab) -> Optional[int]:
        return self._latest.get(NewsTab(tab))

    async def run(self, tab: NewsTab, view_state: ViewState,
                  load: Callable[[ViewState], Awaitable[T]]) -> Optional[T]:
        """
        Run ``load`` for ``view_state`` under a fresh ticket.

        Returns:
            The loaded value, or None when a newer reload for the same tab
            was issued while this one was in flight
        """
        ticket = self.issue(tab, view_state)
        try:
            result = await load(view_state)
        except Exception:
            if not self.is_current(ticket):
                logger.debug("Superseded %s reload #%d failed; ignoring", ticket.tab.value, ticket.sequence)
                return None
            raise

        if not self.is_current(ticket):
            logger.debug("Discarding stale %s response #%d", ticket.tab.value, ticket.sequence)
            return None
        return result


class MutationGuard:
    """
    Refuses a mutation while an identical one is still in flight.

    Identity is the ``(operation, target_id)`` key supplied by the caller.
    """

    def __init__(self):
        self._pending: Set[Hashable] = set()

    def is_pending(self, operation: str, target_id: Optional[str] = None) -> bool:
        return (operation, target_id) in self._pending

    @property
    def any_pending(self) -> bool:
        return bool(self._pending)

    async def run(self, operation: str, target_id: Optional[str],
                  call: Callable[[], Awaitable[T]]) -> Optional[T]:
        """
        Await ``call()`` unless the same mutation is already running.

        Returns:
            The call's result, or None when the mutation was refused
        """
        key = (operation, target_id)
        if key in self._pending:
            logger.info("Ignoring duplicate %s for %s while one is pending", operation, target_id)
            return None

        self._pending.add(key)
        try:
            return await call()
        finally:
            self._pending.discard(key)
