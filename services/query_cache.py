"""
Client-side query cache.

Server data is cached per scope key, a tuple whose first element is the
entity kind:

    ("companies",)
    ("users", (("companyId", "c1"),))
    ("questions", "video", "v1")
    ("questions", "q1")

Writes never patch cached data. A successful mutation invalidates a scope and
every entry under that prefix is refetched on its next read.
"""

import logging
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from cachetools import LRUCache
from pydantic import BaseModel, ConfigDict

from api.client import ApiError
from config.settings import settings

logger = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]
Fetcher = Callable[[], Any]
Subscriber = Callable[[QueryKey], None]


class QueryStatus(str, Enum):
    """Lifecycle shared by queries and mutations"""
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class QueryState(BaseModel):
    """Snapshot of one cache entry."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    key: QueryKey
    data: Any = None
    status: QueryStatus = QueryStatus.IDLE
    error: Optional[Exception] = None
    updated_at: Optional[float] = None
    fetched_at: Optional[float] = None
    invalidated: bool = False

    @property
    def is_loading(self) -> bool:
        """Pending with nothing to show yet."""
        return self.status == QueryStatus.PENDING and self.data is None

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR


def key_in_scope(key: QueryKey, scope: QueryKey) -> bool:
    """True when ``scope`` is a prefix of ``key``."""
    return tuple(key[:len(scope)]) == tuple(scope)


class QueryCache:
    """
    Bounded cache of query states with prefix invalidation.

    Args:
        max_entries: LRU bound, defaults to settings.QUERY_CACHE_MAX_ENTRIES
        stale_time: Seconds a successful entry is served without refetching,
            defaults to settings.QUERY_STALE_SECONDS
        clock: Monotonic time source (tests inject a fake)
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        stale_time: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._entries: LRUCache = LRUCache(maxsize=max_entries or settings.QUERY_CACHE_MAX_ENTRIES)
        self._stale_time = settings.QUERY_STALE_SECONDS if stale_time is None else stale_time
        self._clock = clock
        self._lock = threading.RLock()
        self._subscribers: Dict[int, Tuple[QueryKey, Subscriber]] = {}
        self._next_subscriber_id = 0

    # ============ READS ============

    def get_state(self, key: QueryKey) -> Optional[QueryState]:
        with self._lock:
            return self._entries.get(tuple(key))

    def fetch(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        enabled: bool = True,
        stale_time: Optional[float] = None,
    ) -> QueryState:
        """
        Return the state for ``key``, calling ``fetcher`` when the entry is
        missing, invalidated or stale.

        Disabled queries never call the fetcher; they report whatever is cached
        or an idle state. Fetch failures (ApiError) are stored on the state with
        the previous data kept; they are not raised.
        """
        key = tuple(key)
        with self._lock:
            current = self._entries.get(key)

        if not enabled:
            return current or QueryState(key=key)

        if current is not None and not self._needs_fetch(current, stale_time):
            return current

        return self._run(key, fetcher, current)

    def refetch(self, key: QueryKey, fetcher: Fetcher) -> QueryState:
        """Fetch unconditionally."""
        key = tuple(key)
        with self._lock:
            current = self._entries.get(key)
        return self._run(key, fetcher, current)

    def _needs_fetch(self, state: QueryState, stale_time: Optional[float]) -> bool:
        if state.status == QueryStatus.PENDING:
            return False
        if state.invalidated or state.fetched_at is None:
            return True
        limit = self._stale_time if stale_time is None else stale_time
        return self._clock() - state.fetched_at >= limit

    def _run(self, key: QueryKey, fetcher: Fetcher, previous: Optional[QueryState]) -> QueryState:
        previous_data = previous.data if previous else None
        previous_updated = previous.updated_at if previous else None

        self._store(QueryState(
            key=key,
            data=previous_data,
            status=QueryStatus.PENDING,
            updated_at=previous_updated,
            fetched_at=previous.fetched_at if previous else None,
        ))

        try:
            data = fetcher()
        except ApiError as exc:
            logger.warning(f"Query {key} failed: {exc.message}")
            state = QueryState(
                key=key,
                data=previous_data,
                status=QueryStatus.ERROR,
                error=exc,
                updated_at=previous_updated,
                fetched_at=self._clock(),
            )
        except Exception:
            self._restore(key, previous)
            raise
        else:
            now = self._clock()
            state = QueryState(
                key=key,
                data=data,
                status=QueryStatus.SUCCESS,
                updated_at=now,
                fetched_at=now,
            )

        self._store(state)
        return state

    def _store(self, state: QueryState) -> None:
        with self._lock:
            self._entries[state.key] = state

    def _restore(self, key: QueryKey, previous: Optional[QueryState]) -> None:
        with self._lock:
            if previous is None:
                self._entries.pop(key, None)
            else:
                self._entries[key] = previous

    # ============ INVALIDATION ============

    def invalidate(self, scope: QueryKey) -> List[QueryKey]:
        """
        Mark every entry under ``scope`` as invalidated and notify subscribers
        whose scope overlaps it.

        Returns:
            Keys that were marked
        """
        scope = tuple(scope)
        with self._lock:
            matched = [key for key in list(self._entries.keys()) if key_in_scope(key, scope)]
            for key in matched:
                self._entries[key] = self._entries[key].model_copy(update={"invalidated": True})
            subscribers = [
                callback for sub_scope, callback in self._subscribers.values()
                if key_in_scope(sub_scope, scope) or key_in_scope(scope, sub_scope)
            ]

        logger.debug(f"Invalidated {scope}: {len(matched)} entries")
        for callback in subscribers:
            callback(scope)
        return matched

    def subscribe(self, scope: QueryKey, callback: Subscriber) -> Callable[[], None]:
        """
        Call ``callback(invalidated_scope)`` whenever an overlapping scope is
        invalidated. Returns the unsubscribe function.
        """
        with self._lock:
            subscriber_id = self._next_subscriber_id
            self._next_subscriber_id += 1
            self._subscribers[subscriber_id] = (tuple(scope), callback)

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(subscriber_id, None)

        return unsubscribe

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
