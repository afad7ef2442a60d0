"""
Mutation state machine.

idle -> pending -> success -> (cache invalidation) -> idle
pending -> error (kept until the next attempt or reset())

Each Mutation instance owns its own pending flag, so two different buttons
never block each other while one button cannot submit twice.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

from services.query_cache import QueryStatus

logger = logging.getLogger(__name__)

SuccessHandler = Callable[[Any, Dict[str, Any]], None]


class MutationInProgress(RuntimeError):
    """A second submission arrived while the first was still pending."""


class Mutation:
    """
    One server write with observable status.

    Args:
        fn: Callable performing the write; receives the keyword variables
        on_success: Called with (result, variables) after a successful write,
            typically to invalidate cache scopes
        name: Label used in logs and errors

    Usage:
        create = Mutation(service_call, on_success=lambda result, variables: cache.invalidate(("companies",)))
        create.mutate(data={"name": "Acme"})
    """

    def __init__(self, fn: Callable[..., Any], on_success: Optional[SuccessHandler] = None,
                 name: Optional[str] = None):
        self._fn = fn
        self._on_success = on_success
        self.name = name or getattr(fn, "__name__", "mutation")
        self._lock = threading.Lock()

        self.status = QueryStatus.IDLE
        self.error: Optional[Exception] = None
        self.data: Any = None

    @property
    def is_pending(self) -> bool:
        return self.status == QueryStatus.PENDING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR

    def mutate(self, **variables) -> Any:
        """
        Run the write once and return its result.

        Raises:
            MutationInProgress: A previous call has not finished
            Exception: Whatever the write raised (also kept on ``error``)
        """
        with self._lock:
            if self.status == QueryStatus.PENDING:
                raise MutationInProgress(f"{self.name} is already in progress")
            self.status = QueryStatus.PENDING
            self.error = None

        try:
            result = self._fn(**variables)
        except Exception as exc:
            logger.info(f"{self.name} failed: {exc}")
            with self._lock:
                self.status = QueryStatus.ERROR
                self.error = exc
            raise

        with self._lock:
            self.status = QueryStatus.SUCCESS
            self.data = result

        try:
            if self._on_success:
                self._on_success(result, variables)
        finally:
            with self._lock:
                self.status = QueryStatus.IDLE

        return result

    def reset(self) -> None:
        """Clear a recorded error (no effect while pending)."""
        with self._lock:
            if self.status != QueryStatus.PENDING:
                self.status = QueryStatus.IDLE
                self.error = None
