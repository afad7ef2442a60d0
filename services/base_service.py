"""
Base class for resource services.

A resource service pairs read queries (served from the QueryCache) with
Mutation objects whose success invalidates the scopes they affect.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from api.client import ApiClient
from services.mutation import Mutation
from services.query_cache import Fetcher, QueryCache, QueryKey, QueryState

InputT = TypeVar("InputT", bound=BaseModel)

# Given the mutation's variables, return the scopes to invalidate
Invalidates = Callable[[Dict[str, Any]], Iterable[QueryKey]]


class ResourceService:
    """Shared plumbing for the per-entity services."""

    def __init__(self, api: ApiClient, cache: QueryCache):
        self.api = api
        self.cache = cache

    def _query(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        enabled: bool = True,
        stale_time: Optional[float] = None,
    ) -> QueryState:
        return self.cache.fetch(key, fetcher, enabled=enabled, stale_time=stale_time)

    def _mutation(self, fn: Callable[..., Any], invalidates: Invalidates,
                  name: Optional[str] = None) -> Mutation:
        def on_success(result: Any, variables: Dict[str, Any]) -> None:
            for scope in invalidates(variables):
                self.cache.invalidate(scope)

        return Mutation(fn, on_success=on_success, name=name or fn.__name__.lstrip("_"))

    @staticmethod
    def _validated(schema: Type[InputT], data: Union[InputT, Dict[str, Any]]) -> InputT:
        """Validate a form payload; raises pydantic.ValidationError before any request is made."""
        if isinstance(data, schema):
            return data
        return schema.model_validate(data)
