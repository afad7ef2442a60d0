"""User administration: listing with filters, creation, role changes, deletion."""

from typing import Any, Dict, Optional, Union

from api.client import ApiClient
from api.models.common_schemas import MessageResponse, dump_input
from api.models.user_schemas import (
    CreateUserInput,
    UpdateUserRoleInput,
    UserResponse,
    UserRole,
    UsersResponse,
)
from services.base_service import ResourceService
from services.query_cache import QueryCache, QueryState
from utils.url_builder import path_segment, with_query

USERS_KEY = ("users",)


def user_filters(company_id: Optional[str] = None,
                 role: Optional[Union[UserRole, str]] = None) -> Dict[str, str]:
    """Wire-named filters with unset values dropped."""
    filters = {}
    if company_id:
        filters["companyId"] = company_id
    if role:
        filters["role"] = role.value if isinstance(role, UserRole) else role
    return filters


class UserService(ResourceService):
    """
    Queries:
        users(company_id=None, role=None), user(user_id)

    Mutations:
        create_user(data), update_user_role(user_id, data), delete_user(user_id)
    """

    def __init__(self, api: ApiClient, cache: QueryCache):
        super().__init__(api, cache)
        invalidate_users = lambda variables: [USERS_KEY]

        self.create_user = self._mutation(self._create_user, invalidate_users)
        self.update_user_role = self._mutation(self._update_user_role, invalidate_users)
        self.delete_user = self._mutation(self._delete_user, invalidate_users)

    def users(self, company_id: Optional[str] = None,
              role: Optional[Union[UserRole, str]] = None) -> QueryState:
        filters = user_filters(company_id, role)
        endpoint = with_query("/api/users", filters)
        return self._query(
            USERS_KEY + (tuple(sorted(filters.items())),),
            lambda: self.api.get(endpoint, schema=UsersResponse),
        )

    def user(self, user_id: Optional[str]) -> QueryState:
        return self._query(
            USERS_KEY + (user_id,),
            lambda: self.api.get(f"/api/users/{path_segment(user_id)}", schema=UserResponse),
            enabled=bool(user_id),
        )

    def _create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(CreateUserInput, data))
        return self.api.post("/api/users", payload, schema=UserResponse)

    def _update_user_role(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = dump_input(self._validated(UpdateUserRoleInput, data))
        return self.api.patch(f"/api/users/{path_segment(user_id)}/role", payload, schema=UserResponse)

    def _delete_user(self, user_id: str) -> Dict[str, Any]:
        return self.api.delete(f"/api/users/{path_segment(user_id)}", schema=MessageResponse)
