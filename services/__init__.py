"""
Services module - data access layer for the console.

Each resource service pairs cached queries with mutations that invalidate
the cache scopes they affect. Pages never call ApiClient directly.

Usage:
    from services import Services

    services = Services(api_client, QueryCache())
    state = services.companies.companies()
    services.companies.create_company.mutate(data={"name": "Acme"})
"""

from api.client import ApiClient
from services.auth_service import AuthService, AuthState
from services.company_service import CompanyService
from services.mutation import Mutation, MutationInProgress
from services.query_cache import QueryCache, QueryState, QueryStatus
from services.question_service import QuestionService
from services.stats_service import StatsService
from services.user_service import UserService
from services.video_service import VideoService


class Services:
    """All resource services sharing one client and one cache."""

    def __init__(self, api: ApiClient, cache: QueryCache):
        self.api = api
        self.cache = cache
        self.auth = AuthService(api, cache)
        self.companies = CompanyService(api, cache)
        self.users = UserService(api, cache)
        self.videos = VideoService(api, cache)
        self.questions = QuestionService(api, cache)
        self.stats = StatsService(api, cache)


__all__ = [
    "Services",
    "AuthService",
    "AuthState",
    "CompanyService",
    "UserService",
    "VideoService",
    "QuestionService",
    "StatsService",
    "QueryCache",
    "QueryState",
    "QueryStatus",
    "Mutation",
    "MutationInProgress",
]
