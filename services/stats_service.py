"""Dashboard statistics."""

from typing import Union

from api.models.stats_schemas import StatsPeriod, StatsResponse
from config.settings import settings
from services.base_service import ResourceService
from services.query_cache import QueryState
from utils.url_builder import with_query

STATS_KEY = ("stats",)


class StatsService(ResourceService):

    def stats(self, period: Union[StatsPeriod, str] = StatsPeriod.LAST_30_DAYS) -> QueryState:
        """Totals, role breakdown and growth series for one period, cached for STATS_STALE_SECONDS."""
        period = StatsPeriod(period)
        return self._query(
            STATS_KEY + (period.value,),
            lambda: self.api.get(with_query("/api/stats", {"period": period}), schema=StatsResponse),
            stale_time=settings.STATS_STALE_SECONDS,
        )
