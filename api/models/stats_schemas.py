from typing import List
from enum import Enum

from api.models.common_schemas import CamelModel


class StatsPeriod(str, Enum):
    """Dashboard aggregation window"""
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"


class TimePoint(CamelModel):
    date: str
    count: int


class TimeSeries(CamelModel):
    label: str
    data: List[TimePoint]
    total: int


class RoleBreakdown(CamelModel):
    user: int
    admin: int
    superadmin: int


class StatsTotals(CamelModel):
    users: int
    companies: int
    videos: int
    questions: int
    answers: int


class StatsGrowth(CamelModel):
    users: TimeSeries
    companies: TimeSeries
    videos: TimeSeries
    questions: TimeSeries


class StatsResponse(CamelModel):
    """Aggregate dashboard metrics for one period"""
    totals: StatsTotals
    role_breakdown: RoleBreakdown
    growth: StatsGrowth
    period: StatsPeriod
