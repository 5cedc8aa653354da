"""Data models for daily_quota pipeline stage."""

from dataclasses import dataclass, field
from datetime import date


@dataclass
class SourceCount:
    """One source's counter for one day."""
    source_name: str
    count: int
    limit: int
    remaining: int
    at_limit: bool


@dataclass
class DailyStatistics:
    """Aggregate counters for one day across all sources."""
    quota_date: date
    sources: list[SourceCount] = field(default_factory=list)
    total_processed: int = 0
    sources_at_limit: int = 0
