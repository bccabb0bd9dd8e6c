"""Statistics result models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PeriodCount:
    """Number of log entries in one period bucket."""

    period: str  # "YYYY-MM-DD", "YYYY-WW" or "YYYY-MM"
    count: int


@dataclass
class StatsReport:
    """Daily, weekly and monthly histograms over a set of entries."""

    daily: list[PeriodCount] = field(default_factory=list)
    weekly: list[PeriodCount] = field(default_factory=list)
    monthly: list[PeriodCount] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, int | str]]]:
        """Convert to plain dicts, as served by the stats endpoint."""
        return {
            name: [{"period": p.period, "count": p.count} for p in buckets]
            for name, buckets in (
                ("daily", self.daily),
                ("weekly", self.weekly),
                ("monthly", self.monthly),
            )
        }
