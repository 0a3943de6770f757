"""Per-match time series for dashboard charts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from enum import Enum
from typing import Iterable, Sequence

from aoe2_insights.data_io.records import Match, RatingRecord


class Metric(str, Enum):
    EFFECTIVE_APM = "effective_apm"
    FEUDAL_UPTIME = "feudal_uptime"
    CASTLE_UPTIME = "castle_uptime"
    IMPERIAL_UPTIME = "imperial_uptime"


_METRIC_AGES = {
    Metric.FEUDAL_UPTIME: "feudal",
    Metric.CASTLE_UPTIME: "castle",
    Metric.IMPERIAL_UPTIME: "imperial",
}


@dataclass(frozen=True)
class SeriesPoint:
    """Chart point. ``y`` is ``None`` when the match has no value for the metric."""

    x: date
    y: float | None

    @property
    def label(self) -> str:
        return format_date(self.x)


def to_date(timestamp: int | float, tz: tzinfo = timezone.utc) -> date:
    return datetime.fromtimestamp(timestamp, tz=tz).date()


def format_date(day: date) -> str:
    """Render ``day`` as month/day/year without zero padding, e.g. ``3/7/2024``."""

    return f"{day.month}/{day.day}/{day.year}"


def metric_value(match: Match, metric: Metric, profile_id: str | int) -> float | None:
    player = match.player(profile_id)
    if player is None:
        return None
    if metric is Metric.EFFECTIVE_APM:
        return player.mean_apm
    return player.uptime(_METRIC_AGES[metric])


def project(
    metric: Metric,
    matches: Sequence[Match],
    profile_id: str | int,
    *,
    tz: tzinfo = timezone.utc,
) -> list[SeriesPoint]:
    """Map each match to a ``(date, value)`` point for ``metric``.

    Points keep the order of ``matches``, which callers pass time-sorted. Gaps
    are kept as ``y=None`` so the series length always equals the input length.
    """

    return [
        SeriesPoint(x=to_date(match.played_at_time, tz), y=metric_value(match, metric, profile_id))
        for match in matches
    ]


def project_all(
    matches: Sequence[Match],
    profile_id: str | int,
    *,
    tz: tzinfo = timezone.utc,
) -> dict[Metric, list[SeriesPoint]]:
    return {metric: project(metric, matches, profile_id, tz=tz) for metric in Metric}


def rating_series(
    ratings: Iterable[RatingRecord],
    *,
    tz: tzinfo = timezone.utc,
) -> list[SeriesPoint]:
    """Ladder rating history as chart points, oldest first."""

    ordered = sorted(ratings, key=lambda record: record.timestamp)
    return [SeriesPoint(x=to_date(record.timestamp, tz), y=float(record.rating)) for record in ordered]


def format_uptime_tick(seconds: float) -> str:
    """Axis tick for uptime charts: whole minutes, e.g. ``600`` -> ``"10:00"``."""

    return f"{int(seconds // 60)}:00"


def format_rating_tick(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"
