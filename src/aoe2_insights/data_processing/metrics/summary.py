"""Win counts, civilization performance and game-length summaries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import polars as pl

from aoe2_insights.data_io.frames import LazyOrFrame, ReturnMode, ensure_lazy, finalize, matches_to_frame
from aoe2_insights.data_io.records import Match


@dataclass(frozen=True)
class DurationBucket:
    """Half-open duration range ``[lower, upper)`` in seconds; ``upper=None`` is unbounded."""

    label: str
    lower: float
    upper: float | None = None


DEFAULT_DURATION_BUCKETS: tuple[DurationBucket, ...] = (
    DurationBucket("< 5m", 0, 5 * 60),
    DurationBucket("5-15m", 5 * 60, 15 * 60),
    DurationBucket("15-25m", 15 * 60, 25 * 60),
    DurationBucket("25-40m", 25 * 60, 40 * 60),
    DurationBucket(">= 40m", 40 * 60, None),
)


@dataclass(frozen=True)
class CivPerformance:
    civilization: str
    games_played: int
    wins: int
    losses: int
    win_rate: float
    average_apm: float | None = None
    average_feudal_uptime: float | None = None
    average_castle_uptime: float | None = None


@dataclass(frozen=True)
class DurationBucketStats:
    label: str
    lower: float
    upper: float | None
    games: int
    wins: int | None
    win_rate: float | None


@dataclass(frozen=True)
class DurationStats:
    games: int
    mean_seconds: float | None
    median_seconds: float | None
    shortest_seconds: float | None
    longest_seconds: float | None
    buckets: tuple[DurationBucketStats, ...]


def wins_count(matches: Iterable[Match], profile_id: str | int) -> int:
    """Number of matches the tracked player won."""

    count = 0
    for match in matches:
        player = match.player(profile_id)
        if player is not None and player.won is True:
            count += 1
    return count


def win_ratio_label(matches: Sequence[Match], profile_id: str | int) -> str:
    """``"wins/total"`` text for the filtered result header, e.g. ``"3/5"``."""

    return f"{wins_count(matches, profile_id)}/{len(matches)}"


def civ_performance_frame(
    matches: Iterable[Match],
    profile_id: str | int,
    *,
    mode: ReturnMode = "dataframe",
) -> LazyOrFrame:
    """Per-civilization outcome table, most played first."""

    lf = ensure_lazy(matches_to_frame(matches, profile_id))

    result = (
        lf.filter(pl.col("civilization").is_not_null())
        .group_by("civilization")
        .agg(
            pl.len().cast(pl.Int64).alias("games_played"),
            pl.col("won").cast(pl.Int64).sum().alias("wins"),
            pl.col("mean_apm").mean().alias("average_apm"),
            pl.col("feudal").mean().alias("average_feudal_uptime"),
            pl.col("castle").mean().alias("average_castle_uptime"),
        )
        .with_columns(
            (pl.col("games_played") - pl.col("wins")).alias("losses"),
            (pl.col("wins") / pl.col("games_played")).alias("win_rate"),
        )
        .sort(["games_played", "civilization"], descending=[True, False])
    )
    return finalize(result, mode)


def civ_performance(matches: Iterable[Match], profile_id: str | int) -> dict[str, CivPerformance]:
    """Games played, wins and win rate for each civilization the tracked player used.

    Matches with an unknown outcome count as played but not won.
    """

    frame = civ_performance_frame(matches, profile_id)
    return {
        row["civilization"]: CivPerformance(
            civilization=row["civilization"],
            games_played=row["games_played"],
            wins=row["wins"],
            losses=row["losses"],
            win_rate=row["win_rate"],
            average_apm=row["average_apm"],
            average_feudal_uptime=row["average_feudal_uptime"],
            average_castle_uptime=row["average_castle_uptime"],
        )
        for row in frame.iter_rows(named=True)
    }


def validate_buckets(buckets: Sequence[DurationBucket]) -> None:
    """Reject duplicate labels, inverted ranges and overlapping ranges.

    Gaps between buckets are allowed; durations falling in a gap count toward
    the overall stats but toward no bucket.
    """

    labels = [bucket.label for bucket in buckets]
    if len(set(labels)) != len(labels):
        raise ValueError("Duration bucket labels must be unique")
    for bucket in buckets:
        if bucket.upper is not None and bucket.upper <= bucket.lower:
            raise ValueError(f"Duration bucket {bucket.label!r} has upper <= lower")

    ordered = sorted(buckets, key=lambda bucket: bucket.lower)
    for current, following in zip(ordered, ordered[1:]):
        if current.upper is None or current.upper > following.lower:
            raise ValueError(
                f"Duration buckets {current.label!r} and {following.label!r} overlap"
            )


def _bucket_expr(column: str, buckets: Sequence[DurationBucket]) -> pl.Expr:
    expr = None
    for bucket in buckets:
        condition = pl.col(column) >= bucket.lower
        if bucket.upper is not None:
            condition = condition & (pl.col(column) < bucket.upper)
        label = pl.lit(bucket.label)
        expr = pl.when(condition).then(label) if expr is None else expr.when(condition).then(label)

    if expr is None:
        return pl.lit(None, dtype=pl.Utf8).alias("duration_bucket")
    return expr.otherwise(pl.lit(None, dtype=pl.Utf8)).alias("duration_bucket")


def duration_stats(
    matches: Iterable[Match],
    profile_id: str | int | None = None,
    *,
    buckets: Sequence[DurationBucket] = DEFAULT_DURATION_BUCKETS,
) -> DurationStats:
    """Summarize game lengths and bucket them into duration ranges.

    Matches without a recorded duration are ignored. With ``profile_id`` only
    that player's matches are counted and wins are tallied per bucket; without
    it, ``wins`` and ``win_rate`` are ``None``. Every bucket is reported, in the
    given order, even when empty.
    """

    validate_buckets(buckets)

    frame = matches_to_frame(matches, profile_id).filter(
        pl.col("duration_seconds").is_not_null()
    )

    overall = frame.select(
        pl.col("duration_seconds").mean().alias("mean"),
        pl.col("duration_seconds").median().alias("median"),
        pl.col("duration_seconds").min().alias("min"),
        pl.col("duration_seconds").max().alias("max"),
    ).row(0, named=True)

    grouped = (
        frame.with_columns(_bucket_expr("duration_seconds", buckets))
        .filter(pl.col("duration_bucket").is_not_null())
        .group_by("duration_bucket")
        .agg(
            pl.len().cast(pl.Int64).alias("games"),
            pl.col("won").cast(pl.Int64).sum().alias("wins"),
        )
    )
    counts = {
        row["duration_bucket"]: (row["games"], row["wins"])
        for row in grouped.iter_rows(named=True)
    }

    tallies_wins = profile_id is not None
    bucket_stats = []
    for bucket in buckets:
        games, wins = counts.get(bucket.label, (0, 0))
        bucket_stats.append(
            DurationBucketStats(
                label=bucket.label,
                lower=bucket.lower,
                upper=bucket.upper,
                games=games,
                wins=wins if tallies_wins else None,
                win_rate=(wins / games) if tallies_wins and games else None,
            )
        )

    return DurationStats(
        games=frame.height,
        mean_seconds=overall["mean"],
        median_seconds=overall["median"],
        shortest_seconds=overall["min"],
        longest_seconds=overall["max"],
        buckets=tuple(bucket_stats),
    )
