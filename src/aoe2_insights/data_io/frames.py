"""Columnar views of match collections for aggregate metrics."""

from __future__ import annotations

from typing import Any, Iterable, Literal

import polars as pl

from .records import AGES, Match


LazyOrFrame = pl.LazyFrame | pl.DataFrame
ReturnMode = Literal["dataframe", "lazy"]

MATCH_SCHEMA: dict[str, pl.DataType] = {
    "match_id": pl.Utf8,
    "played_at_time": pl.Int64,
    "map_name": pl.Utf8,
    "duration_seconds": pl.Float64,
    "civilization": pl.Utf8,
    "build_order": pl.Utf8,
    "mean_apm": pl.Float64,
    "feudal": pl.Float64,
    "castle": pl.Float64,
    "imperial": pl.Float64,
    "won": pl.Boolean,
}


def ensure_lazy(frame: LazyOrFrame) -> pl.LazyFrame:
    if isinstance(frame, pl.LazyFrame):
        return frame
    if isinstance(frame, pl.DataFrame):
        return frame.lazy()
    raise TypeError("Expected a Polars DataFrame or LazyFrame")


def finalize(result: pl.LazyFrame, mode: ReturnMode) -> LazyOrFrame:
    return result if mode == "lazy" else result.collect()


def matches_to_frame(
    matches: Iterable[Match],
    profile_id: str | int | None,
) -> pl.DataFrame:
    """Flatten matches into one row per match from the tracked player's view.

    Parameters
    ----------
    matches:
        Match records in any order.
    profile_id:
        Tracked player. Matches without this player are dropped. When ``None``
        every match is kept and the player columns are null.
    """

    columns: dict[str, list[Any]] = {name: [] for name in MATCH_SCHEMA}

    for match in matches:
        player = None
        if profile_id is not None:
            player = match.player(profile_id)
            if player is None:
                continue

        columns["match_id"].append(match.match_id)
        columns["played_at_time"].append(int(match.played_at_time))
        columns["map_name"].append(match.map_name)
        columns["duration_seconds"].append(
            None if match.duration_seconds is None else float(match.duration_seconds)
        )
        columns["civilization"].append(player.civilization if player else None)
        columns["build_order"].append(player.build_order if player else None)
        columns["mean_apm"].append(
            None if player is None or player.mean_apm is None else float(player.mean_apm)
        )
        for age in AGES:
            uptime = player.uptime(age) if player else None
            columns[age].append(None if uptime is None else float(uptime))
        columns["won"].append(player.won if player else None)

    return pl.DataFrame(columns, schema=MATCH_SCHEMA)
