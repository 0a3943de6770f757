"""Assemble the derived views the dashboard renders from a match collection."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Iterable, Mapping, Sequence

from .config import DashboardConfig
from .data_io.corrections import correct_civs_for_older_matches
from .data_io.records import Match, parse_matches
from .data_processing.filtering import Dimension, FilterSelection, filter_matches
from .data_processing.metrics.series import Metric, SeriesPoint, project_all
from .data_processing.metrics.summary import (
    CivPerformance,
    DurationStats,
    civ_performance,
    duration_stats,
    wins_count,
)
from .data_processing.options import Option, derive_all_options


@dataclass(frozen=True)
class DashboardView:
    """Everything the rendering layer needs for one filter selection."""

    selection: FilterSelection
    filtered: tuple[Match, ...]
    options: Mapping[Dimension, list[Option]]
    series: Mapping[Metric, list[SeriesPoint]]
    wins: int
    civ_performance: Mapping[str, CivPerformance]
    durations: DurationStats

    @property
    def total(self) -> int:
        return len(self.filtered)

    @property
    def win_ratio(self) -> str:
        return f"{self.wins}/{self.total}"


def build_dashboard(
    matches: Sequence[Match],
    selection: FilterSelection,
    config: DashboardConfig,
) -> DashboardView:
    """Filter ``matches`` and derive options, series and summaries.

    Options, series and the win count follow the selection. Civilization and
    duration summaries cover the whole collection.
    """

    profile_id = config.tracked_profile_id
    filtered = filter_matches(matches, selection, profile_id)

    return DashboardView(
        selection=selection,
        filtered=tuple(filtered),
        options=derive_all_options(filtered, profile_id, order=config.option_order),
        series=project_all(filtered, profile_id, tz=config.tz),
        wins=wins_count(filtered, profile_id),
        civ_performance=civ_performance(matches, profile_id),
        durations=duration_stats(matches, profile_id, buckets=config.duration_buckets),
    )


class MatchHistory:
    """Full, corrected match collection for one dashboard session.

    Appending and building views must not be interleaved across threads.
    """

    def __init__(self, config: DashboardConfig) -> None:
        self._config = config
        self._config.validate()
        self._logger = logging.getLogger(self.__class__.__name__)
        self._matches: list[Match] = []

    @property
    def matches(self) -> tuple[Match, ...]:
        return tuple(self._matches)

    def __len__(self) -> int:
        return len(self._matches)

    def extend(self, batch: Iterable[Mapping[str, Any] | Match]) -> list[Match]:
        """Parse and correct a freshly loaded batch, then add it to the history."""

        corrected = correct_civs_for_older_matches(parse_matches(batch))
        self._matches.extend(corrected)
        self._logger.info(
            "Loaded %d matches (%d total) for profile %s",
            len(corrected),
            len(self._matches),
            self._config.tracked_profile_id,
        )
        return corrected

    def append(self, match: Mapping[str, Any] | Match) -> Match:
        """Add a newly analyzed match, replacing an earlier analysis of the same game."""

        (corrected,) = correct_civs_for_older_matches(parse_matches([match]))
        existing = [entry for entry in self._matches if entry.match_id == corrected.match_id]
        if existing:
            self._logger.info("Replacing existing analysis for match %s", corrected.match_id)
            self._matches = [entry for entry in self._matches if entry.match_id != corrected.match_id]

        self._matches.append(corrected)
        return corrected

    def find(self, match_id: str) -> Match | None:
        for match in self._matches:
            if match.match_id == str(match_id):
                return match
        return None

    def view(self, selection: FilterSelection | None = None) -> DashboardView:
        return build_dashboard(self._matches, selection or FilterSelection(), self._config)
