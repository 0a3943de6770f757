"""Narrow a match collection to the tracked player's games matching a selection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from aoe2_insights.data_io.records import Match


ANY = "Any"


class Dimension(str, Enum):
    CIVILIZATION = "civilization"
    BUILD_ORDER = "build_order"
    MAP = "map"
    GAME_MODE = "game_mode"


@dataclass(frozen=True)
class FilterSelection:
    """Active query. Each dimension holds a concrete value or :data:`ANY`.

    ``game_mode`` is accepted but not enforced: match records do not carry a
    reliable game mode yet, so every match passes that dimension.
    """

    civilization: str = ANY
    build_order: str = ANY
    map: str = ANY
    game_mode: str = ANY

    def value_for(self, dimension: Dimension) -> str:
        return getattr(self, dimension.value)

    def is_unconstrained(self) -> bool:
        return all(self.value_for(dimension) == ANY for dimension in Dimension)


def dimension_value(match: Match, dimension: Dimension, profile_id: str | int) -> str | None:
    """Raw value of ``dimension`` for ``match`` as seen by the tracked player."""

    if dimension is Dimension.MAP:
        return match.map_name
    if dimension is Dimension.GAME_MODE:
        return match.game_mode

    player = match.player(profile_id)
    if player is None:
        return None
    if dimension is Dimension.CIVILIZATION:
        return player.civilization
    return player.build_order


def matches_player(match: Match, profile_id: str | int) -> bool:
    return match.has_player(profile_id)


def matches_selection(match: Match, selection: FilterSelection, profile_id: str | int) -> bool:
    if not matches_player(match, profile_id):
        return False

    for dimension in (Dimension.BUILD_ORDER, Dimension.CIVILIZATION, Dimension.MAP):
        wanted = selection.value_for(dimension)
        if wanted != ANY and dimension_value(match, dimension, profile_id) != wanted:
            return False
    return True


def filter_matches(
    matches: Iterable[Match],
    selection: FilterSelection,
    profile_id: str | int,
) -> list[Match]:
    """Return the tracked player's matches that satisfy ``selection``.

    The result is sorted ascending by ``played_at_time``. Matches the tracked
    player did not take part in are dropped silently.
    """

    selected = [match for match in matches if matches_selection(match, selection, profile_id)]
    return sorted(selected, key=lambda match: match.played_at_time)
