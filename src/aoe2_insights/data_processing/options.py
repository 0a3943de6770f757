"""Selectable filter values derived from a match collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from aoe2_insights.data_io.records import Match

from .filtering import ANY, Dimension, dimension_value


OptionOrder = Literal["first_seen", "sorted"]
OPTION_ORDERS: tuple[str, ...] = ("first_seen", "sorted")


@dataclass(frozen=True)
class Option:
    value: str
    label: str


ANY_OPTION = Option(value=ANY, label=ANY)


def _distinct(values: Iterable[str | None], order: OptionOrder) -> list[str]:
    seen = dict.fromkeys(value for value in values if value is not None)
    if order == "sorted":
        return sorted(seen, key=str.casefold)
    if order == "first_seen":
        return list(seen)
    raise ValueError(f"Unknown option order: {order}")


def derive_options(
    dimension: Dimension,
    matches: Sequence[Match],
    profile_id: str | int,
    *,
    order: OptionOrder = "first_seen",
) -> list[Option]:
    """Distinct values of ``dimension`` in ``matches`` followed by :data:`ANY_OPTION`.

    Parameters
    ----------
    dimension:
        Filter dimension to derive choices for.
    matches:
        Usually the filtered collection. Matches without the tracked player and
        absent values are skipped.
    profile_id:
        Tracked player whose civilization and build order are read.
    order:
        ``"first_seen"`` keeps the order values first appear in ``matches``;
        ``"sorted"`` sorts them case-insensitively.
    """

    if dimension is Dimension.GAME_MODE:
        return [ANY_OPTION]

    values = (
        dimension_value(match, dimension, profile_id)
        for match in matches
        if match.has_player(profile_id)
    )
    options = [Option(value=value, label=value) for value in _distinct(values, order)]
    options.append(ANY_OPTION)
    return options


def derive_all_options(
    matches: Sequence[Match],
    profile_id: str | int,
    *,
    order: OptionOrder = "first_seen",
) -> dict[Dimension, list[Option]]:
    return {
        dimension: derive_options(dimension, matches, profile_id, order=order)
        for dimension in Dimension
    }
