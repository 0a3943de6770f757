"""Typed records for analyzed Age of Empires II matches and rating history."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping


AGES = ("feudal", "castle", "imperial")


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _require(payload: Mapping[str, Any], *keys: str) -> Any:
    value = _first_present(payload, *keys)
    if value is None:
        raise ValueError(f"Match payload is missing required key: {keys[0]}")
    return value


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class PlayerGameStats:
    """One player's performance within a single match.

    Attributes
    ----------
    civilization:
        Civilization label. Older payloads may carry a numeric API id instead;
        see :mod:`aoe2_insights.data_io.corrections`.
    build_order:
        Classified build order, ``None`` when unclassified.
    mean_apm:
        Game-effective actions per minute.
    age_up_times:
        Seconds from game start until each age was reached. Ages never reached
        are absent.
    won:
        Match outcome for this player, ``None`` when unknown.
    """

    civilization: str | None = None
    build_order: str | None = None
    mean_apm: float | None = None
    age_up_times: Mapping[str, float] = field(default_factory=dict)
    won: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "age_up_times", MappingProxyType(dict(self.age_up_times)))

    def uptime(self, age: str) -> float | None:
        return self.age_up_times.get(age)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PlayerGameStats":
        raw_uptimes = payload.get("age_up_times") or {}
        age_up_times = {
            age: float(seconds)
            for age, seconds in raw_uptimes.items()
            if seconds is not None
        }

        won = _first_present(payload, "won", "winner")
        return cls(
            civilization=_optional_str(_first_present(payload, "civilization", "civ")),
            build_order=_optional_str(_first_present(payload, "build_order", "build")),
            mean_apm=_optional_float(payload.get("mean_apm")),
            age_up_times=age_up_times,
            won=None if won is None else bool(won),
        )


@dataclass(frozen=True)
class Match:
    """A single played match and the per-player stats recorded for it."""

    match_id: str
    played_at_time: int
    map_name: str | None = None
    players: Mapping[str, PlayerGameStats] = field(default_factory=dict)
    duration_seconds: float | None = None
    game_mode: str | None = None

    def __post_init__(self) -> None:
        players = {str(profile_id): stats for profile_id, stats in self.players.items()}
        object.__setattr__(self, "players", MappingProxyType(players))

    def player(self, profile_id: str | int) -> PlayerGameStats | None:
        """Return the record for ``profile_id`` or ``None`` if they did not play."""

        return self.players.get(str(profile_id))

    def has_player(self, profile_id: str | int) -> bool:
        return str(profile_id) in self.players

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Match":
        """Build a match from an analysis payload.

        Accepts ``match_id`` or ``game_id`` as identifier and derives the
        duration from ``duration_seconds``/``duration`` or from
        ``finished - started`` when only timestamps are present.
        """

        match_id = _require(payload, "match_id", "game_id")
        played_at_time = _require(payload, "played_at_time")
        raw_players = _require(payload, "players")

        duration = _first_present(payload, "duration_seconds", "duration")
        if duration is None and payload.get("started") is not None and payload.get("finished") is not None:
            duration = payload["finished"] - payload["started"]

        return cls(
            match_id=str(match_id),
            played_at_time=int(played_at_time),
            map_name=_optional_str(payload.get("map_name")),
            players={
                str(profile_id): PlayerGameStats.from_dict(stats)
                for profile_id, stats in raw_players.items()
            },
            duration_seconds=_optional_float(duration),
            game_mode=_optional_str(payload.get("game_mode")),
        )


@dataclass(frozen=True)
class RatingRecord:
    """A point in a player's ladder rating history."""

    timestamp: int
    rating: int
    num_wins: int | None = None
    num_losses: int | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RatingRecord":
        timestamp = payload.get("timestamp")
        rating = payload.get("rating")
        if timestamp is None:
            raise ValueError("Rating payload is missing required key: timestamp")
        if rating is None:
            raise ValueError("Rating payload is missing required key: rating")
        return cls(
            timestamp=int(timestamp),
            rating=int(rating),
            num_wins=payload.get("num_wins"),
            num_losses=payload.get("num_losses"),
        )


def parse_matches(payloads: Iterable[Mapping[str, Any] | Match]) -> list[Match]:
    """Convert raw payloads into :class:`Match` records, passing records through."""

    return [
        payload if isinstance(payload, Match) else Match.from_dict(payload)
        for payload in payloads
    ]


def parse_ratings(payloads: Iterable[Mapping[str, Any]]) -> list[RatingRecord]:
    return [RatingRecord.from_dict(payload) for payload in payloads]
