"""Normalization of legacy civilization labels on older match records."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Iterable

from .records import Match, PlayerGameStats


logger = logging.getLogger(__name__)

# Civilization names indexed by the numeric id older API payloads report.
API_CIVILIZATIONS = (
    "Armenians", "Aztecs", "Bengalis", "Berbers", "Bohemians", "Britons",
    "Bulgarians", "Burgundians", "Burmese", "Byzantines", "Celts", "Chinese",
    "Cumans", "Dravidians", "Ethiopians", "Franks", "Georgians", "Goths",
    "Gurjaras", "Hindustanis", "Huns", "Incas", "Italians", "Japanese",
    "Khmer", "Koreans", "Lithuanians", "Magyars", "Malay", "Malians",
    "Mayans", "Mongols", "Persians", "Poles", "Portuguese", "Romans",
    "Saracens", "Sicilians", "Slavs", "Spanish", "Tatars", "Teutons",
    "Turks", "Vietnamese", "Vikings",
)

RENAMED_CIVILIZATIONS = {
    "Indians": "Hindustanis",
}


def normalize_civilization(label: str | int | None) -> str | None:
    """Map a raw civilization label to its current name.

    Integers and digit-only labels are treated as API ids. Unknown labels
    pass through as strings.
    """

    if label is None:
        return None
    candidate = str(label).strip()
    if candidate.isdigit():
        index = int(candidate)
        if index < len(API_CIVILIZATIONS):
            return API_CIVILIZATIONS[index]
        return candidate
    return RENAMED_CIVILIZATIONS.get(candidate, candidate)


def _correct_player(stats: PlayerGameStats) -> PlayerGameStats:
    corrected = normalize_civilization(stats.civilization)
    if corrected == stats.civilization:
        return stats
    return replace(stats, civilization=corrected)


def correct_civs_for_older_matches(matches: Iterable[Match]) -> list[Match]:
    """Return ``matches`` with every player's civilization normalized.

    Records that need no change are returned as-is, so running this twice on
    the same batch is a no-op.
    """

    corrected_matches: list[Match] = []
    corrected_players = 0

    for match in matches:
        players = {
            profile_id: _correct_player(stats)
            for profile_id, stats in match.players.items()
        }
        changed = [
            profile_id
            for profile_id, stats in players.items()
            if stats is not match.players[profile_id]
        ]
        if not changed:
            corrected_matches.append(match)
            continue

        logger.debug("Corrected civilizations in match %s for players %s", match.match_id, changed)
        corrected_players += len(changed)
        corrected_matches.append(replace(match, players=players))

    if corrected_players:
        logger.info(
            "Corrected %d legacy civilization labels across %d matches",
            corrected_players,
            len(corrected_matches),
        )
    return corrected_matches
