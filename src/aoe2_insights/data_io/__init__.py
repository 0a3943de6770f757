"""Record model and loading helpers for analyzed matches."""

from .corrections import correct_civs_for_older_matches, normalize_civilization
from .frames import matches_to_frame
from .records import Match, PlayerGameStats, RatingRecord, parse_matches, parse_ratings

__all__ = [
    "Match",
    "PlayerGameStats",
    "RatingRecord",
    "correct_civs_for_older_matches",
    "matches_to_frame",
    "normalize_civilization",
    "parse_matches",
    "parse_ratings",
]
