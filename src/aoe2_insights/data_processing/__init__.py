"""Filtering, option derivation and metrics over match collections."""

from .filtering import ANY, Dimension, FilterSelection, filter_matches
from .options import Option, derive_all_options, derive_options

__all__ = [
    "ANY",
    "Dimension",
    "FilterSelection",
    "Option",
    "derive_all_options",
    "derive_options",
    "filter_matches",
]
