import pytest

from aoe2_insights.data_io import Match, PlayerGameStats
from aoe2_insights.data_processing import ANY, Dimension, Option, derive_all_options, derive_options
from aoe2_insights.data_processing.options import ANY_OPTION


PROFILE_ID = 271202


def _match(match_id: str, civ: str | None, build: str | None = None, map_name: str = "Arabia") -> Match:
    return Match(
        match_id=match_id,
        played_at_time=int(match_id[1:]),
        map_name=map_name,
        players={str(PROFILE_ID): PlayerGameStats(civilization=civ, build_order=build)},
    )


def test_civilization_options_are_distinct_with_any_last() -> None:
    matches = [_match("m1", "Franks"), _match("m2", "Franks"), _match("m3", "Mongols")]

    options = derive_options(Dimension.CIVILIZATION, matches, PROFILE_ID)

    assert len(options) == 3
    assert {option.value for option in options[:-1]} == {"Franks", "Mongols"}
    assert options[-1] == Option(value=ANY, label=ANY)


def test_first_seen_order_is_the_default() -> None:
    matches = [_match("m1", "Mongols"), _match("m2", "aztecs"), _match("m3", "Franks")]

    options = derive_options(Dimension.CIVILIZATION, matches, PROFILE_ID)

    assert [option.value for option in options] == ["Mongols", "aztecs", "Franks", ANY]


def test_sorted_order_is_case_insensitive() -> None:
    matches = [_match("m1", "Mongols"), _match("m2", "aztecs"), _match("m3", "Franks")]

    options = derive_options(Dimension.CIVILIZATION, matches, PROFILE_ID, order="sorted")

    assert [option.label for option in options] == ["aztecs", "Franks", "Mongols", ANY]


def test_absent_build_orders_are_not_offered() -> None:
    matches = [_match("m1", "Franks", build=None), _match("m2", "Franks", build="Drush")]

    options = derive_options(Dimension.BUILD_ORDER, matches, PROFILE_ID)

    assert options == [Option("Drush", "Drush"), ANY_OPTION]


def test_map_options_come_from_the_match() -> None:
    matches = [_match("m1", "Franks", map_name="Arena"), _match("m2", "Franks", map_name="Arabia")]

    options = derive_options(Dimension.MAP, matches, PROFILE_ID)

    assert [option.value for option in options] == ["Arena", "Arabia", ANY]


def test_game_mode_options_only_offer_any() -> None:
    assert derive_options(Dimension.GAME_MODE, [_match("m1", "Franks")], PROFILE_ID) == [ANY_OPTION]


def test_repeated_derivation_does_not_accumulate() -> None:
    matches = [_match("m1", "Franks")]

    first = derive_options(Dimension.CIVILIZATION, matches, PROFILE_ID)
    second = derive_options(Dimension.CIVILIZATION, matches, PROFILE_ID)

    assert first == second == [Option("Franks", "Franks"), ANY_OPTION]


def test_empty_input_yields_only_any() -> None:
    options = derive_all_options([], PROFILE_ID)

    assert set(options) == set(Dimension)
    assert all(values == [ANY_OPTION] for values in options.values())


def test_unknown_order_is_rejected() -> None:
    with pytest.raises(ValueError, match="option order"):
        derive_options(Dimension.MAP, [], PROFILE_ID, order="random")  # type: ignore[arg-type]
