import logging

import pytest

from aoe2_insights.config import DashboardConfig
from aoe2_insights.dashboard import MatchHistory, build_dashboard
from aoe2_insights.data_io import Match, PlayerGameStats
from aoe2_insights.data_processing import ANY, Dimension, FilterSelection
from aoe2_insights.data_processing.metrics.series import Metric


PROFILE_ID = "271202"
CONFIG = DashboardConfig(tracked_profile_id=PROFILE_ID)


def _payload(game_id: str, played_at_time: int, civ: str, won: bool, **extra) -> dict:
    return {
        "game_id": game_id,
        "played_at_time": played_at_time,
        "map_name": extra.pop("map_name", "Arabia"),
        "duration_seconds": extra.pop("duration", 1200),
        "players": {
            PROFILE_ID: {
                "civ": civ,
                "build": extra.pop("build", "Scouts"),
                "mean_apm": 50,
                "age_up_times": {"feudal": 600, "castle": 1100},
                "won": won,
            },
            "42": {"civ": "Britons", "won": not won},
        },
    }


BATCH = [
    _payload("g3", 300, "Mongols", True),
    _payload("g1", 100, "Franks", True),
    _payload("g2", 200, "Indians", False, map_name="Arena"),
]


def test_build_dashboard_derives_everything_from_filtered_matches() -> None:
    history = MatchHistory(CONFIG)
    history.extend(BATCH)

    view = build_dashboard(history.matches, FilterSelection(map="Arabia"), CONFIG)

    assert [match.match_id for match in view.filtered] == ["g1", "g3"]
    assert view.win_ratio == "2/2"
    assert [option.value for option in view.options[Dimension.CIVILIZATION]] == ["Franks", "Mongols", ANY]
    assert [option.value for option in view.options[Dimension.MAP]] == ["Arabia", ANY]
    assert len(view.series[Metric.CASTLE_UPTIME]) == view.total
    assert set(view.civ_performance) == {"Franks", "Mongols", "Hindustanis"}
    assert view.durations.games == 3


def test_history_corrects_loaded_batches(caplog: pytest.LogCaptureFixture) -> None:
    history = MatchHistory(CONFIG)

    with caplog.at_level(logging.INFO, logger="MatchHistory"):
        history.extend(BATCH)

    assert history.find("g2").player(PROFILE_ID).civilization == "Hindustanis"
    assert "Loaded 3 matches" in caplog.text


def test_append_replaces_earlier_analysis_of_same_match() -> None:
    history = MatchHistory(CONFIG)
    history.extend(BATCH)

    history.append(_payload("g1", 100, "Franks", False))

    assert len(history) == 3
    assert history.find("g1").player(PROFILE_ID).won is False
    assert history.view().wins == 1


def test_view_defaults_to_unconstrained_selection() -> None:
    history = MatchHistory(CONFIG)
    history.extend(BATCH)

    view = history.view()

    assert view.selection.is_unconstrained()
    assert [match.played_at_time for match in view.filtered] == [100, 200, 300]


def test_empty_history_produces_empty_view() -> None:
    view = MatchHistory(CONFIG).view()

    assert view.win_ratio == "0/0"
    assert all(points == [] for points in view.series.values())
    assert view.civ_performance == {}


def test_history_requires_profile_id() -> None:
    with pytest.raises(ValueError, match="tracked_profile_id"):
        MatchHistory(DashboardConfig(tracked_profile_id=""))
