"""Tests for the console reports."""
import pytest

from citysim.client.formatter import event_style, render_text
from citysim.client.reports import capacity_status, city_stats, game_summary, tick_events
from citysim.core.buildings import BuildingType
from citysim.server.session import GameOverReason
from citysim.shared.events import EventKind, GameEvent


@pytest.mark.parametrize("ratio, label", [
    (2.0, "[OPTIMAL]"),
    (1.0, "[OPTIMAL]"),
    (0.95, "[GOOD]"),
    (0.7, "[ADEQUATE]"),
    (0.6, "[LOW]"),
    (0.3, "[CRITICAL]"),
    (0.29, "[SEVERE SHORTAGE]"),
    (0.0, "[SEVERE SHORTAGE]"),
])
def test_capacity_status(ratio, label):
    # Act & Assert
    assert capacity_status(ratio) == label


def test_city_stats_sections(session):
    # Arrange
    session.build_building(BuildingType.SCHOOL)

    # Act
    text = render_text(city_stats(session.city))

    # Assert
    for header in ("CITY STATS", "TAXES", "BUILDINGS", "CAPACITIES", "RECENT EVENTS"):
        assert header in text
    assert "$850" in text
    assert "[SEVERE SHORTAGE]" in text
    assert "[OPTIMAL]" in text
    assert "City founded" in text


def test_game_summary_sections(session):
    # Arrange
    session.game_over_reason = GameOverReason.BANKRUPT

    # Act
    text = render_text(game_summary(session))

    # Assert
    for header in ("FINAL STATISTICS", "BUILDINGS CONSTRUCTED", "NOTABLE EVENTS"):
        assert header in text
    assert "bankrupt" in text
    assert str(session.calculate_score()) in text
    assert "#1" in text


def test_game_summary_truncates_notable_events(session):
    # Arrange
    for day in range(1, 15):
        session.city.record_event(day, "GRANT! Money.")

    # Act
    text = render_text(game_summary(session))

    # Assert
    assert "... and 4 more" in text
    assert "Day 14" not in text


def test_event_style_prefers_severity():
    # Act & Assert
    assert event_style("Day 1: CRITICAL - FIRE spreading") == "bold red"
    assert event_style("Day 1: GRANT! x") == "green"
    assert event_style("Day 1: quiet") == ""


def test_tick_events_show_outcome_and_description():
    # Arrange
    events = [
        GameEvent(EventKind.EPIDEMIC, day=3, message="", budget_delta=-120),
        GameEvent(EventKind.GRANT, day=4, message="", budget_delta=150),
    ]

    # Act
    text = render_text(tick_events(events))

    # Assert
    assert "RANDOM EVENTS" in text
    assert "EPIDEMIC" in text and "bad" in text and "-$120" in text
    assert "GRANT" in text and "good" in text and "$150" in text
    assert "outbreak" in text
