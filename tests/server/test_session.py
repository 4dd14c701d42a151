"""Tests for GameSession orchestration."""
import random

import pytest

from citysim.core.buildings import BuildingType
from citysim.server.session import GameOverReason, GameSession
from citysim.server.state import City
from citysim.shared.actions import ActionBuild, ActionNextDay, ActionSetTax, ActionSetVat, GameAction
from citysim.shared.config import GameConfig


def test_create_local_uses_config(session):
    # Assert
    city = session.city
    assert city.families == 10
    assert city.budget == 1000
    assert city.tax_rate == pytest.approx(0.10)
    assert city.vat_rate == pytest.approx(0.05)
    assert len(session.engine.systems_map) == 5


def test_build_deducts_exact_cost(session):
    # Act
    built = session.build_building(BuildingType.SCHOOL)

    # Assert
    assert built is True
    assert session.city.budget == 1000 - 150
    assert len(session.city.buildings) == 1


def test_unaffordable_build_changes_nothing(session):
    # Arrange
    session.city.budget = 100

    # Act
    built = session.build_building(BuildingType.POWER_PLANT)

    # Assert
    assert built is False
    assert session.city.budget == 100
    assert session.city.buildings == ()


def test_hospital_spree_runs_out_of_money(session):
    # Arrange
    budgets = []

    # Act
    for _ in range(10):
        if session.city.budget < 50:
            break
        session.build_building(BuildingType.HOSPITAL)
        budgets.append(session.city.budget)
    built = session.build_building(BuildingType.RESIDENTIAL)

    # Assert
    assert budgets[:4] == [750, 500, 250, 0]
    assert session.city.budget == 0
    assert built is False


def test_tax_change_then_tick_produces_income(session):
    # Arrange
    founding = session.city.event_log[0]
    log_length = len(session.city.event_log)

    # Act
    session.set_tax_rate(0.15)
    session.build_building(BuildingType.COMMERCIAL)
    session.build_building(BuildingType.INDUSTRIAL)
    session.city_tick()

    # Assert
    assert session.city.tax_rate == pytest.approx(0.15)
    assert session.city.daily_income > 0
    assert len(session.city.event_log) >= log_length
    assert session.city.event_log[0] == founding


def test_bankruptcy_ends_the_game(session):
    # Arrange
    session.city.set_tax_rate(0.0)
    session.city.budget = 10

    # Act
    running = session.city_tick()

    # Assert
    assert running is False
    assert session.game_over_reason is GameOverReason.BANKRUPT
    assert session.is_over()


def test_abandonment_ends_the_game(session):
    # Arrange
    session.city.families = 0

    # Act
    running = session.city_tick()

    # Assert
    assert running is False
    assert session.game_over_reason is GameOverReason.ABANDONED


def test_bankruptcy_is_checked_before_abandonment(session):
    # Arrange
    session.city.families = 0
    session.city.budget = 0

    # Act
    session.city_tick()

    # Assert
    assert session.game_over_reason is GameOverReason.BANKRUPT


def test_sandbox_never_ends(tmp_path, quiet_rng):
    # Arrange
    config = GameConfig(tmp_path)
    config.sandbox_mode = True
    config.max_days = 1
    session = GameSession.create_local(config)
    session.rng = quiet_rng
    session.city.budget = -5000
    session.city.families = 0

    # Act
    results = [session.city_tick() for _ in range(3)]

    # Assert
    assert results == [True, True, True]
    assert session.game_over_reason is None
    assert not session.is_over()


def test_max_days_ends_the_game(session):
    # Arrange
    session.config.max_days = 2
    session.city.budget = 100000

    # Act
    session.city_tick()
    first = session.is_over()
    session.city_tick()

    # Assert
    assert first is False
    assert session.is_over()
    assert session.game_over_reason is GameOverReason.MAX_DAYS


def test_score_formula(session):
    # Arrange
    city = session.city
    city.families, city.budget, city.satisfaction, city.day = 20, 1234, 60, 5

    # Act
    score = session.calculate_score()

    # Assert
    assert score == 20 * 10 + 123 + 60 * 5 + 5 * 2


def test_score_truncates_negative_budget_towards_zero(session):
    # Arrange
    city = session.city
    city.families, city.budget, city.satisfaction, city.day = 0, -15, 0, 0

    # Act & Assert
    assert session.calculate_score() == -1


def test_apply_action_dispatches_commands(session):
    # Act
    built = session.apply_action(ActionBuild("local_player", BuildingType.PARK))
    session.apply_action(ActionSetTax("local_player", 0.5))
    session.apply_action(ActionSetVat("local_player", 0.2))
    advanced = session.apply_action(ActionNextDay("local_player", days=3))

    # Assert
    assert built is True
    assert session.city.tax_rate == pytest.approx(0.40)
    assert session.city.vat_rate == pytest.approx(0.20)
    assert advanced is True
    assert session.city.day == 3


def test_apply_action_rejects_unknown_actions(session):
    # Act & Assert
    with pytest.raises(TypeError):
        session.apply_action(GameAction("local_player"))


def test_replace_city_resets_game_over(session):
    # Arrange
    session.game_over_reason = GameOverReason.BANKRUPT
    replacement = City(5, 500)

    # Act
    session.replace_city(replacement)

    # Assert
    assert session.city is replacement
    assert session.game_over_reason is None


def test_notable_events_filter_the_log(session):
    # Arrange
    session.city.record_event(1, "FIRE! Something burned.")
    session.city.record_event(1, "3 new families moved to the city.")

    # Act
    notable = session.notable_events()

    # Assert
    assert notable == ["Day 1: FIRE! Something burned."]


def test_seeded_sessions_are_deterministic(config):
    # Arrange
    first = GameSession.create_local(config, seed=99)
    second = GameSession.create_local(config, seed=99)
    for s in (first, second):
        s.city.budget = 100000
        s.build_building(BuildingType.RESIDENTIAL)

    # Act
    for s in (first, second):
        for _ in range(30):
            s.city_tick()

    # Assert
    assert first.city.to_snapshot() == second.city.to_snapshot()
    assert isinstance(first.rng, random.Random)
