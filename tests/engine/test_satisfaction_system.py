from citysim.core.buildings import BuildingType
from citysim.engine.interfaces import TickContext
from citysim.engine.mechanics.capacity import Coverage
from citysim.engine.systems.satisfaction_system import (
    SatisfactionSystem,
    coverage_score,
    target_satisfaction,
)
from citysim.server.state import City


def test_full_coverage_scores_one():
    # Act & Assert
    assert coverage_score(Coverage()) == 1.0
    assert coverage_score(Coverage(housing=3.0)) == 1.0
    assert coverage_score(Coverage(0, 0, 0, 0, 0, 0)) == 0.0


def test_higher_taxes_lower_the_target():
    # Arrange
    low = City(10, 1000, tax_rate=0.0, vat_rate=0.0)
    high = City(10, 1000, tax_rate=0.4, vat_rate=0.25)

    # Act
    low_target = target_satisfaction(low, low.coverage())
    high_target = target_satisfaction(high, high.coverage())

    # Assert
    assert high_target < low_target


def test_satisfaction_drifts_towards_target(quiet_rng):
    # Arrange
    city = City(0, 1000, tax_rate=0.0, vat_rate=0.0)
    system = SatisfactionSystem()

    # Act
    system.update(city, TickContext(day=1, rng=quiet_rng))

    # Assert
    assert 50 < city.satisfaction < 100


def test_satisfaction_stays_in_bounds(quiet_rng):
    # Arrange
    happy = City(0, 1000, tax_rate=0.0, vat_rate=0.0)
    for _ in range(5):
        happy.add_building(BuildingType.PARK)
    miserable = City(50, 1000, tax_rate=0.4, vat_rate=0.25)
    for _ in range(5):
        miserable.add_building(BuildingType.INDUSTRIAL)
    system = SatisfactionSystem()

    # Act
    for day in range(1, 40):
        system.update(happy, TickContext(day=day, rng=quiet_rng))
        system.update(miserable, TickContext(day=day, rng=quiet_rng))

    # Assert
    assert happy.satisfaction == 100
    assert miserable.satisfaction == 0


def test_missing_services_are_reported(quiet_rng):
    # Arrange
    city = City(100, 1000)
    city.add_building(BuildingType.SCHOOL)

    # Act
    SatisfactionSystem().update(city, TickContext(day=1, rng=quiet_rng))

    # Assert
    log = city.event_log
    assert "Day 1: WARNING - Not enough schools! Capacity: 50/100 families (50.0%)." in log
    assert "Day 1: CRITICAL - Not enough hospitals! Capacity: 0/100 families (0.0%)." in log
    assert any("Not enough water supply" in e for e in log)
    assert any("Not enough power supply" in e for e in log)


def test_empty_city_reports_no_shortages(quiet_rng):
    # Arrange
    city = City(0, 1000)

    # Act
    SatisfactionSystem().update(city, TickContext(day=1, rng=quiet_rng))

    # Assert
    assert len(city.event_log) == 1
