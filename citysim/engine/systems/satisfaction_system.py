from typing import Dict, List, TYPE_CHECKING

from citysim.engine.interfaces import ISystem, TickContext
from citysim.engine.mechanics.capacity import Coverage
from citysim.server.state import clamp, SATISFACTION_RANGE

if TYPE_CHECKING:
    from citysim.server.state import City

# --- CONSTANTS ---
COVERAGE_WEIGHTS: Dict[str, float] = {
    "housing": 0.20,
    "jobs": 0.20,
    "education": 0.15,
    "healthcare": 0.15,
    "water": 0.15,
    "power": 0.15,
}
AMENITY_RANGE = (-20, 20)
TAX_PENALTY = 120        # Satisfaction points lost per 100% income tax
VAT_PENALTY = 80         # Satisfaction points lost per 100% VAT
SATISFACTION_DRIFT = 0.25
CRITICAL_SERVICE_RATIO = 0.5

SERVICE_LABELS = {
    "education": "schools",
    "healthcare": "hospitals",
    "water": "water supply",
    "power": "power supply",
}


def coverage_score(coverage: Coverage) -> float:
    """Weighted mean of the capped coverage ratios, in [0, 1]."""
    capped = coverage.capped().as_dict()
    return sum(weight * capped[key] for key, weight in COVERAGE_WEIGHTS.items())


def target_satisfaction(city: 'City', coverage: Coverage) -> float:
    """
    The level satisfaction drifts towards:
    coverage quality + building amenities - tax burden.
    """
    amenity = clamp(sum(b.type.spec.satisfaction_impact for b in city.buildings), AMENITY_RANGE)
    tax_burden = city.tax_rate * TAX_PENALTY + city.vat_rate * VAT_PENALTY
    return coverage_score(coverage) * 100 + amenity - tax_burden


class SatisfactionSystem(ISystem):
    """
    Recomputes citizen satisfaction for the day.

    Logic:
    New = Old + (Target - Old) * SATISFACTION_DRIFT, clamped to [0, 100].
    Also emits CRITICAL/WARNING entries for every under-served public service.
    """

    @property
    def id(self) -> str:
        return "base.satisfaction"

    @property
    def dependencies(self) -> List[str]:
        return ["base.population"]

    def update(self, city: 'City', ctx: TickContext) -> None:
        coverage = ctx.coverage(city)

        if city.families > 0:
            self._report_service_shortages(city, ctx, coverage)

        target = target_satisfaction(city, coverage)
        city.satisfaction = clamp(
            city.satisfaction + round((target - city.satisfaction) * SATISFACTION_DRIFT),
            SATISFACTION_RANGE,
        )

    def _report_service_shortages(self, city: 'City', ctx: TickContext, coverage: Coverage) -> None:
        capacities = ctx.capacities(city).as_dict()
        for service, ratio in coverage.services.items():
            if ratio >= 1.0:
                continue
            severity = "CRITICAL" if ratio < CRITICAL_SERVICE_RATIO else "WARNING"
            ctx.log(city, (
                f"{severity} - Not enough {SERVICE_LABELS[service]}! "
                f"Capacity: {capacities[service]}/{city.families} families ({ratio * 100:.1f}%)."
            ))
