from typing import List, TYPE_CHECKING

from citysim.engine.interfaces import ISystem, TickContext
from citysim.engine.mechanics.capacity import Coverage

if TYPE_CHECKING:
    from citysim.server.state import City

# --- CONSTANTS ---
ADEQUACY_THRESHOLD = 0.9   # Every coverage ratio must reach this for families to arrive
SHORTAGE_THRESHOLD = 0.7   # Housing or job coverage below this drives families away
MAX_DAILY_ARRIVALS = 5
MAX_DECLINE_RATE = 0.2     # Upper bound on the share of families leaving per day


def arrivals_for(coverage: Coverage, satisfaction: int, free_housing: int) -> int:
    """
    New families for the day.
    Ramps from 0 at the adequacy threshold to MAX_DAILY_ARRIVALS (scaled by
    mood) at full coverage, and never exceeds the free housing.
    """
    worst = coverage.capped().worst
    if worst < ADEQUACY_THRESHOLD or free_housing <= 0:
        return 0

    ramp = (worst - ADEQUACY_THRESHOLD) / (1.0 - ADEQUACY_THRESHOLD)
    mood = 0.5 + satisfaction / 100
    arrivals = max(1, int(MAX_DAILY_ARRIVALS * mood * ramp)) if ramp > 0 else 0
    return min(arrivals, free_housing)


def departures_for(coverage: Coverage, satisfaction: int, families: int) -> int:
    """
    Families leaving for the day.
    Grows linearly as the worse of housing/job coverage falls below the
    shortage threshold; unhappy cities lose people faster.
    """
    capped = coverage.capped()
    critical = min(capped.housing, capped.jobs)
    if critical >= SHORTAGE_THRESHOLD or families <= 0:
        return 0

    severity = (SHORTAGE_THRESHOLD - critical) / SHORTAGE_THRESHOLD
    unhappiness = 1.5 - satisfaction / 100
    return min(families, int(families * MAX_DECLINE_RATE * severity * unhappiness))


class PopulationSystem(ISystem):
    """
    Moves families in and out of the city based on coverage and satisfaction.

    The net change is bounded (at most MAX_DAILY_ARRIVALS in, at most
    MAX_DECLINE_RATE of the population out) and monotonic in coverage.
    """

    @property
    def id(self) -> str:
        return "base.population"

    @property
    def dependencies(self) -> List[str]:
        return ["base.economy"]

    def update(self, city: 'City', ctx: TickContext) -> None:
        capacities = ctx.capacities(city)
        coverage = ctx.coverage(city)
        families = city.families

        free_housing = max(0, capacities.housing - families)
        if families > 0 and free_housing == 0:
            ctx.log(city, "WARNING - No available housing! New families cannot move in.")

        arrivals = arrivals_for(coverage, city.satisfaction, free_housing)
        departures = departures_for(coverage, city.satisfaction, families)

        if departures > 0:
            capped = coverage.capped()
            cause = "housing" if capped.housing <= capped.jobs else "job"
            ctx.log(city, f"CRITICAL - Severe {cause} shortage causing families to leave!")

        city.families = max(0, families + arrivals - departures)

        if arrivals > 0:
            ctx.log(city, f"{arrivals} new families moved to the city.")
        if departures > 0:
            ctx.log(city, f"{departures} families left the city.")
