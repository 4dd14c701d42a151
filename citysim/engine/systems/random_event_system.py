from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from citysim.engine.interfaces import ISystem, TickContext
from citysim.engine.systems.economy_system import job_balance
from citysim.shared.events import EventKind, GameEvent

if TYPE_CHECKING:
    from citysim.server.state import City

# --- CONSTANTS ---
MEDIUM_CITY = 50    # families
LARGE_CITY = 100    # families

EPIDEMIC_LOSS_SHARE = 0.3        # Share of affected families lost to an epidemic
EPIDEMIC_COST_PER_FAMILY = 20
MIN_GRANT = 100


def _size_factor(families: int) -> float:
    if families > LARGE_CITY:
        return 1.5
    if families > MEDIUM_CITY:
        return 1.2
    return 1.0


class RandomEventSystem(ISystem):
    """
    Rolls the day's random events.

    Responsibility:
    - One independent roll per EventKind, in declaration order
    - Applies budget/families/satisfaction effects
    - Writes a tagged EventLog entry and a GameEvent record per event fired
    """

    def __init__(self):
        self.handlers: Dict[EventKind, Callable[['City', TickContext], Optional[GameEvent]]] = {
            EventKind.FIRE: self._fire,
            EventKind.EPIDEMIC: self._epidemic,
            EventKind.ECONOMIC_CRISIS: self._economic_crisis,
            EventKind.GRANT: self._grant,
        }

    @property
    def id(self) -> str:
        return "base.random_events"

    @property
    def dependencies(self) -> List[str]:
        return ["base.satisfaction"]

    def update(self, city: 'City', ctx: TickContext) -> None:
        # Roll every kind up front so the random sequence does not depend on
        # which events turn out to be applicable.
        fired = [kind for kind in EventKind if ctx.rng.random() < kind.probability]

        for kind in fired:
            event = self.handlers[kind](city, ctx)
            if event is None:
                continue
            ctx.log(city, event.message)
            ctx.events.append(event)

        city.families = max(0, city.families)
        city.clamp_satisfaction()

    # --- Handlers ---

    def _fire(self, city: 'City', ctx: TickContext) -> Optional[GameEvent]:
        buildings = city.buildings
        if not buildings:
            return None

        target = ctx.rng.choice(buildings)
        damage = target.type.cost * ctx.rng.randint(25, 75) // 100
        damage = int(damage * _size_factor(city.families))

        # Water coverage puts out fires faster (up to 50% less damage).
        water = ctx.coverage(city).capped().water if ctx.capacities(city).water > 0 else 0.0
        mitigated = int(damage * water * 0.5)
        damage -= mitigated

        # Damage measured against the treasury before repairs.
        penalty = 5
        if city.budget > 0 and damage > city.budget * 0.1:
            penalty += 3
        if city.budget > 0 and damage > city.budget * 0.2:
            penalty += 5

        city.budget -= damage
        city.satisfaction -= penalty

        message = f"FIRE! A {target.type} (#{target.id}) caught fire, causing ${damage} in damages."
        if mitigated:
            message += f" Water system reduced damage by ${mitigated}."
        return GameEvent(EventKind.FIRE, ctx.day, message,
                         budget_delta=-damage, satisfaction_delta=-penalty)

    def _epidemic(self, city: 'City', ctx: TickContext) -> Optional[GameEvent]:
        if city.families <= 0:
            return None

        affected_pct = ctx.rng.randint(10, 30)
        if city.families > MEDIUM_CITY:
            affected_pct += 5
        if city.families > LARGE_CITY:
            affected_pct += 10
        affected = city.families * min(50, affected_pct) // 100

        # Low healthcare coverage amplifies every effect.
        health = ctx.coverage(city).capped().healthcare if ctx.capacities(city).healthcare > 0 else 0.0
        exposure = 1 - health * 0.7

        lost = min(city.families, int(affected * EPIDEMIC_LOSS_SHARE * exposure))
        cost = int(affected * EPIDEMIC_COST_PER_FAMILY * (1 - health * 0.6))
        penalty = int(10 * exposure)

        city.families -= lost
        city.budget -= cost
        city.satisfaction -= penalty

        if health > 0:
            message = (f"EPIDEMIC! {affected} families affected, {lost} lost. "
                       f"Hospitals limited the cost to ${cost}.")
        else:
            message = f"EPIDEMIC! {affected} families affected, {lost} lost, costing ${cost}. No hospitals to help!"
        return GameEvent(EventKind.EPIDEMIC, ctx.day, message,
                         budget_delta=-cost, families_delta=-lost, satisfaction_delta=-penalty)

    def _economic_crisis(self, city: 'City', ctx: TickContext) -> Optional[GameEvent]:
        impact_pct = ctx.rng.randint(5, 15)
        if city.families > MEDIUM_CITY:
            impact_pct += 3
        if city.families > LARGE_CITY:
            impact_pct += 5

        # A balanced mix of commercial and industrial jobs is more resilient.
        balance = job_balance(city)
        if abs(balance - 0.5) < 0.2:
            impact_pct -= 2
        elif balance < 0.3 or balance > 0.7:
            impact_pct += 3
        impact_pct = max(3, min(25, impact_pct))

        loss = max(0, city.budget) * impact_pct // 100
        penalty = 8

        city.budget -= loss
        city.satisfaction -= penalty

        severity = "SEVERE " if impact_pct > 20 else "MAJOR " if impact_pct > 15 else ""
        message = (f"{severity}ECONOMIC CRISIS! The city lost ${loss} "
                   f"({impact_pct}% of budget) due to market instability.")
        return GameEvent(EventKind.ECONOMIC_CRISIS, ctx.day, message,
                         budget_delta=-loss, satisfaction_delta=-penalty)

    def _grant(self, city: 'City', ctx: TickContext) -> Optional[GameEvent]:
        grant_pct = ctx.rng.randint(10, 20)
        if city.families > MEDIUM_CITY:
            grant_pct -= 2
        if city.families > LARGE_CITY:
            grant_pct -= 3
        # Struggling cities get more aid.
        if city.satisfaction < 40:
            grant_pct += 5
        grant_pct = max(5, min(25, grant_pct))

        amount = max(MIN_GRANT, max(0, city.budget) * grant_pct // 100)
        bonus = 5

        city.budget += amount
        city.satisfaction += bonus

        message = f"GRANT! The city received a ${amount} grant from the government."
        return GameEvent(EventKind.GRANT, ctx.day, message,
                         budget_delta=amount, satisfaction_delta=bonus)
