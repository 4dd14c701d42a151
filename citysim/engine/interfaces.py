import random
from dataclasses import dataclass, field
from typing import Protocol, List, Optional, runtime_checkable, TYPE_CHECKING

from citysim.engine.mechanics.capacity import Capacities, Coverage, compute_capacities, compute_coverage
from citysim.shared.events import GameEvent

if TYPE_CHECKING:
    from citysim.server.state import City


@dataclass
class TickContext:
    """
    Per-tick scratch data shared by the systems.

    `day` is the stamp for every log entry written during the tick (the day
    that is about to elapse). Capacities are cached because the building
    stock does not change inside a tick; coverage is recomputed on demand
    because families do.
    """
    day: int
    rng: random.Random

    # Random events fired during this tick, in decision order.
    events: List[GameEvent] = field(default_factory=list)

    _capacities: Optional[Capacities] = field(default=None, repr=False)

    def capacities(self, city: 'City') -> Capacities:
        if self._capacities is None:
            self._capacities = compute_capacities(city.buildings)
        return self._capacities

    def coverage(self, city: 'City') -> Coverage:
        return compute_coverage(self.capacities(city), city.families)

    def log(self, city: 'City', message: str) -> str:
        return city.record_event(self.day, message)


@runtime_checkable
class ISystem(Protocol):
    """
    Interface for all simulation systems with Dependency Graph support.
    """

    @property
    def id(self) -> str:
        """
        Unique identifier for the system (e.g., 'base.economy').
        """
        ...

    @property
    def dependencies(self) -> List[str]:
        """
        List of system IDs that must execute BEFORE this system.
        Example: ['base.economy']
        """
        ...

    def update(self, city: 'City', ctx: TickContext) -> None:
        """
        Performs the logic for a single day.
        """
        ...
