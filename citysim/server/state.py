from typing import Any, Dict, Iterable, List, Optional, Tuple

from citysim.core.buildings import Building, BuildingType
from citysim.core.event_log import EventLog, DEFAULT_RECENT_LIMIT
from citysim.engine.mechanics.capacity import (
    Capacities,
    Coverage,
    compute_capacities,
    compute_coverage,
)

# Policy ranges. Out-of-range input is clamped, never rejected.
TAX_RATE_RANGE = (0.0, 0.40)
VAT_RATE_RANGE = (0.0, 0.25)
SATISFACTION_RANGE = (0, 100)

DEFAULT_SATISFACTION = 50
DEFAULT_TAX_RATE = 0.10
DEFAULT_VAT_RATE = 0.05


def clamp(value, bounds: Tuple):
    low, high = bounds
    return max(low, min(value, high))


class City:
    """
    The aggregate root of the simulation.

    Holds every piece of mutable game data (calendar, treasury, population,
    policy and the building stock) plus the EventLog. The engine systems
    mutate it in place during a tick; the session mutates it through
    `add_building`, `set_tax_rate`, `set_vat_rate` and budget deduction.
    """

    def __init__(self,
                 initial_families: int,
                 initial_budget: int,
                 tax_rate: float = DEFAULT_TAX_RATE,
                 vat_rate: float = DEFAULT_VAT_RATE):
        self.day: int = 0
        self.families: int = initial_families
        self.budget: int = initial_budget
        self.satisfaction: int = DEFAULT_SATISFACTION
        self.daily_income: int = 0
        self.daily_expenses: int = 0

        self._tax_rate = clamp(float(tax_rate), TAX_RATE_RANGE)
        self._vat_rate = clamp(float(vat_rate), VAT_RATE_RANGE)
        self._buildings: List[Building] = []
        self._log = EventLog()

        self._log.record(
            self.day,
            f"City founded with {initial_families} families and ${initial_budget} budget."
        )

    # --- Policy ---

    @property
    def tax_rate(self) -> float:
        return self._tax_rate

    @property
    def vat_rate(self) -> float:
        return self._vat_rate

    def set_tax_rate(self, rate: float) -> None:
        self._tax_rate = clamp(float(rate), TAX_RATE_RANGE)

    def set_vat_rate(self, rate: float) -> None:
        self._vat_rate = clamp(float(rate), VAT_RATE_RANGE)

    # --- Buildings ---

    def add_building(self, building_type: BuildingType) -> Building:
        """
        Constructs and appends a building with the next id.
        Affordability is checked by the caller (GameSession).
        """
        next_id = self._buildings[-1].id + 1 if self._buildings else 0
        building = Building.construct(next_id, building_type)
        self._buildings.append(building)
        return building

    @property
    def buildings(self) -> Tuple[Building, ...]:
        return tuple(self._buildings)

    def building_counts(self) -> Dict[BuildingType, int]:
        counts = {t: 0 for t in BuildingType}
        for b in self._buildings:
            counts[b.type] += 1
        return counts

    def capacities(self) -> Capacities:
        return compute_capacities(self._buildings)

    def coverage(self) -> Coverage:
        return compute_coverage(self.capacities(), self.families)

    # --- Event log ---

    @property
    def log(self) -> EventLog:
        return self._log

    @property
    def event_log(self) -> List[str]:
        return self._log.to_list()

    def recent_events(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[str]:
        return self._log.recent(limit)

    def record_event(self, day: int, message: str) -> str:
        return self._log.record(day, message)

    def clamp_satisfaction(self) -> None:
        self.satisfaction = clamp(self.satisfaction, SATISFACTION_RANGE)

    # --- Snapshot (persistence contract) ---

    def to_snapshot(self) -> Dict[str, Any]:
        """
        Plain-data view of the full city state.
        Buildings are exported as rows so IO layers can store them as a table.
        """
        return {
            "day": self.day,
            "budget": self.budget,
            "families": self.families,
            "satisfaction": self.satisfaction,
            "tax_rate": self._tax_rate,
            "vat_rate": self._vat_rate,
            "daily_income": self.daily_income,
            "daily_expenses": self.daily_expenses,
            "buildings": [{"id": b.id, "type": b.type.name} for b in self._buildings],
            "event_log": self._log.to_list(),
        }

    @classmethod
    def from_snapshot(cls, data: Dict[str, Any]) -> 'City':
        """
        Rebuilds a City from `to_snapshot()` output.
        Raises KeyError/ValueError on malformed data; never returns a partial city.
        """
        city = cls.__new__(cls)
        city.day = int(data["day"])
        city.budget = int(data["budget"])
        city.families = int(data["families"])
        city.satisfaction = int(data["satisfaction"])
        city.daily_income = int(data.get("daily_income", 0))
        city.daily_expenses = int(data.get("daily_expenses", 0))
        city._tax_rate = clamp(float(data["tax_rate"]), TAX_RATE_RANGE)
        city._vat_rate = clamp(float(data["vat_rate"]), VAT_RATE_RANGE)

        if city.day < 0 or city.families < 0:
            raise ValueError("Negative day or family count in snapshot")
        low, high = SATISFACTION_RANGE
        if not low <= city.satisfaction <= high:
            raise ValueError(f"Satisfaction {city.satisfaction} outside {low}-{high} in snapshot")

        city._buildings = list(_restore_buildings(data["buildings"]))

        entries = data["event_log"]
        if not isinstance(entries, list) or not entries:
            raise ValueError("Snapshot event log must be a non-empty list")
        city._log = EventLog(str(e) for e in entries)
        return city

    def __repr__(self) -> str:
        return (f"City(day={self.day}, families={self.families}, budget={self.budget}, "
                f"satisfaction={self.satisfaction}, buildings={len(self._buildings)})")


def _restore_buildings(rows: Iterable[Dict[str, Any]]) -> Iterable[Building]:
    last_id: Optional[int] = None
    for row in rows:
        building_id = int(row["id"])
        try:
            building_type = BuildingType[str(row["type"])]
        except KeyError:
            raise ValueError(f"Unknown building type in snapshot: {row['type']!r}") from None

        if last_id is not None and building_id <= last_id:
            raise ValueError(f"Building ids must be strictly increasing (got {building_id} after {last_id})")
        last_id = building_id
        yield Building.construct(building_id, building_type)
