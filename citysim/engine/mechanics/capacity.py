from dataclasses import dataclass, asdict
from typing import Dict, Iterable

from citysim.core.buildings import Building, BuildingType

JOB_TYPES = (BuildingType.COMMERCIAL, BuildingType.INDUSTRIAL)


@dataclass(frozen=True)
class Capacities:
    """
    Service capacity sums derived from the building stock.
    Housing and jobs use the per-building `capacity`; the service fields use
    the type-level education/healthcare/utility capacities.
    """
    housing: int = 0
    commercial_jobs: int = 0
    industrial_jobs: int = 0
    education: int = 0
    healthcare: int = 0
    water: int = 0
    power: int = 0

    @property
    def jobs(self) -> int:
        return self.commercial_jobs + self.industrial_jobs

    def as_dict(self) -> Dict[str, int]:
        data = asdict(self)
        data["jobs"] = self.jobs
        return data


@dataclass(frozen=True)
class Coverage:
    """
    Coverage ratios (capacity / families). Raw values may exceed 1.0;
    `capped()` bounds every ratio to [0, 1] for policy formulas.
    """
    housing: float = 1.0
    jobs: float = 1.0
    education: float = 1.0
    healthcare: float = 1.0
    water: float = 1.0
    power: float = 1.0

    def capped(self) -> 'Coverage':
        return Coverage(**{k: min(1.0, v) for k, v in asdict(self).items()})

    @property
    def services(self) -> Dict[str, float]:
        return {
            "education": self.education,
            "healthcare": self.healthcare,
            "water": self.water,
            "power": self.power,
        }

    @property
    def worst(self) -> float:
        return min(asdict(self).values())

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def compute_capacities(buildings: Iterable[Building]) -> Capacities:
    """
    Sums capacities over the building collection in one pass.
    """
    totals = dict(housing=0, commercial_jobs=0, industrial_jobs=0,
                  education=0, healthcare=0, water=0, power=0)

    for building in buildings:
        spec = building.type.spec
        if building.type is BuildingType.RESIDENTIAL:
            totals["housing"] += building.capacity
        elif building.type is BuildingType.COMMERCIAL:
            totals["commercial_jobs"] += building.capacity
        elif building.type is BuildingType.INDUSTRIAL:
            totals["industrial_jobs"] += building.capacity
        elif building.type is BuildingType.WATER_PLANT:
            totals["water"] += spec.utility_capacity
        elif building.type is BuildingType.POWER_PLANT:
            totals["power"] += spec.utility_capacity

        totals["education"] += spec.education_capacity
        totals["healthcare"] += spec.healthcare_capacity

    return Capacities(**totals)


def coverage_ratio(capacity: int, families: int) -> float:
    """
    capacity / families, defined as 1.0 (fully covered) for an empty city.
    """
    if families <= 0:
        return 1.0
    return capacity / families


def compute_coverage(capacities: Capacities, families: int) -> Coverage:
    return Coverage(
        housing=coverage_ratio(capacities.housing, families),
        jobs=coverage_ratio(capacities.jobs, families),
        education=coverage_ratio(capacities.education, families),
        healthcare=coverage_ratio(capacities.healthcare, families),
        water=coverage_ratio(capacities.water, families),
        power=coverage_ratio(capacities.power, families),
    )
