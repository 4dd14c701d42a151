from dataclasses import dataclass
from enum import Enum

# Construction cost is a multiple of the daily upkeep.
COST_MULTIPLIER = 10


@dataclass(frozen=True)
class BuildingSpec:
    """
    Immutable metadata for one building type.

    Attributes:
        capacity: Housing slots (Residential) or jobs (Commercial/Industrial).
        upkeep: Daily maintenance cost.
        satisfaction_impact: Amenity value added to the satisfaction target.
        education_capacity / healthcare_capacity / utility_capacity:
            Number of families one instance can serve.
        revenue: Daily commercial revenue (income-producing buildings only).
    """
    name: str
    description: str
    capacity: int
    upkeep: int
    satisfaction_impact: int
    education_capacity: int = 0
    healthcare_capacity: int = 0
    utility_capacity: int = 0
    revenue: int = 0


class BuildingType(Enum):
    """
    Tagged variant of every constructible building.
    Capacity aggregation reads these fields directly instead of dispatching on subclasses.
    """
    RESIDENTIAL = BuildingSpec("Residential", "Houses families, increases population", 25, 5, 5)
    COMMERCIAL = BuildingSpec("Commercial", "Provides jobs and generates income", 15, 10, 2, revenue=30)
    INDUSTRIAL = BuildingSpec("Industrial", "Generates higher income but reduces satisfaction", 10, 20, -3, revenue=45)
    PARK = BuildingSpec("Park", "Increases satisfaction but generates no income", 0, 2, 8)
    SCHOOL = BuildingSpec("School", "Improves education and satisfaction", 0, 15, 6, education_capacity=50)
    HOSPITAL = BuildingSpec("Hospital", "Improves health and satisfaction", 0, 25, 7, healthcare_capacity=60)
    WATER_PLANT = BuildingSpec("Water Plant", "Provides water to families", 0, 30, 3, utility_capacity=75)
    POWER_PLANT = BuildingSpec("Power Plant", "Provides electricity to families", 0, 40, 2, utility_capacity=100)

    @property
    def spec(self) -> BuildingSpec:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value.name

    @property
    def description(self) -> str:
        return self.value.description

    @property
    def capacity(self) -> int:
        return self.value.capacity

    @property
    def upkeep(self) -> int:
        return self.value.upkeep

    @property
    def cost(self) -> int:
        return self.value.upkeep * COST_MULTIPLIER

    @property
    def is_income_producing(self) -> bool:
        return self.value.revenue > 0

    @classmethod
    def parse(cls, text: str) -> 'BuildingType':
        """
        Resolves user input to a BuildingType.
        Accepts the enum name ('water_plant'), the display name ('Water Plant')
        or the compact form ('waterplant'), case-insensitively.
        """
        key = text.strip().lower().replace("-", " ").replace("_", " ")
        compact = key.replace(" ", "")
        for member in cls:
            names = (member.name.lower().replace("_", " "), member.display_name.lower())
            if key in names or compact in (n.replace(" ", "") for n in names):
                return member
        raise ValueError(f"Unknown building type: '{text}'")

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class Building:
    """
    A single constructed instance. Ids are assigned by the owning City.
    """
    id: int
    type: BuildingType
    capacity: int

    @classmethod
    def construct(cls, building_id: int, building_type: BuildingType) -> 'Building':
        return cls(id=building_id, type=building_type, capacity=building_type.capacity)

    @property
    def upkeep(self) -> int:
        return self.type.upkeep
