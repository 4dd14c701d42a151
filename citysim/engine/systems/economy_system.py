from typing import List, TYPE_CHECKING

from citysim.core.buildings import BuildingType
from citysim.engine.interfaces import ISystem, TickContext

if TYPE_CHECKING:
    from citysim.server.state import City

# --- CONSTANTS ---
PER_FAMILY_INCOME = 50          # Taxable income of one family per day
VAT_CONTRIBUTION_FACTOR = 0.5   # Share of commercial revenue that reaches the treasury
BASE_CITY_SERVICE_COST = 40     # Daily overhead independent of buildings


def commercial_revenue(city: 'City') -> int:
    return sum(b.type.spec.revenue for b in city.buildings if b.type.is_income_producing)


def compute_daily_income(city: 'City', multiplier: float = 1.0) -> int:
    """
    Income tax on residents plus the VAT-weighted commercial revenue.
    Zero for a city with no income-producing buildings and both rates at zero.
    """
    income_tax = city.families * city.tax_rate * PER_FAMILY_INCOME
    commerce = commercial_revenue(city) * (1 + city.vat_rate) * VAT_CONTRIBUTION_FACTOR
    return int((income_tax + commerce) * multiplier)


def compute_daily_expenses(city: 'City', multiplier: float = 1.0) -> int:
    """
    Building upkeep plus the fixed city services overhead.
    Always positive, so an idle city loses money every day.
    """
    upkeep = sum(b.upkeep for b in city.buildings)
    return int((upkeep + BASE_CITY_SERVICE_COST) * multiplier)


class EconomySystem(ISystem):
    """
    Collects taxes, pays upkeep and settles the treasury for the day.

    Responsibility:
    - Overwrites 'daily_income' / 'daily_expenses'
    - Applies the net result to 'budget' (no floor; debt is a signal)
    """

    def __init__(self, income_multiplier: float = 1.0, expense_multiplier: float = 1.0):
        self.income_multiplier = income_multiplier
        self.expense_multiplier = expense_multiplier

    @property
    def id(self) -> str:
        return "base.economy"

    @property
    def dependencies(self) -> List[str]:
        return []

    def update(self, city: 'City', ctx: TickContext) -> None:
        city.daily_income = compute_daily_income(city, self.income_multiplier)
        city.daily_expenses = compute_daily_expenses(city, self.expense_multiplier)

        was_solvent = city.budget >= 0
        city.budget += city.daily_income - city.daily_expenses

        if was_solvent and city.budget < 0:
            ctx.log(city, f"CRITICAL - The city treasury is in debt (${city.budget}).")


def job_balance(city: 'City') -> float:
    """
    Share of commercial buildings among job buildings (0.5 when there are none).
    """
    counts = city.building_counts()
    commercial = counts[BuildingType.COMMERCIAL]
    total = commercial + counts[BuildingType.INDUSTRIAL]
    if total == 0:
        return 0.5
    return commercial / total
