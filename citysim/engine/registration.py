from typing import List

from citysim.engine.interfaces import ISystem
from citysim.engine.systems.economy_system import EconomySystem
from citysim.engine.systems.population_system import PopulationSystem
from citysim.engine.systems.satisfaction_system import SatisfactionSystem
from citysim.engine.systems.random_event_system import RandomEventSystem
from citysim.engine.systems.time_system import TimeSystem
from citysim.shared.config import GameConfig


def register(config: GameConfig) -> List[ISystem]:
    """
    The GameSession calls this function to discover what logic
    contributes to the daily loop.
    """
    difficulty = config.difficulty
    return [
        # Order in this list doesn't matter.
        # The Engine sorts them automatically based on their .dependencies property.
        TimeSystem(),
        RandomEventSystem(),
        SatisfactionSystem(),
        PopulationSystem(),
        EconomySystem(
            income_multiplier=difficulty.income_multiplier,
            expense_multiplier=difficulty.expense_multiplier,
        ),
    ]
