from dataclasses import dataclass

from citysim.core.buildings import BuildingType


@dataclass
class GameAction:
    """
    Base class for all discrete player commands following the Command Pattern.

    Architecture Note:
        The console does not modify the City directly. It issues Actions and
        the GameSession applies them one at a time, so every mutation of a
        city goes through a single writer.
    """
    # Identifies who initiated the action ('local_player' for the console).
    player_id: str


@dataclass
class ActionBuild(GameAction):
    """
    Constructs one building if the treasury can afford it.
    """
    building_type: BuildingType


@dataclass
class ActionSetTax(GameAction):
    """
    Updates the income tax rate (fraction, clamped to 0.0 - 0.40).
    """
    new_tax_rate: float


@dataclass
class ActionSetVat(GameAction):
    """
    Updates the VAT rate (fraction, clamped to 0.0 - 0.25).
    """
    new_vat_rate: float


@dataclass
class ActionNextDay(GameAction):
    """
    Advances the simulation by `days` days, stopping early on game over.
    """
    days: int = 1
