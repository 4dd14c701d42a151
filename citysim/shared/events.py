from dataclasses import dataclass
from enum import Enum

# Substrings that mark an event-log entry as notable.
# Summaries filter the log with a plain substring match, so these strings are a contract.
TAG_FIRE = "FIRE"
TAG_EPIDEMIC = "EPIDEMIC"
TAG_ECONOMIC_CRISIS = "ECONOMIC CRISIS"
TAG_GRANT = "GRANT"
TAG_CRITICAL = "CRITICAL"
TAG_WARNING = "WARNING"

NOTABLE_TAGS = (TAG_FIRE, TAG_EPIDEMIC, TAG_ECONOMIC_CRISIS, TAG_GRANT, TAG_CRITICAL, TAG_WARNING)


class EventKind(Enum):
    """
    Random daily events. Each kind is rolled independently once per day
    with its own fixed probability, in declaration order.
    """
    FIRE = (TAG_FIRE, "A building caught fire, causing damage and repair costs.", False, 0.04)
    EPIDEMIC = (TAG_EPIDEMIC, "A disease outbreak affected families and required healthcare expenses.", False, 0.03)
    ECONOMIC_CRISIS = (TAG_ECONOMIC_CRISIS, "Market instability caused financial losses.", False, 0.03)
    GRANT = (TAG_GRANT, "The city received a financial grant from the government.", True, 0.04)

    def __init__(self, tag: str, description: str, positive: bool, probability: float):
        self.tag = tag
        self.description = description
        self.positive = positive
        self.probability = probability


@dataclass
class GameEvent:
    """
    Outcome of one random event, collected on the TickContext.

    Architecture Note:
        The EventLog holds the player-facing text; these records keep the
        numeric effects so tests and reports do not have to parse log lines.
    """
    kind: EventKind
    day: int
    message: str
    budget_delta: int = 0
    families_delta: int = 0
    satisfaction_delta: int = 0
