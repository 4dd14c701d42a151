from typing import List, TYPE_CHECKING

from citysim.engine.interfaces import ISystem, TickContext

if TYPE_CHECKING:
    from citysim.server.state import City


class TimeSystem(ISystem):
    """
    Commits the day change.

    Runs after every other system so their log entries (stamped with
    ctx.day) refer to the day that has just elapsed.
    """

    @property
    def id(self) -> str:
        return "base.time"

    @property
    def dependencies(self) -> List[str]:
        return ["base.random_events"]

    def update(self, city: 'City', ctx: TickContext) -> None:
        city.day = ctx.day
