import random
from typing import Dict, List, TYPE_CHECKING
from graphlib import TopologicalSorter, CycleError

from citysim.engine.interfaces import ISystem, TickContext

if TYPE_CHECKING:
    from citysim.server.state import City


class Engine:
    """
    Runs the daily simulation.

    Systems are registered in any order; each declares the ids it must run
    after, and the engine resolves a single execution order before the
    first tick following a registration.
    """

    def __init__(self):
        # "base.economy" -> EconomySystem
        self.systems_map: Dict[str, ISystem] = {}
        self.execution_order: List[ISystem] = []
        self._needs_sort = False

    def register_systems(self, systems: List[ISystem]):
        for system in systems:
            if system.id in self.systems_map:
                print(f"[Engine] Warning: System '{system.id}' replaces an existing registration.")
            self.systems_map[system.id] = system
        self._needs_sort = True

    @property
    def system_ids(self) -> List[str]:
        if self._needs_sort:
            self._resolve_order()
        return [s.id for s in self.execution_order]

    def _resolve_order(self):
        graph = {sys_id: list(system.dependencies) for sys_id, system in self.systems_map.items()}

        for sys_id, deps in graph.items():
            missing = [d for d in deps if d not in self.systems_map]
            if missing:
                print(f"[Engine] Warning: '{sys_id}' depends on unregistered systems {missing}.")

        try:
            ordered = list(TopologicalSorter(graph).static_order())
        except CycleError as e:
            print(f"[Engine] CRITICAL ERROR: Circular system dependencies: {e.args[1]}")
            raise

        self.execution_order = [self.systems_map[i] for i in ordered if i in self.systems_map]
        self._needs_sort = False
        print(f"[Engine] Execution order: {[s.id for s in self.execution_order]}")

    def step(self, city: 'City', rng: random.Random) -> TickContext:
        """
        Simulates one day and returns the tick's context (events fired, day stamp).

        Everything logged during the step is stamped city.day + 1; the
        TimeSystem commits that day last.
        """
        if self._needs_sort:
            self._resolve_order()

        ctx = TickContext(day=city.day + 1, rng=rng)

        for system in self.execution_order:
            # A failing system may leave partial changes; the rest still run and the day is committed.
            try:
                system.update(city, ctx)
            except Exception as e:
                print(f"[Engine] Error in system '{system.id}' on day {ctx.day}: {e}")

        return ctx
