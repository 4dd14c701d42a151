import random
from datetime import datetime
from enum import Enum
from typing import List, Optional

from citysim.core.buildings import Building, BuildingType
from citysim.engine.interfaces import TickContext
from citysim.engine.registration import register
from citysim.engine.simulator import Engine
from citysim.server.state import City
from citysim.server.io.highscores import Highscore, HighscoreTable, calculate_score
from citysim.server.io.save_loader import SaveCorruptedError, SaveStateLoader
from citysim.server.io.save_writer import SaveWriter
from citysim.shared.actions import ActionBuild, ActionNextDay, ActionSetTax, ActionSetVat, GameAction
from citysim.shared.config import GameConfig
from citysim.shared.events import NOTABLE_TAGS


class LoadResult(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    CORRUPTED = "corrupted"


class GameOverReason(Enum):
    BANKRUPT = "bankrupt"
    ABANDONED = "abandoned"
    MAX_DAYS = "max_days"


class GameSession:
    """
    The 'Host' of the game. It manages the lifecycle of one city.

    Architecture Note:
        This class uses the Factory Method pattern (`create_local`).
        The `__init__` method is lightweight and strictly for Dependency Injection,
        so tests can hand in a prepared City, Engine and seeded RNG.
    """

    def __init__(self,
                 config: GameConfig,
                 city: City,
                 engine: Engine,
                 rng: random.Random,
                 writer: SaveWriter,
                 loader: SaveStateLoader,
                 highscores: HighscoreTable):
        self.config = config
        self.city = city
        self.engine = engine
        self.rng = rng

        # Subsystems (Injected)
        self.writer = writer
        self.loader = loader
        self.highscores = highscores

        self.started_at = datetime.now()
        self.game_over_reason: Optional[GameOverReason] = None
        self.last_tick: Optional[TickContext] = None

    @classmethod
    def create_local(cls, config: GameConfig, seed: Optional[int] = None) -> 'GameSession':
        """
        Factory Method: assembles a fresh single-player game from the configuration.

        Args:
            config: Game paths and settings.
            seed: Random seed for the daily events; falls back to config.seed.
        """
        city = City(
            config.effective_initial_families,
            config.effective_initial_budget,
            tax_rate=config.initial_tax_rate,
            vat_rate=config.initial_vat_rate,
        )

        engine = Engine()
        engine.register_systems(register(config))

        rng = random.Random(seed if seed is not None else config.seed)

        mode = " (SANDBOX MODE)" if config.sandbox_mode else ""
        print(f"[GameSession] City initialized with {city.families} families, ${city.budget} budget, "
              f"{city.tax_rate:.1%} income tax and {city.vat_rate:.1%} VAT{mode}.")

        return cls(
            config,
            city,
            engine,
            rng,
            SaveWriter(config),
            SaveStateLoader(config),
            HighscoreTable(config.highscores_file),
        )

    @property
    def sandbox_mode(self) -> bool:
        return self.config.sandbox_mode

    # --- Simulation ---

    def city_tick(self) -> bool:
        """
        Advances the city one day.
        Returns False when the game has ended (bankruptcy first, then abandonment).
        Sandbox sessions always continue.
        """
        self.last_tick = self.engine.step(self.city, self.rng)
        city = self.city

        if self.sandbox_mode:
            return True

        if city.budget < 0:
            self.game_over_reason = GameOverReason.BANKRUPT
            print(f"[GameSession] Game over: City went bankrupt with ${-city.budget} debt.")
            return False

        if city.families <= 0:
            self.game_over_reason = GameOverReason.ABANDONED
            print("[GameSession] Game over: City has been abandoned (0 families).")
            return False

        return True

    def is_over(self) -> bool:
        if self.game_over_reason is not None:
            return True
        if not self.sandbox_mode and self.city.day >= self.config.max_days:
            self.game_over_reason = GameOverReason.MAX_DAYS
            return True
        return False

    # --- Player commands ---

    def build_building(self, building_type: BuildingType) -> bool:
        cost = building_type.cost
        if self.city.budget < cost:
            print(f"[GameSession] Not enough budget to build {building_type}: "
                  f"need ${cost}, have ${self.city.budget}.")
            return False

        self.city.budget -= cost
        building: Building = self.city.add_building(building_type)
        print(f"[GameSession] Built new {building_type} (ID: {building.id}) for ${cost}.")
        return True

    def set_tax_rate(self, rate: float) -> None:
        old_rate = self.city.tax_rate
        self.city.set_tax_rate(rate)
        print(f"[GameSession] Income tax rate changed from {old_rate:.2%} to {self.city.tax_rate:.2%}.")

    def set_vat_rate(self, rate: float) -> None:
        old_rate = self.city.vat_rate
        self.city.set_vat_rate(rate)
        print(f"[GameSession] VAT rate changed from {old_rate:.2%} to {self.city.vat_rate:.2%}.")

    def apply_action(self, action: GameAction):
        """
        Single entry point for console commands.
        Returns the underlying operation's result (bool for build/next day, None for rates).
        """
        if isinstance(action, ActionBuild):
            return self.build_building(action.building_type)
        if isinstance(action, ActionSetTax):
            return self.set_tax_rate(action.new_tax_rate)
        if isinstance(action, ActionSetVat):
            return self.set_vat_rate(action.new_vat_rate)
        if isinstance(action, ActionNextDay):
            for _ in range(max(1, action.days)):
                if not self.city_tick():
                    return False
            return True
        raise TypeError(f"Unsupported action: {type(action).__name__}")

    # --- Results ---

    def calculate_score(self) -> int:
        return calculate_score(self.city)

    def notable_events(self) -> List[str]:
        return self.city.log.matching(NOTABLE_TAGS)

    def save_highscore(self, name: str) -> bool:
        if self.sandbox_mode:
            print("[GameSession] Highscores are disabled in sandbox mode.")
            return False
        return self.highscores.submit(Highscore.from_city(name, self.city))

    # --- Persistence ---

    def replace_city(self, city: City) -> None:
        """
        Swaps in a different City (used by load).
        """
        self.city = city
        self.game_over_reason = None
        self.last_tick = None
        print(f"[GameSession] City replaced (day: {city.day}, families: {city.families}, budget: ${city.budget}).")

    def save_game(self, save_name: str) -> bool:
        return self.writer.save_game(self.city, save_name, started_at=self.started_at)

    def load_game(self, save_name: str) -> LoadResult:
        """
        Loads a save into this session. On failure the current city is kept as is.
        """
        try:
            city = self.loader.load(save_name)
        except FileNotFoundError as e:
            print(f"[GameSession] Load failed: {e}")
            return LoadResult.NOT_FOUND
        except SaveCorruptedError as e:
            print(f"[GameSession] Load failed, save is corrupted: {e}")
            return LoadResult.CORRUPTED

        self.replace_city(city)
        return LoadResult.OK
