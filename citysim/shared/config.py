import rtoml
from enum import Enum
from pathlib import Path
from typing import Optional

DEFAULT_INITIAL_FAMILIES = 10
DEFAULT_INITIAL_BUDGET = 1000
DEFAULT_TAX_RATE = 0.10
DEFAULT_VAT_RATE = 0.05
DEFAULT_MAX_DAYS = 100
SANDBOX_INITIAL_FAMILIES = 20
SANDBOX_INITIAL_BUDGET = 10000


class Difficulty(Enum):
    """
    Economy multipliers: (income, expenses).
    """
    EASY = (1.2, 0.8)
    NORMAL = (1.0, 1.0)
    HARD = (0.8, 1.2)

    def __init__(self, income_multiplier: float, expense_multiplier: float):
        self.income_multiplier = income_multiplier
        self.expense_multiplier = expense_multiplier


class GameConfig:
    """
    Central configuration handler for CitySim.

    Responsibilities:
    1. Resolve file paths (saves, highscores) relative to the project root.
    2. Read game settings from 'config.toml', falling back to defaults.
    3. Derive the effective starting values (sandbox mode overrides).
    """
    def __init__(self, project_root: Path, config_file: Optional[Path] = None):
        self.project_root = Path(project_root)

        # Standard directory structure definitions
        self.user_data_dir = self.project_root / "user_data"
        self.save_dir = self.user_data_dir / "saves"
        self.highscores_file = self.user_data_dir / "highscores.tsv"
        self.config_file = Path(config_file) if config_file else self.project_root / "config.toml"

        # Defaults (can be overridden by config.toml)
        self.initial_families: int = DEFAULT_INITIAL_FAMILIES
        self.initial_budget: int = DEFAULT_INITIAL_BUDGET
        self.initial_tax_rate: float = DEFAULT_TAX_RATE
        self.initial_vat_rate: float = DEFAULT_VAT_RATE
        self.difficulty: Difficulty = Difficulty.NORMAL
        self.sandbox_mode: bool = False
        self.max_days: int = DEFAULT_MAX_DAYS
        self.seed: Optional[int] = None

        self._load_config_file()

    def _load_config_file(self):
        """Attempts to read settings from config.toml."""
        if not self.config_file.exists():
            print(f"[Config] {self.config_file.name} not found, using default configuration.")
            return

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = rtoml.load(f)
            # Expected format: a [game] table, e.g. initial_budget = 2000
            self.apply(data.get("game", data))
            print(f"[Config] Loaded configuration from {self.config_file.name}")
        except Exception as e:
            print(f"[Config] Warning: Failed to parse {self.config_file.name}, using defaults: {e}")

    def apply(self, settings: dict):
        """
        Applies a settings mapping. Values are validated all at once, so a bad
        entry leaves the previous configuration untouched.
        """
        families = int(settings.get("initial_families", self.initial_families))
        budget = int(settings.get("initial_budget", self.initial_budget))
        tax = float(settings.get("initial_tax_rate", self.initial_tax_rate))
        vat = float(settings.get("initial_vat_rate", self.initial_vat_rate))
        difficulty = Difficulty[str(settings.get("difficulty", self.difficulty.name)).upper()]
        sandbox = bool(settings.get("sandbox_mode", self.sandbox_mode))
        max_days = int(settings.get("max_days", self.max_days))
        seed = settings.get("seed", self.seed)
        seed = int(seed) if seed is not None else None

        self.initial_families = families
        self.initial_budget = budget
        self.initial_tax_rate = tax
        self.initial_vat_rate = vat
        self.difficulty = difficulty
        self.sandbox_mode = sandbox
        self.max_days = max_days
        self.seed = seed

    @property
    def effective_initial_families(self) -> int:
        return SANDBOX_INITIAL_FAMILIES if self.sandbox_mode else self.initial_families

    @property
    def effective_initial_budget(self) -> int:
        return SANDBOX_INITIAL_BUDGET if self.sandbox_mode else self.initial_budget

    def ensure_user_dirs(self):
        self.save_dir.mkdir(parents=True, exist_ok=True)
