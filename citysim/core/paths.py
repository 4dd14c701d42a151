import os
import sys
from pathlib import Path
from typing import Optional

# Overrides root detection, e.g. to keep saves outside an installed package.
HOME_ENV_VAR = "CITYSIM_HOME"


class ProjectPaths:
    """
    Locates the directory holding config.toml and user_data/.

    Lookup order: $CITYSIM_HOME, the executable's folder for frozen builds,
    the source checkout (main.py next to citysim/), then the working directory.
    """
    _root: Optional[Path] = None

    @classmethod
    def root(cls) -> Path:
        if cls._root is None:
            cls._root = cls._detect_root()
        return cls._root

    @staticmethod
    def _detect_root() -> Path:
        override = os.environ.get(HOME_ENV_VAR)
        if override:
            return Path(override).expanduser().resolve()

        if getattr(sys, 'frozen', False):
            return Path(sys.executable).parent

        # citysim/core/paths.py -> walk up to the checkout
        for parent in Path(__file__).resolve().parents:
            if (parent / "main.py").is_file() and (parent / "citysim").is_dir():
                return parent

        return Path.cwd()

    @classmethod
    def config_file(cls) -> Path:
        return cls.root() / "config.toml"
