import polars as pl
import orjson
from pathlib import Path
from typing import Any, Dict

from citysim.server.state import City
from citysim.server.io.save_writer import (
    BUILDINGS_FILE,
    META_FILE,
    SAVE_FORMAT_VERSION,
    sanitize_save_name,
)
from citysim.shared.config import GameConfig


class SaveCorruptedError(Exception):
    """The save exists but cannot be decoded into a consistent City."""


class SaveStateLoader:
    """
    Responsible strictly for reconstructing a City from user save files (Parquet/JSON).

    Failures are reported as two distinct exceptions:
        FileNotFoundError  -> there is no save with that name
        SaveCorruptedError -> the save is present but unreadable or inconsistent
    A City is only returned when every part decoded successfully.
    """
    def __init__(self, config: GameConfig):
        self.save_root = config.save_dir

    def load(self, save_name: str) -> City:
        save_dir = self.save_root / sanitize_save_name(save_name)
        if not sanitize_save_name(save_name) or not save_dir.is_dir():
            raise FileNotFoundError(f"Save '{save_name}' not found at {save_dir}")

        print(f"[SaveLoader] Restoring save '{save_name}'...")

        meta = self._read_meta(save_dir / META_FILE)
        snapshot = meta.get("city")
        if not isinstance(snapshot, dict):
            raise SaveCorruptedError(f"Save '{save_name}' has no city section")

        snapshot = dict(snapshot)
        snapshot["buildings"] = self._read_buildings(save_dir / BUILDINGS_FILE)

        try:
            city = City.from_snapshot(snapshot)
        except (KeyError, ValueError, TypeError) as e:
            raise SaveCorruptedError(f"Save '{save_name}' is inconsistent: {e}") from e

        print(f"[SaveLoader] Save loaded successfully. Day: {city.day}")
        return city

    def _read_meta(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise SaveCorruptedError(f"{META_FILE} missing in {path.parent.name}")
        try:
            with open(path, "rb") as f:
                meta = orjson.loads(f.read())
        except (OSError, orjson.JSONDecodeError) as e:
            raise SaveCorruptedError(f"Cannot decode {META_FILE}: {e}") from e

        if not isinstance(meta, dict):
            raise SaveCorruptedError(f"{META_FILE} does not contain an object")

        version = meta.get("version")
        if version != SAVE_FORMAT_VERSION:
            raise SaveCorruptedError(f"Unsupported save version: {version!r}")
        return meta

    def _read_buildings(self, path: Path) -> list:
        if not path.exists():
            raise SaveCorruptedError(f"{BUILDINGS_FILE} missing in {path.parent.name}")
        try:
            df = pl.read_parquet(path)
        except Exception as e:
            raise SaveCorruptedError(f"Cannot decode {BUILDINGS_FILE}: {e}") from e

        if not {"id", "type"}.issubset(df.columns):
            raise SaveCorruptedError(f"{BUILDINGS_FILE} lacks id/type columns")
        return df.select(["id", "type"]).to_dicts()
