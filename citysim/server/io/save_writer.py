import shutil
import polars as pl
import orjson
from pathlib import Path
from datetime import datetime
from typing import List, Dict, Any, Optional

from citysim.server.state import City
from citysim.shared.config import GameConfig

SAVE_FORMAT_VERSION = 1
META_FILE = "meta.json"
BUILDINGS_FILE = "buildings.parquet"
BUILDINGS_SCHEMA = {"id": pl.Int64, "type": pl.String}
TEMP_SUFFIX = "_tmp"


def sanitize_save_name(save_name: str) -> str:
    """Strips everything but alphanumerics, spaces, '_' and '-' (no path traversal)."""
    return "".join(c for c in save_name if c.isalnum() or c in (' ', '_', '-')).strip()


class SaveWriter:
    """
    Writes, lists and deletes saves under user_data/saves/.

    Layout of one save:
        <name>/meta.json          -> format version, timestamps, city scalars, event log (orjson)
        <name>/buildings.parquet  -> building table in id order (polars)

    SaveStateLoader reads the same layout back.
    """

    def __init__(self, config: GameConfig):
        self.save_root = config.save_dir

    def save_game(self, city: City, save_name: str, started_at: Optional[datetime] = None) -> bool:
        """
        Writes the city into a staging folder and swaps it in only once
        every file is complete. Returns False (and leaves any previous save
        intact) on failure.
        """
        name = sanitize_save_name(save_name)
        if not name:
            print(f"[SaveWriter] Error: Invalid save name '{save_name}'")
            return False

        final_dir = self.save_root / name
        staging_dir = self.save_root / f"{name}{TEMP_SUFFIX}"

        try:
            self.save_root.mkdir(parents=True, exist_ok=True)
            shutil.rmtree(staging_dir, ignore_errors=True)
            staging_dir.mkdir()

            self._write_files(city, staging_dir, started_at)

            if final_dir.exists():
                shutil.rmtree(final_dir)
            staging_dir.rename(final_dir)
        except Exception as e:
            print(f"[SaveWriter] Critical Save Failure for '{name}': {e}")
            shutil.rmtree(staging_dir, ignore_errors=True)
            return False

        print(f"[SaveWriter] Saved '{name}' (day {city.day}, {len(city.buildings)} buildings).")
        return True

    def _write_files(self, city: City, folder: Path, started_at: Optional[datetime]):
        snapshot = city.to_snapshot()
        rows = snapshot.pop("buildings")

        pl.DataFrame(rows, schema=BUILDINGS_SCHEMA).write_parquet(folder / BUILDINGS_FILE)

        now = datetime.now()
        meta = {
            "version": SAVE_FORMAT_VERSION,
            "timestamp": now.isoformat(),
            "game_started_at": (started_at or now).isoformat(),
            "city": snapshot,
        }
        (folder / META_FILE).write_bytes(orjson.dumps(meta, option=orjson.OPT_INDENT_2))

    def delete_save(self, save_name: str) -> bool:
        name = sanitize_save_name(save_name)
        target = self.save_root / name
        if not name or not target.is_dir():
            return False
        try:
            shutil.rmtree(target)
        except OSError as e:
            print(f"[SaveWriter] Failed to delete '{name}': {e}")
            return False
        print(f"[SaveWriter] Deleted save '{name}'.")
        return True

    def get_available_saves(self) -> List[Dict[str, Any]]:
        """
        Name, timestamp and day of every readable save, newest first.
        Unreadable saves are left out of the list.
        """
        if not self.save_root.is_dir():
            return []

        saves = []
        for folder in self.save_root.iterdir():
            meta_path = folder / META_FILE
            if folder.name.endswith(TEMP_SUFFIX) or not meta_path.is_file():
                continue
            try:
                meta = orjson.loads(meta_path.read_bytes())
            except (OSError, orjson.JSONDecodeError) as e:
                print(f"[SaveWriter] Skipping unreadable save '{folder.name}': {e}")
                continue
            saves.append({
                "name": folder.name,
                "timestamp": meta.get("timestamp", ""),
                "day": meta.get("city", {}).get("day", 0),
            })

        saves.sort(key=lambda s: s["timestamp"], reverse=True)
        return saves
