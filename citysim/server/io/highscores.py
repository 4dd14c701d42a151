import polars as pl
from dataclasses import dataclass, field, asdict
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from citysim.server.state import City

MAX_HIGHSCORES = 10
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

HIGHSCORE_SCHEMA = {
    "name": pl.String,
    "score": pl.Int64,
    "families": pl.Int64,
    "budget": pl.Int64,
    "satisfaction": pl.Int64,
    "days": pl.Int64,
    "achieved_at": pl.String,
}


def truncating_div(value: int, divisor: int) -> int:
    """Integer division rounding toward zero (-15 / 10 -> -1)."""
    quotient = abs(value) // divisor
    return quotient if value >= 0 else -quotient


def calculate_score(city: City) -> int:
    """
    score = families*10 + budget/10 + satisfaction*5 + day*2
    A pure function of the final city state.
    """
    return (city.families * 10 + truncating_div(city.budget, 10)
            + city.satisfaction * 5 + city.day * 2)


@dataclass
class Highscore:
    name: str
    score: int
    families: int
    budget: int
    satisfaction: int
    days: int
    achieved_at: str = field(default_factory=lambda: datetime.now().strftime(DATE_FORMAT))

    @classmethod
    def from_city(cls, name: str, city: City) -> 'Highscore':
        return cls(
            name=name,
            score=calculate_score(city),
            families=city.families,
            budget=city.budget,
            satisfaction=city.satisfaction,
            days=city.day,
        )

    def __str__(self) -> str:
        return (f"{self.name}: {self.score} points (Families: {self.families}, Budget: ${self.budget}, "
                f"Satisfaction: {self.satisfaction}%, Days: {self.days}) - {self.achieved_at}")


class HighscoreTable:
    """
    Top-N table of finished games, persisted as a TSV file.

    Entries are keyed by name: submitting a new score for an existing name
    replaces the old entry. The table is kept sorted by score (descending)
    and truncated to MAX_HIGHSCORES.
    """

    def __init__(self, path: Path, limit: int = MAX_HIGHSCORES):
        self.path = Path(path)
        self.limit = limit

    def load(self) -> List[Highscore]:
        """
        Entries for display. An unreadable file shows as an empty table.
        """
        try:
            return self._read()
        except Exception as e:
            print(f"[Highscores] Failed to read {self.path.name}: {e}")
            return []

    def submit(self, entry: Highscore) -> bool:
        """
        Adds the entry and rewrites the table. Refuses to write (returns False)
        when the existing file cannot be read, so earlier scores are not lost.
        """
        try:
            entries = [h for h in self._read() if h.name != entry.name]
            entries.append(entry)
            entries.sort(key=lambda h: h.score, reverse=True)
            self._write(entries[:self.limit])
        except Exception as e:
            print(f"[Highscores] Failed to save highscore: {e}")
            return False

        print(f"[Highscores] Saved '{entry.name}' with {entry.score} points.")
        return True

    def rank(self, score: int) -> Optional[int]:
        """
        1-based position the score would take, or None if it would not make the table.
        """
        entries = self.load()
        for i, entry in enumerate(entries):
            if score >= entry.score:
                return i + 1
        if len(entries) < self.limit:
            return len(entries) + 1
        return None

    def _write(self, entries: List[Highscore]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        df = pl.DataFrame([asdict(h) for h in entries], schema=HIGHSCORE_SCHEMA)
        df.write_csv(self.path, separator="\t")

    def _read(self) -> List[Highscore]:
        if not self.path.exists():
            return []
        df = pl.read_csv(self.path, separator="\t", schema=HIGHSCORE_SCHEMA)
        entries = [Highscore(**row) for row in df.to_dicts()]
        return sorted(entries, key=lambda h: h.score, reverse=True)
