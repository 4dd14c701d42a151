from typing import Iterable, Iterator, List

DEFAULT_RECENT_LIMIT = 10


class EventLog:
    """
    Append-only, day-stamped record of simulation events owned by a City.

    Entries are never edited or removed. Consumers that only need the tail of
    the log use `recent()`, which returns at most `limit` entries in
    chronological order.
    """

    def __init__(self, entries: Iterable[str] = ()):
        self._entries: List[str] = list(entries)

    def record(self, day: int, message: str) -> str:
        """Stamps `message` with the given day and appends it."""
        entry = f"Day {day}: {message}"
        self._entries.append(entry)
        return entry

    def recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[str]:
        if limit <= 0:
            return []
        return self._entries[-limit:]

    def matching(self, tags: Iterable[str]) -> List[str]:
        """Returns every entry containing at least one of the given substrings."""
        tags = tuple(tags)
        return [e for e in self._entries if any(tag in e for tag in tags)]

    def to_list(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> str:
        return self._entries[index]
