from typing import List, Sequence, Tuple, TYPE_CHECKING

from rich.console import Group
from rich.table import Table

from citysim.client.formatter import data_table, event_lines, key_value_table
from citysim.core.buildings import BuildingType
from citysim.core.event_log import DEFAULT_RECENT_LIMIT
from citysim.engine.mechanics.capacity import coverage_ratio
from citysim.server.state import City
from citysim.shared.events import GameEvent

if TYPE_CHECKING:
    from citysim.server.session import GameSession

NOTABLE_EVENTS_SHOWN = 10

# (minimum ratio, label), checked top to bottom.
STATUS_LABELS: Tuple[Tuple[float, str], ...] = (
    (1.0, "[OPTIMAL]"),
    (0.9, "[GOOD]"),
    (0.7, "[ADEQUATE]"),
    (0.5, "[LOW]"),
    (0.3, "[CRITICAL]"),
)
SEVERE_LABEL = "[SEVERE SHORTAGE]"

GAME_OVER_MESSAGES = {
    "bankrupt": "The city went bankrupt.",
    "abandoned": "The city has been abandoned.",
    "max_days": "The term of office has ended.",
}


def capacity_status(ratio: float) -> str:
    for threshold, label in STATUS_LABELS:
        if ratio >= threshold:
            return label
    return SEVERE_LABEL


def _money(value: int) -> str:
    return f"-${-value}" if value < 0 else f"${value}"


def _capacity_rows(city: City) -> List[Tuple[str, str, str, str]]:
    caps = city.capacities()
    families = city.families
    rows = []
    for label, capacity in (
        ("Housing", caps.housing),
        ("Jobs", caps.jobs),
        ("Education", caps.education),
        ("Healthcare", caps.healthcare),
        ("Water", caps.water),
        ("Power", caps.power),
    ):
        ratio = coverage_ratio(capacity, families)
        rows.append((label, f"{capacity}/{families}", f"{ratio:.0%}", capacity_status(ratio)))
    return rows


def building_table(city: City, title: str = "BUILDINGS") -> Table:
    counts = city.building_counts()
    rows = [
        (t.display_name, counts[t], _money(t.upkeep * counts[t]))
        for t in BuildingType
    ]
    return data_table(title, ("Type", "Count", "Upkeep/day"), rows)


def building_catalog() -> Table:
    rows = [
        (t.display_name, _money(t.cost), _money(t.upkeep), t.description)
        for t in BuildingType
    ]
    return data_table("AVAILABLE BUILDINGS", ("Type", "Cost", "Upkeep", "Description"), rows)


def tick_events(events: Sequence[GameEvent], title: str = "RANDOM EVENTS") -> Table:
    rows = [
        (e.day, e.kind.tag, "good" if e.kind.positive else "bad", _money(e.budget_delta), e.kind.description)
        for e in events
    ]
    return data_table(title, ("Day", "Event", "Outcome", "Budget", "What happened"), rows)


def city_stats(city: City) -> Group:
    """
    Full status screen: stats, taxes, buildings, capacities and the tail of the log.
    """
    stats = key_value_table("CITY STATS", [
        ("Day", city.day),
        ("Families", city.families),
        ("Budget", _money(city.budget)),
        ("Satisfaction", f"{city.satisfaction}%"),
        ("Daily income", _money(city.daily_income)),
        ("Daily expenses", _money(city.daily_expenses)),
        ("Net", _money(city.daily_income - city.daily_expenses)),
    ])
    taxes = key_value_table("TAXES", [
        ("Income tax", f"{city.tax_rate:.1%}"),
        ("VAT", f"{city.vat_rate:.1%}"),
    ])
    capacities = data_table("CAPACITIES", ("Service", "Capacity", "Coverage", "Status"), _capacity_rows(city))
    events = event_lines("RECENT EVENTS", city.recent_events(DEFAULT_RECENT_LIMIT))
    return Group(stats, taxes, building_table(city), capacities, events)


def game_summary(session: "GameSession") -> Group:
    city = session.city
    score = session.calculate_score()

    rows = [
        ("Days survived", city.day),
        ("Families", city.families),
        ("Budget", _money(city.budget)),
        ("Satisfaction", f"{city.satisfaction}%"),
        ("Score", score),
    ]
    if session.game_over_reason is not None:
        rows.insert(0, ("Result", GAME_OVER_MESSAGES[session.game_over_reason.value]))
    if session.sandbox_mode:
        rows.append(("Rank", "n/a (sandbox)"))
    else:
        rank = session.highscores.rank(score)
        rows.append(("Rank", f"#{rank}" if rank is not None else "not ranked"))

    notable = session.notable_events()
    shown = notable[:NOTABLE_EVENTS_SHOWN]
    if len(notable) > NOTABLE_EVENTS_SHOWN:
        shown = shown + [f"... and {len(notable) - NOTABLE_EVENTS_SHOWN} more"]

    return Group(
        key_value_table("FINAL STATISTICS", rows),
        building_table(city, title="BUILDINGS CONSTRUCTED"),
        event_lines("NOTABLE EVENTS", shown, empty="Nothing notable happened."),
    )


def highscore_table(session: "GameSession") -> Table:
    rows = [
        (i + 1, h.name, h.score, h.families, _money(h.budget), f"{h.satisfaction}%", h.days, h.achieved_at)
        for i, h in enumerate(session.highscores.load())
    ]
    if not rows:
        rows = [("-", "No highscores yet", "", "", "", "", "", "")]
    return data_table("HIGHSCORES",
                      ("#", "Name", "Score", "Families", "Budget", "Satisfaction", "Days", "Date"),
                      rows)
