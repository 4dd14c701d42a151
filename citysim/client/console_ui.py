from typing import Callable, Dict, List, Optional

from rich.console import Console

from citysim.client import reports
from citysim.client.formatter import event_lines, key_value_table, make_console
from citysim.core.buildings import BuildingType
from citysim.server.session import GameSession, LoadResult
from citysim.shared.actions import ActionBuild, ActionNextDay, ActionSetTax, ActionSetVat

PLAYER_ID = "local_player"
MAX_DAYS_PER_COMMAND = 365

HELP_ROWS = (
    ("build <type>", "Construct a building (see 'buildings')"),
    ("tax <percent>", "Set the income tax rate (0 - 40)"),
    ("vat <percent>", "Set the VAT rate (0 - 25)"),
    ("next [n]", "Advance the simulation by n days (default 1)"),
    ("stats", "Show the city status report"),
    ("log [all|n]", "Show the last n log entries, or the whole log"),
    ("buildings", "List building types with cost and upkeep"),
    ("save <name>", "Save the current game"),
    ("load <name>", "Load a saved game"),
    ("highscores", "Show the highscore table"),
    ("help", "Show this help"),
    ("quit", "End the game"),
)


def parse_percent(text: str) -> float:
    """
    '15', '15%' or '12.5' -> fraction (0.15). Range clamping is left to the City.
    """
    value = text.strip().rstrip("%").strip()
    if not value:
        raise ValueError("A percentage is required")
    return float(value) / 100.0


class ConsoleUI:
    """
    Text front end. Reads commands, turns them into GameActions for the
    session and renders reports with rich.
    """

    def __init__(self,
                 session: GameSession,
                 console: Optional[Console] = None,
                 input_func: Callable[[str], str] = input):
        self.session = session
        self.console = console or make_console()
        self.input_func = input_func
        self.running = True

        self.commands: Dict[str, Callable[[List[str]], None]] = {
            "build": self.cmd_build,
            "tax": self.cmd_tax,
            "vat": self.cmd_vat,
            "next": self.cmd_next,
            "stats": self.cmd_stats,
            "log": self.cmd_log,
            "buildings": self.cmd_buildings,
            "save": self.cmd_save,
            "load": self.cmd_load,
            "highscores": self.cmd_highscores,
            "help": self.cmd_help,
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
        }

    # --- Main loop ---

    def run(self):
        mode = " [bold yellow](SANDBOX)[/bold yellow]" if self.session.sandbox_mode else ""
        self.console.print(f"\n[bold]Welcome to CitySim[/bold]{mode}. Type 'help' for commands.\n")
        self.console.print(reports.city_stats(self.session.city))

        while self.running:
            try:
                line = self.input_func(f"Day {self.session.city.day} > ")
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            self.handle(line)

            if self.session.is_over():
                break

        self.finish()

    def handle(self, line: str):
        parts = line.strip().split()
        if not parts:
            return

        name, args = parts[0].lower(), parts[1:]
        command = self.commands.get(name)
        if command is None:
            self.console.print(f"[red]Unknown command '{name}'. Type 'help' for a list.[/red]")
            return

        try:
            command(args)
        except ValueError as e:
            self.console.print(f"[red]{e}[/red]")

    def finish(self):
        session = self.session
        self.console.print(reports.game_summary(session))

        if session.sandbox_mode:
            return
        if session.highscores.rank(session.calculate_score()) is None:
            return

        try:
            name = self.input_func("New highscore! Enter your name: ").strip()
        except (EOFError, KeyboardInterrupt):
            return
        if name:
            session.save_highscore(name)

    # --- Commands ---

    def cmd_build(self, args: List[str]):
        if not args:
            raise ValueError("Usage: build <type>")
        building_type = BuildingType.parse(" ".join(args))
        if self.session.apply_action(ActionBuild(PLAYER_ID, building_type)):
            self.console.print(f"[green]Built {building_type} for ${building_type.cost}.[/green] "
                               f"Budget: ${self.session.city.budget}")
        else:
            self.console.print(f"[red]Not enough budget for {building_type} "
                               f"(cost ${building_type.cost}, budget ${self.session.city.budget}).[/red]")

    def cmd_tax(self, args: List[str]):
        if not args:
            raise ValueError("Usage: tax <percent>")
        self.session.apply_action(ActionSetTax(PLAYER_ID, parse_percent(args[0])))
        self.console.print(f"Income tax is now {self.session.city.tax_rate:.1%}.")

    def cmd_vat(self, args: List[str]):
        if not args:
            raise ValueError("Usage: vat <percent>")
        self.session.apply_action(ActionSetVat(PLAYER_ID, parse_percent(args[0])))
        self.console.print(f"VAT is now {self.session.city.vat_rate:.1%}.")

    def cmd_next(self, args: List[str]):
        days = int(args[0]) if args else 1
        if not 1 <= days <= MAX_DAYS_PER_COMMAND:
            raise ValueError(f"Days must be between 1 and {MAX_DAYS_PER_COMMAND}")

        start = len(self.session.city.log)
        fired = []
        for _ in range(days):
            running = self.session.apply_action(ActionNextDay(PLAYER_ID))
            fired.extend(self.session.last_tick.events)
            if not running:
                break
            if self.session.is_over():
                break

        city = self.session.city
        new_entries = city.event_log[start:]
        self.console.print(event_lines(f"DAY {city.day}", new_entries, empty="A quiet day."))
        if fired:
            self.console.print(reports.tick_events(fired))
        self.console.print(f"Budget: ${city.budget} | Families: {city.families} | "
                           f"Satisfaction: {city.satisfaction}%")

    def cmd_stats(self, args: List[str]):
        self.console.print(reports.city_stats(self.session.city))

    def cmd_log(self, args: List[str]):
        city = self.session.city
        if args and args[0].lower() == "all":
            entries = city.event_log
        else:
            entries = city.recent_events(int(args[0]) if args else 10)
        self.console.print(event_lines("EVENT LOG", entries))

    def cmd_buildings(self, args: List[str]):
        self.console.print(reports.building_catalog())
        self.console.print(reports.building_table(self.session.city))

    def cmd_save(self, args: List[str]):
        if not args:
            raise ValueError("Usage: save <name>")
        name = " ".join(args)
        if self.session.save_game(name):
            self.console.print(f"[green]Game saved as '{name}'.[/green]")
        else:
            self.console.print(f"[red]Could not save '{name}'.[/red]")

    def cmd_load(self, args: List[str]):
        if not args:
            saves = self.session.writer.get_available_saves()
            rows = [(s["name"], f"Day {s['day']}") for s in saves] or [("No saves found", "")]
            self.console.print(key_value_table("SAVES", rows))
            return

        name = " ".join(args)
        result = self.session.load_game(name)
        if result is LoadResult.OK:
            self.console.print(f"[green]Loaded '{name}' (day {self.session.city.day}).[/green]")
        elif result is LoadResult.NOT_FOUND:
            self.console.print(f"[red]No save named '{name}'.[/red]")
        else:
            self.console.print(f"[red]Save '{name}' is corrupted and was not loaded.[/red]")

    def cmd_highscores(self, args: List[str]):
        self.console.print(reports.highscore_table(self.session))

    def cmd_help(self, args: List[str]):
        self.console.print(key_value_table("COMMANDS", HELP_ROWS))

    def cmd_quit(self, args: List[str]):
        self.running = False
