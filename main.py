import argparse

from citysim.client.console_ui import ConsoleUI
from citysim.core.paths import ProjectPaths
from citysim.server.session import GameSession
from citysim.shared.config import GameConfig


def main():
    parser = argparse.ArgumentParser(description="CitySim - turn-based city management")
    parser.add_argument("--config", type=str, help="Path to a config.toml.", default=None)
    parser.add_argument("--seed", type=int, help="Seed for the random events.", default=None)
    parser.add_argument("--sandbox", action="store_true", help="Unlimited play, no game over or highscores.")
    args = parser.parse_args()

    print("CitySim starting...")

    config = GameConfig(ProjectPaths.root(), config_file=args.config or ProjectPaths.config_file())
    if args.sandbox:
        config.sandbox_mode = True
    config.ensure_user_dirs()

    session = GameSession.create_local(config, seed=args.seed)
    ConsoleUI(session).run()


if __name__ == "__main__":
    main()
