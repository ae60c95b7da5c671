"""
Dungeon Mini - Terminal Entry Point

This module runs the game as a line-based interpreter on the terminal.
It owns the process lifecycle: the engine only reports when the game is
over or the player asked to leave, and this loop decides what to do next.
"""

import argparse
import sys

from Dungeon import GameSession, SessionSignal, load_settings
from Dungeon.config import DEFAULT_SETTINGS_PATH
from Dungeon.logging_config import configure_logging


def print_banner():
    print("=" * 40)
    print(" DUNGEON MINI".center(40))
    print(" Underground adventures".center(40))
    print("=" * 40)
    print("Type 'help' for the list of commands.")
    print()


def ask_yes_no(prompt: str, read_line=input) -> bool:
    try:
        answer = read_line(prompt)
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def run(session: GameSession, read_line=input, write=print) -> SessionSignal:
    """
    Executes the read-dispatch-print loop until the player leaves, dies without
    reloading, or the input runs out.
    """
    while True:
        try:
            line = read_line("> ")
        except EOFError:
            return session.state.status
        except KeyboardInterrupt:
            write("")
            return SessionSignal.USER_EXIT

        result = session.handle(line)
        for text in result.lines:
            write(text)

        if result.signal == SessionSignal.USER_EXIT:
            return result.signal

        if result.signal == SessionSignal.GAME_OVER:
            write(result.reason or "Game over.")
            if not ask_yes_no("Load your last save? (y/n) ", read_line):
                return result.signal
            reload = session.handle("load")
            for text in reload.lines:
                write(text)
            if reload.signal != SessionSignal.RUNNING:
                return reload.signal


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play Dungeon Mini in the terminal.")
    parser.add_argument("--settings", default=DEFAULT_SETTINGS_PATH, help="Path to the settings JSON file")
    parser.add_argument("--log-level", default=None, help="Override the configured log level")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    configure_logging(args.log_level or settings.log_level, settings.log_file)

    print_banner()
    session = GameSession(settings)
    print(session.state.current.describe())

    signal = run(session)
    return 1 if signal == SessionSignal.GAME_OVER else 0


if __name__ == "__main__":
    sys.exit(main())
