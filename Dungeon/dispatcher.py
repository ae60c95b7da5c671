import re
from dataclasses import dataclass, field

from .commands import CommandRegistry
from .errors import GameError, InvalidCommandError
from .logging_config import get_logger
from .state_manager import GameState, SessionSignal

logger = get_logger(__name__)

# Russian JCUKEN keys mapped to the QWERTY keys in the same position.
LAYOUT_MAP: dict[str, str] = {
    'й': 'q', 'ц': 'w', 'у': 'e', 'к': 'r', 'е': 't', 'н': 'y', 'г': 'u', 'ш': 'i',
    'щ': 'o', 'з': 'p', 'х': '[', 'ъ': ']', 'ф': 'a', 'ы': 's', 'в': 'd', 'а': 'f',
    'п': 'g', 'р': 'h', 'о': 'j', 'л': 'k', 'д': 'l', 'ж': ';', 'э': "'",
    'я': 'z', 'ч': 'x', 'с': 'c', 'м': 'v', 'и': 'b', 'т': 'n', 'ь': 'm', 'б': ',',
    'ю': '.',
}
CYRILLIC_WORD = re.compile(r"[а-яё]{2,}")


def is_layout_mistake(token: str) -> bool:
    """A token typed entirely on the Russian layout, at least two letters long."""
    return CYRILLIC_WORD.fullmatch(token) is not None


def fix_keyboard_layout(token: str) -> str:
    return "".join(LAYOUT_MAP.get(char, char) for char in token)


@dataclass
class CommandResult:
    """Outcome of one input line, handed back to the driver."""

    lines: list[str] = field(default_factory=list)
    signal: SessionSignal = SessionSignal.RUNNING
    reason: str | None = None
    command: str | None = None
    error: str | None = None
    category: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "lines": list(self.lines),
            "signal": self.signal.value,
            "reason": self.reason,
            "error": self.error,
            "category": self.category,
        }


class Dispatcher:
    """
    Turns input lines into command executions against one GameState.

    Every error is caught and reported in the result; none of them ends the session.
    Only the state's own signal (game over, exit) tells the driver to stop.
    """

    def __init__(self, state: GameState, registry: CommandRegistry):
        self.state = state
        self.registry = registry

    def dispatch(self, line: str) -> CommandResult:
        tokens = line.split()
        if not tokens:
            return self._result([])

        name = tokens[0].lower()
        args = tokens[1:]

        try:
            definition = self.registry.get(name)
            if definition is None:
                raise InvalidCommandError(self._unknown_command_message(name))

            lines = definition.execute(self.state, args)
            if self.state.is_running:
                self.state.add_score(self.state.settings.command_score)
            return self._result(lines, command=name)

        except GameError as e:
            logger.debug("Command '%s' failed (%s): %s", name, e.category, e)
            return self._result([f"Error: {e}"], command=name, error=str(e), category=e.category)

        except Exception as e:
            logger.exception("Unexpected error while running '%s'", line.strip())
            message = f"Unexpected error: {type(e).__name__}: {e}"
            return self._result([message], command=name, error=message, category="internal")

    def _unknown_command_message(self, name: str) -> str:
        if is_layout_mistake(name):
            guess = fix_keyboard_layout(name)
            if guess in self.registry:
                return (f"Command '{name}' not found. Did you mean '{guess}'? "
                        f"Check your keyboard layout!")
        return f"Unknown command: {name}"

    def _result(self, lines: list[str], **kwargs) -> CommandResult:
        return CommandResult(lines=lines, signal=self.state.status, reason=self.state.reason, **kwargs)
