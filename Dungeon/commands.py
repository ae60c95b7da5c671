from collections import Counter
from typing import Any, Callable

from pydantic import BaseModel, Field, ValidationError, create_model

from .combat import CombatResolver
from .errors import InvalidCommandError
from .persistence import SaveLoad
from .state_manager import GameState

Handler = Callable[[GameState, BaseModel], list[str]]


class CommandDefinition:
    """
    Defines a command token, its handler and the shape of its arguments.
    The argument schema is a pydantic model generated at runtime from 'fields'.

    Field options:
        description: Shown in help and used as the error when the argument is missing.
        arity: "one" takes exactly one token, "rest" joins every remaining token with spaces.
    """

    def __init__(self, name: str, handler: Handler, description: str, fields: dict | None = None):
        self.name = name
        self.handler = handler
        self.description = description
        self.fields = fields or {}
        self.schema = self.build_schema()

    def build_schema(self) -> type[BaseModel]:
        pydantic_fields: dict[str, Any] = {}
        for field_name, field_def in self.fields.items():
            pydantic_fields[field_name] = (
                field_def.get("type", str),
                Field(min_length=1, description=field_def.get("description", "")),
            )
        return create_model(f"{self.name.capitalize()}Command", **pydantic_fields)

    @property
    def usage(self) -> str:
        parts = [self.name]
        for field_name, field_def in self.fields.items():
            suffix = "..." if field_def.get("arity") == "rest" else ""
            parts.append(f"<{field_name}{suffix}>")
        return " ".join(parts)

    def parse_args(self, tokens: list[str]) -> BaseModel:
        """Binds argument tokens to the schema; commands without fields ignore extra tokens."""
        values: dict[str, str] = {}
        for field_name, field_def in self.fields.items():
            missing = field_def.get("description", f"Missing argument: {field_name}")
            if field_def.get("arity") == "rest":
                if not tokens:
                    raise InvalidCommandError(missing)
                values[field_name] = " ".join(tokens)
            else:
                if len(tokens) != 1:
                    raise InvalidCommandError(f"{missing} Usage: {self.usage}")
                values[field_name] = tokens[0]

        try:
            return self.schema.model_validate(values)
        except ValidationError as e:
            raise InvalidCommandError(f"Invalid arguments for '{self.name}'. Usage: {self.usage}") from e

    def execute(self, state: GameState, tokens: list[str]) -> list[str]:
        return self.handler(state, self.parse_args(tokens))


class CommandRegistry:
    """Maps lowercase command tokens to their definitions. One registry per session."""

    def __init__(self):
        self._commands: dict[str, CommandDefinition] = {}

    def register(self, definition: CommandDefinition):
        key = definition.name.lower()
        if key in self._commands:
            raise ValueError(f"Command '{key}' is already registered.")
        self._commands[key] = definition

    def get(self, name: str) -> CommandDefinition | None:
        return self._commands.get(name.lower())

    def definitions(self) -> list[CommandDefinition]:
        return list(self._commands.values())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._commands


# --- Handlers ---

def look(state: GameState, args: BaseModel) -> list[str]:
    return [state.current.describe()]


def move(state: GameState, args: BaseModel) -> list[str]:
    room = state.move_player(args.direction)
    return [f"You enter {room.name}.", room.describe()]


def take(state: GameState, args: BaseModel) -> list[str]:
    item = state.take_item(args.name)
    return [f"Taken: {item.name}"]


def inventory(state: GameState, args: BaseModel) -> list[str]:
    """Groups the inventory by variant, then by name, both in lexical order."""
    items = state.player.inventory
    if not items:
        return ["Your inventory is empty."]

    counts = Counter((item.kind, item.name) for item in items)
    return [f"- {kind} ({count}): {name}" for (kind, name), count in sorted(counts.items())]


def use(state: GameState, args: BaseModel) -> list[str]:
    return state.use_item(args.name)


def leave(state: GameState, args: BaseModel) -> list[str]:
    state.request_exit()
    return ["Farewell, hero! The dungeons await your return..."]


def build_registry(persistence: SaveLoad, resolver: CombatResolver | None = None) -> CommandRegistry:
    """
    Builds the command table of one session.
    Commands that need collaborators (combat, persistence) close over them here.
    """
    resolver = resolver if resolver is not None else CombatResolver()
    registry = CommandRegistry()

    def fight(state: GameState, args: BaseModel) -> list[str]:
        return resolver.fight(state).lines

    def save(state: GameState, args: BaseModel) -> list[str]:
        return persistence.save(state)

    def load(state: GameState, args: BaseModel) -> list[str]:
        return persistence.load(state)

    def scores(state: GameState, args: BaseModel) -> list[str]:
        return persistence.print_scores()

    def show_help(state: GameState, args: BaseModel) -> list[str]:
        width = max(len(d.usage) for d in registry.definitions())
        lines = ["Available commands:"]
        lines.extend(f"  {d.usage:<{width}}  {d.description}" for d in registry.definitions())
        return lines

    registry.register(CommandDefinition("help", show_help, "Show this list"))
    registry.register(CommandDefinition("look", look, "Look around the room"))
    registry.register(CommandDefinition(
        "move", move, "Walk through an exit",
        fields={"direction": {"description": "Specify a direction, e.g. north, south, east, west.", "arity": "one"}},
    ))
    registry.register(CommandDefinition(
        "take", take, "Pick up an item",
        fields={"name": {"description": "Specify an item name, e.g. take Small Potion.", "arity": "rest"}},
    ))
    registry.register(CommandDefinition("inventory", inventory, "Show your inventory"))
    registry.register(CommandDefinition(
        "use", use, "Use an item from your inventory",
        fields={"name": {"description": "Specify an item name, e.g. use Small Potion.", "arity": "rest"}},
    ))
    registry.register(CommandDefinition("fight", fight, "Fight the monster in the room"))
    registry.register(CommandDefinition("save", save, "Save the game"))
    registry.register(CommandDefinition("load", load, "Load the saved game"))
    registry.register(CommandDefinition("scores", scores, "Show the leaderboard"))
    registry.register(CommandDefinition("exit", leave, "Leave the game"))
    return registry
