from enum import Enum

from .character import Player
from .config import GameSettings
from .core import GameCore
from .errors import InvalidCommandError
from .item import BaseItem, apply_item
from .room import Room


class SessionSignal(str, Enum):
    """Outer signal handed back to the driver after every command."""

    RUNNING = "running"
    GAME_OVER = "game_over"
    USER_EXIT = "user_exit"


class GameState:
    """
    Owns the mutable state of one session: the player, the room they stand in and the score.
    Acts as the primary interface command handlers use to perceive and change the world.
    """

    def __init__(self, game: GameCore, player: Player, current: Room | None = None,
                 settings: GameSettings | None = None):
        self.game = game
        self.player = player
        self.current: Room = current if current is not None else game.start_room
        self.settings = settings if settings is not None else GameSettings()
        self.score: int = 0
        self.status: SessionSignal = SessionSignal.RUNNING
        self.reason: str | None = None

    # --- Score ---

    def add_score(self, points: int):
        self.score = max(0, self.score + points)

    def set_score(self, value: int):
        if value < 0:
            raise ValueError(f"Score must be non-negative, got {value}.")
        self.score = value

    # --- Session status ---

    @property
    def is_running(self) -> bool:
        return self.status == SessionSignal.RUNNING

    def end_game(self, reason: str):
        """Marks the session as lost. The driver decides what happens next."""
        self.status = SessionSignal.GAME_OVER
        self.reason = reason

    def request_exit(self):
        self.status = SessionSignal.USER_EXIT
        self.reason = "Player left the dungeon."

    def resume(self):
        self.status = SessionSignal.RUNNING
        self.reason = None

    def replace_world(self, game: GameCore, current: Room):
        """Swaps in a freshly built world, e.g. after loading a save."""
        self.game = game
        self.current = current

    # --- Movement ---

    def move_player(self, direction: str) -> Room:
        direction = direction.lower()
        destination = self.current.neighbors.get(direction)
        if destination is None:
            raise InvalidCommandError(f"There is no path to the {direction}.")

        if self.current.is_door_locked(direction):
            raise InvalidCommandError(f"The door to the {direction} is locked. You need a key!")

        self.current = destination
        return destination

    # --- Items ---

    def take_item(self, name: str) -> BaseItem:
        """Moves an item from the current room into the inventory."""
        room = self.current
        item = room.find_item(name)
        if item is None:
            if not room.items:
                raise InvalidCommandError("There are no items in this room.")
            raise InvalidCommandError(
                f"Item '{name}' not found. Available items: {', '.join(room.item_names())}"
            )

        room.remove_item(item)
        self.player.add_item(item)
        return item

    def find_inventory_item(self, name: str) -> BaseItem:
        item = self.player.find_item(name)
        if item is None:
            if not self.player.inventory:
                raise InvalidCommandError("Your inventory is empty.")
            raise InvalidCommandError(
                f"Item '{name}' not found in inventory. You carry: {', '.join(self.player.inventory_names())}"
            )
        return item

    def use_item(self, name: str) -> list[str]:
        item = self.find_inventory_item(name)
        return [f"Using {item.name}."] + apply_item(item, self)

    # --- Views ---

    def snapshot(self) -> dict:
        """Serialisable view of the session for external drivers."""
        return {
            "player": {
                "name": self.player.name,
                "hp": self.player.hp,
                "attack": self.player.attack,
                "inventory": [item.model_dump() for item in self.player.inventory],
            },
            "room": self.current.name,
            "score": self.score,
            "status": self.status.value,
            "reason": self.reason,
        }
