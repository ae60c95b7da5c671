"""
Dungeon - World Loader

This module owns the one canonical world-construction routine.
It reads the world setup file, validates it, and builds the GameCore,
the player and the GameState. Loading a save rebuilds the world through
the same routine, so a restored game always sees the full topology.
"""

import json
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .character import Monster, Player
from .config import DEFAULT_WORLD_CONFIG_PATH, GameSettings, resolve_config_path
from .core import GameCore
from .item import Item
from .logging_config import get_logger
from .room import Room
from .state_manager import GameState

logger = get_logger(__name__)


class MonsterSetup(BaseModel):
    name: str = Field(min_length=1)
    level: int = Field(ge=0, description="Damage dealt per round")
    hp: int = Field(gt=0)


class PlayerSetup(BaseModel):
    name: str = Field(min_length=1)
    hp: int = Field(gt=0)
    attack: int = Field(ge=0)


class RoomSetup(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    items: list[Item] = Field(default_factory=list)
    monster: Optional[MonsterSetup] = None


class ExitSetup(BaseModel):
    """A directed edge. 'reverse' adds the way back explicitly."""

    source: str = Field(alias="from")
    direction: str = Field(min_length=1)
    target: str = Field(alias="to")
    reverse: Optional[str] = None
    locked: bool = False


class WorldSetup(BaseModel):
    world_name: str = "Dungeon"
    player: PlayerSetup
    start_room: str
    rooms: list[RoomSetup]
    exits: list[ExitSetup] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> "WorldSetup":
        names = [room.name for room in self.rooms]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate room names: {', '.join(duplicates)}")
        if self.start_room not in names:
            raise ValueError(f"Start room '{self.start_room}' is not defined.")
        for edge in self.exits:
            for endpoint in (edge.source, edge.target):
                if endpoint not in names:
                    raise ValueError(f"Exit {edge.source} -{edge.direction}-> {edge.target} references unknown room '{endpoint}'.")
        return self


def build_world(setup: WorldSetup) -> GameCore:
    """
    Builds a fresh GameCore from a validated setup.
    Every call returns brand new rooms, items and monsters.
    """
    game_core = GameCore(world_name=setup.world_name)

    for room_setup in setup.rooms:
        game_core.add_room(Room(room_setup.name, room_setup.description))

    for room_setup in setup.rooms:
        for item in room_setup.items:
            game_core.place_item(room_setup.name, item.model_copy())
        if room_setup.monster is not None:
            m = room_setup.monster
            game_core.place_monster(room_setup.name, Monster(m.name, m.level, m.hp))

    for edge in setup.exits:
        direction = edge.direction.lower()
        reverse = edge.reverse.lower() if edge.reverse else None
        game_core.connect(edge.source, direction, edge.target, reverse=reverse)
        if edge.locked:
            game_core.lock(edge.source, direction)

    game_core.start_room_name = setup.start_room
    return game_core


class WorldLoader:
    """
    Orchestrates the loading of a dungeon from its JSON world setup.
    """

    def __init__(self, world_config_path: str = DEFAULT_WORLD_CONFIG_PATH, settings: GameSettings | None = None):
        """
        Args:
            world_config_path: Path to the world setup file, relative to the project root.
            settings: Session settings handed to the GameState.
        """
        self.world_config_path = world_config_path
        self.settings = settings if settings is not None else GameSettings(world_config=world_config_path)
        self.setup: WorldSetup | None = None

    def load_world_config(self) -> WorldSetup:
        """
        Reads and validates the world setup file. The result is cached for later rebuilds.
        """
        if self.setup is None:
            with open(resolve_config_path(self.world_config_path), 'r', encoding='utf-8') as f:
                data = json.load(f)
            self.setup = WorldSetup.model_validate(data)
        return self.setup

    def build_core(self) -> GameCore:
        setup = self.load_world_config()
        game_core = build_world(setup)
        # The loot potion is part of the world's item vocabulary even though no room starts with it.
        game_core.register_item(self.settings.loot_potion)
        return game_core

    def create_player(self) -> Player:
        template = self.load_world_config().player
        return Player(template.name, template.hp, template.attack)

    def load_world(self) -> GameState:
        """
        Executes the full boot sequence.

        Workflow:
        1. Parse and validate the world setup.
        2. Build rooms, exits, locks, items and monsters.
        3. Create the player at the start room.
        """
        game_core = self.build_core()
        player = self.create_player()
        state = GameState(game_core, player, settings=self.settings)
        logger.info("World '%s' loaded: %d rooms, start at %s",
                    game_core.world_name, len(game_core.rooms), game_core.start_room_name)
        return state


def load_world(settings: GameSettings | None = None) -> tuple[GameState, WorldLoader]:
    """
    Convenience wrapper to boot a session using a functional interface.
    Returns the state and the loader, which the persistence layer needs to rebuild the world.
    """
    settings = settings if settings is not None else GameSettings()
    loader = WorldLoader(settings.world_config, settings)
    return loader.load_world(), loader
