"""
Dungeon Engine Package

This package contains the core components of the text adventure:
- GameCore: World graph of rooms, exits, locked doors and the item catalogue
- GameState: The player, current room, score and session signal
- WorldLoader: Canonical world construction from the JSON world setup
- CombatResolver: Turn-based fights against a room's monster
- SaveLoad: Save slot and scoreboard ledger
- Dispatcher: Command parsing and execution over a per-session registry
- GameSession: Everything above wired together for a driver
"""

from Dungeon.character import Monster, Player
from Dungeon.combat import CombatOutcome, CombatReport, CombatResolver
from Dungeon.commands import CommandDefinition, CommandRegistry, build_registry
from Dungeon.config import GameSettings, load_settings
from Dungeon.core import GameCore
from Dungeon.dispatcher import CommandResult, Dispatcher
from Dungeon.errors import GameError, InvalidCommandError, PersistenceError
from Dungeon.item import Item, Key, Potion, Weapon, apply_item
from Dungeon.persistence import SaveLoad, ScoreEntry
from Dungeon.room import Room
from Dungeon.session import GameSession
from Dungeon.state_manager import GameState, SessionSignal
from Dungeon.world_loader import WorldLoader, load_world

__all__ = [
    'CombatOutcome',
    'CombatReport',
    'CombatResolver',
    'CommandDefinition',
    'CommandRegistry',
    'CommandResult',
    'Dispatcher',
    'GameCore',
    'GameError',
    'GameSession',
    'GameSettings',
    'GameState',
    'InvalidCommandError',
    'Item',
    'Key',
    'Monster',
    'PersistenceError',
    'Player',
    'Potion',
    'Room',
    'SaveLoad',
    'ScoreEntry',
    'SessionSignal',
    'Weapon',
    'WorldLoader',
    'apply_item',
    'build_registry',
    'load_settings',
    'load_world',
]
