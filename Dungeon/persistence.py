"""
Save slot and scoreboard.

The save file is line oriented, one 'tag;payload' record per line:

    player;Hero;20;5
    inventory;Potion:Small Potion,Key:Old Key
    room;Forest
    score;12

Tags are optional and order independent; unknown tags are ignored.
The scoreboard is an append-only CSV ledger with the header 'ts,player,score'.
"""

import csv
import os
from dataclasses import dataclass
from datetime import datetime

from .config import GameSettings
from .core import GameCore
from .errors import PersistenceError
from .item import ITEM_KINDS, BaseItem, parse_item
from .logging_config import get_logger
from .state_manager import GameState
from .world_loader import WorldLoader

logger = get_logger(__name__)

SCOREBOARD_HEADER = ["ts", "player", "score"]


@dataclass(frozen=True)
class ScoreEntry:
    player: str
    score: int


@dataclass
class SaveData:
    """Decoded contents of the save slot; None marks a missing record."""

    player: tuple[str, int, int] | None
    inventory: list[tuple[str, str]]
    room: str | None
    score: int | None


def encode_state(state: GameState) -> list[str]:
    """Returns the four save records describing the state."""
    player = state.player
    inventory = ",".join(item.label() for item in player.inventory)
    return [
        f"player;{player.name};{player.hp};{player.attack}",
        f"inventory;{inventory}",
        f"room;{state.current.name}",
        f"score;{state.score}",
    ]


def parse_records(lines) -> dict[str, str]:
    """Splits 'tag;payload' lines into a mapping. Later records override earlier ones."""
    records: dict[str, str] = {}
    for line in lines:
        line = line.rstrip("\r\n")
        tag, sep, payload = line.partition(";")
        if sep:
            records[tag.strip()] = payload
    return records


def decode_records(records: dict[str, str]) -> SaveData:
    """
    Interprets the recognised records. Raises ValueError on malformed numbers or a dead player.
    Inventory entries without a 'Kind:Name' shape or with an unknown kind are dropped.
    """
    player = None
    if "player" in records:
        parts = records["player"].rsplit(";", 2)
        if len(parts) != 3:
            raise ValueError(f"Malformed player record: {records['player']!r}")
        name, hp, attack = parts
        player = (name, int(hp), int(attack))
        if player[1] <= 0:
            raise ValueError(f"Saved player has no HP left: {player[1]}")

    inventory: list[tuple[str, str]] = []
    encoded = records.get("inventory", "")
    if encoded.strip():
        for token in encoded.split(","):
            kind, sep, name = token.partition(":")
            kind = kind.strip()
            if not sep or not name or kind not in ITEM_KINDS:
                continue
            inventory.append((kind, name))

    room = records.get("room")
    room = room.strip() if room is not None else None

    score = None
    if "score" in records:
        score = int(records["score"])
        if score < 0:
            raise ValueError(f"Negative score in save file: {score}")

    return SaveData(player, inventory, room, score)


class SaveLoad:
    """
    Reads and writes the single save slot and the scoreboard ledger.
    Loading rebuilds the world through the same WorldLoader that booted the session.
    """

    def __init__(self, loader: WorldLoader, settings: GameSettings | None = None):
        self.loader = loader
        self.settings = settings if settings is not None else loader.settings

    @property
    def save_path(self) -> str:
        return self.settings.save_path

    @property
    def scores_path(self) -> str:
        return self.settings.scores_path

    # --- Save ---

    def save(self, state: GameState) -> list[str]:
        records = encode_state(state)
        try:
            with open(self.save_path, 'w', encoding='utf-8') as f:
                for record in records:
                    f.write(record + "\n")
        except OSError as e:
            raise PersistenceError(f"Could not save the game: {e}") from e

        logger.info("Game saved to %s (score %d)", os.path.abspath(self.save_path), state.score)
        lines = [f"Game saved to {os.path.abspath(self.save_path)}"]

        if not self.write_score(state.player.name, state.score):
            lines.append("Warning: the score could not be recorded on the scoreboard.")
        return lines

    def write_score(self, player: str, score: int) -> bool:
        """Appends one ledger row, writing the header first when the ledger is new or empty."""
        try:
            needs_header = not os.path.exists(self.scores_path) or os.path.getsize(self.scores_path) == 0
            with open(self.scores_path, 'a', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                if needs_header:
                    writer.writerow(SCOREBOARD_HEADER)
                writer.writerow([datetime.now().isoformat(timespec="seconds"), player, score])
        except OSError as e:
            logger.error("Could not write score to %s: %s", self.scores_path, e)
            return False
        return True

    # --- Load ---

    def load(self, state: GameState) -> list[str]:
        if not os.path.exists(self.save_path):
            return ["No saved game found."]

        try:
            with open(self.save_path, 'r', encoding='utf-8') as f:
                data = decode_records(parse_records(f))
        except OSError as e:
            raise PersistenceError(f"Could not load the game: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"The save file is corrupted: {e}") from e

        game_core = self.loader.build_core()

        if data.room is not None and game_core.has_room(data.room):
            current = game_core.get_room(data.room)
        else:
            if data.room is not None:
                logger.warning("Saved room '%s' does not exist, falling back to %s",
                               data.room, game_core.start_room_name)
            current = game_core.start_room

        inventory = [self.restore_item(game_core, kind, name) for kind, name in data.inventory]
        self.claim_from_rooms(game_core, inventory)

        name, hp, attack = data.player if data.player is not None else (
            self.settings.default_player.name,
            self.settings.default_player.hp,
            self.settings.default_player.attack,
        )
        player = state.player
        player.name = name
        player.hp = hp
        player.attack = attack
        player.inventory.clear()
        player.inventory.extend(inventory)

        state.replace_world(game_core, current)
        state.set_score(data.score if data.score is not None else 0)
        state.resume()

        logger.info("Game loaded from %s: %s in %s, score %d",
                    os.path.abspath(self.save_path), player.name, current.name, state.score)
        return [f"Game loaded! Room: {current.name}"]

    def restore_item(self, game_core: GameCore, kind: str, name: str) -> BaseItem:
        """
        Rebuilds a saved item. Payloads are not stored in the save file, so the world's own
        definition is used when it knows the item, and fixed defaults otherwise.
        """
        item = game_core.catalogue_item(kind, name)
        if item is not None:
            return item
        defaults = {
            "Potion": {"heal": self.settings.default_potion_heal},
            "Weapon": {"bonus": self.settings.default_weapon_bonus},
            "Key": {},
        }
        if kind not in defaults:
            raise KeyError(f"Unknown item kind '{kind}'.")
        return parse_item({"kind": kind, "name": name, **defaults[kind]})

    @staticmethod
    def claim_from_rooms(game_core: GameCore, inventory: list[BaseItem]):
        """
        Removes from the freshly built rooms one copy of every item the player already carries,
        so no item ends up owned by both a room and the inventory.
        """
        for item in inventory:
            for room in game_core.rooms.values():
                match = next((present for present in room.items
                              if present.kind == item.kind and present.name.lower() == item.name.lower()), None)
                if match is not None:
                    room.remove_item(match)
                    break

    # --- Scoreboard ---

    def read_scores(self, limit: int | None = None) -> list[ScoreEntry]:
        """Top scores from the ledger, highest first; ties keep ledger order."""
        limit = limit if limit is not None else self.settings.scoreboard_limit
        if not os.path.exists(self.scores_path):
            return []

        entries: list[ScoreEntry] = []
        try:
            with open(self.scores_path, 'r', newline='', encoding='utf-8') as f:
                reader = csv.reader(f)
                next(reader, None)
                for line_no, row in enumerate(reader, start=2):
                    if not row:
                        continue
                    try:
                        entries.append(ScoreEntry(row[1], int(row[2])))
                    except (IndexError, ValueError):
                        logger.warning("Skipping malformed scoreboard row %d in %s: %r",
                                       line_no, self.scores_path, row)
        except OSError as e:
            raise PersistenceError(f"Could not read the scoreboard: {e}") from e

        entries.sort(key=lambda entry: entry.score, reverse=True)
        return entries[:limit]

    def print_scores(self) -> list[str]:
        entries = self.read_scores()
        if not entries:
            return ["No scores yet."]
        lines = [f"Leaderboard (top {self.settings.scoreboard_limit}):"]
        for rank, entry in enumerate(entries, start=1):
            lines.append(f"{rank:>2}. {entry.player} - {entry.score}")
        return lines
