import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from .errors import InvalidCommandError
from .item import BaseItem
from .logging_config import get_logger
from .state_manager import GameState

logger = get_logger(__name__)


class CombatOutcome(str, Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"


@dataclass
class CombatReport:
    outcome: CombatOutcome
    rounds: int
    loot: BaseItem | None = None
    lines: list[str] = field(default_factory=list)


class CombatResolver:
    """
    Turn-based HP exchange between the player and the monster of the current room.

    Each round the player strikes first; the monster only answers if it survived.
    A win clears the room's monster and may drop a potion; a loss only marks the
    session as over, the driver decides what to do with it.
    """

    def __init__(self, rng: random.Random | None = None, sleep: Callable[[float], None] = time.sleep):
        self.rng = rng if rng is not None else random.Random()
        self.sleep = sleep

    def fight(self, state: GameState) -> CombatReport:
        room = state.current
        player = state.player
        monster = room.monster
        settings = state.settings

        if monster is None:
            raise InvalidCommandError("There is no monster in this room.")
        if player.attack <= 0 and monster.level <= 0:
            raise InvalidCommandError(f"Neither you nor {monster.name} can land a blow.")

        lines = [f"The fight with {monster.name} begins!"]
        rounds = 0

        while True:
            rounds += 1

            # Player's turn
            monster.hp -= player.attack
            lines.append(f"You hit {monster.name} for {player.attack}. Monster HP: {max(monster.hp, 0)}")

            if not monster.is_alive:
                lines.append(f"{monster.name} is defeated!")
                room.monster = None
                state.add_score(settings.victory_bonus)

                loot = None
                if self.rng.random() < settings.loot_chance:
                    loot = settings.loot_potion.model_copy()
                    room.items.append(loot)
                    lines.append(f"{monster.name} dropped: {loot.name}")

                logger.info("%s defeated %s in %d round(s)", player.name, monster.name, rounds)
                return CombatReport(CombatOutcome.VICTORY, rounds, loot, lines)

            # Monster's turn
            player.hp -= monster.level
            lines.append(f"{monster.name} strikes back for {monster.level}. Your HP: {max(player.hp, 0)}")

            if not player.is_alive:
                lines.append("You have fallen! Game over.")
                state.end_game(f"{player.name} was slain by {monster.name}.")
                logger.info("%s was slain by %s after %d round(s)", player.name, monster.name, rounds)
                return CombatReport(CombatOutcome.DEFEAT, rounds, None, lines)

            if settings.combat_round_delay > 0:
                self.sleep(settings.combat_round_delay)
