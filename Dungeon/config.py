import json
import os

from pydantic import BaseModel, Field

from .item import Potion

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_SETTINGS_PATH = "Configs/settings.json"
DEFAULT_WORLD_CONFIG_PATH = "Configs/world_setup.json"


def resolve_config_path(path: str) -> str:
    """
    Resolves a configuration path.
    Relative paths are taken relative to the project root (the parent of Dungeon/).
    """
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


class PlayerTemplate(BaseModel):
    name: str = Field("Hero", min_length=1)
    hp: int = 10
    attack: int = 3


class GameSettings(BaseModel):
    """
    Tunable rules and file locations for a session.
    Save and scoreboard paths are relative to the working directory.
    """

    save_path: str = Field("save.txt", description="Single save slot, overwritten on every save")
    scores_path: str = Field("scores.csv", description="Append-only scoreboard ledger")
    world_config: str = Field(DEFAULT_WORLD_CONFIG_PATH, description="World setup used for bootstrap and load")

    combat_round_delay: float = Field(0.0, ge=0, description="Cosmetic pause between combat rounds, in seconds")
    loot_chance: float = Field(0.5, ge=0, le=1, description="Chance a defeated monster drops the loot potion")
    loot_potion: Potion = Field(default_factory=lambda: Potion(name="Dropped Potion", heal=3))
    victory_bonus: int = 10
    command_score: int = 1
    scoreboard_limit: int = Field(10, ge=1)

    # Fallbacks for incomplete save files
    default_player: PlayerTemplate = Field(default_factory=PlayerTemplate)
    default_potion_heal: int = 5
    default_weapon_bonus: int = 3

    log_level: str = "WARNING"
    log_file: str | None = None


def load_settings(path: str = DEFAULT_SETTINGS_PATH) -> GameSettings:
    """
    Loads game settings from a JSON file.
    A missing file yields the defaults; an invalid one raises pydantic's ValidationError.
    """
    config_path = resolve_config_path(path)
    if not os.path.exists(config_path):
        return GameSettings()

    with open(config_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return GameSettings.model_validate(data)
