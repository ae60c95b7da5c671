import pytest

from Dungeon import GameCore, GameSession, GameSettings, GameState, Monster, Player, Room


class StubRandom:
    """Always rolls the same value, so loot drops are predictable."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


NO_LOOT = 0.99
ALWAYS_LOOT = 0.0


@pytest.fixture
def settings(tmp_path):
    return GameSettings(
        save_path=str(tmp_path / "save.txt"),
        scores_path=str(tmp_path / "scores.csv"),
        combat_round_delay=0.0,
    )


@pytest.fixture
def session(settings):
    return GameSession(settings, rng=StubRandom(NO_LOOT))


@pytest.fixture
def small_core():
    """Hall <-> Vault (north/south), Hall -> Garden (east, one way), Goblin in the Vault."""
    core = GameCore("Test World")
    core.add_room(Room("Hall", "A draughty hall."))
    core.add_room(Room("Vault", "A cold vault."))
    core.add_room(Room("Garden", "An overgrown garden."))
    core.connect("Hall", "north", "Vault", reverse="south")
    core.connect("Hall", "east", "Garden")
    core.place_monster("Vault", Monster("Goblin", 2, 8))
    core.start_room_name = "Hall"
    return core


@pytest.fixture
def small_state(small_core, settings):
    return GameState(small_core, Player("Tester", 20, 5), settings=settings)
