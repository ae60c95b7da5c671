import random
import time

from .combat import CombatResolver
from .commands import CommandRegistry, build_registry
from .config import GameSettings
from .dispatcher import CommandResult, Dispatcher
from .persistence import SaveLoad
from .state_manager import GameState
from .world_loader import WorldLoader


class GameSession:
    """
    One run of the game: a state, the registry built for it and the dispatcher between them.
    Drivers feed it lines and react to the signal in each result.
    """

    def __init__(self, settings: GameSettings | None = None, rng: random.Random | None = None, sleep=None):
        self.settings = settings if settings is not None else GameSettings()
        self.loader = WorldLoader(self.settings.world_config, self.settings)
        self.persistence = SaveLoad(self.loader, self.settings)
        self.resolver = CombatResolver(rng=rng, sleep=sleep or time.sleep)
        self.registry: CommandRegistry = build_registry(self.persistence, self.resolver)
        self.state: GameState = self.loader.load_world()
        self.dispatcher = Dispatcher(self.state, self.registry)

    def handle(self, line: str) -> CommandResult:
        return self.dispatcher.dispatch(line)

    def reset(self):
        """Starts over from the world setup, keeping the registry and collaborators."""
        self.state = self.loader.load_world()
        self.dispatcher = Dispatcher(self.state, self.registry)
