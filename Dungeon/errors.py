class GameError(Exception):
    """Base class for every failure the engine reports to the player."""

    category = "game"


class InvalidCommandError(GameError):
    """
    A recoverable gameplay error: unknown command, blocked direction,
    missing item, empty container, no monster to fight.
    The session continues and the state is left untouched.
    """

    category = "domain"


class PersistenceError(GameError):
    """
    An operational fault while reading or writing the save slot.
    The failing operation is aborted; the original exception is kept as __cause__.
    """

    category = "persistence"
