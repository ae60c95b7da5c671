from .character import Monster
from .item import BaseItem


class Room:
    """
    A node of the world graph.

    Exits are directed: an edge north from A to B does not imply an edge back.
    A locked direction always refers to an existing exit.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self.neighbors: dict[str, "Room"] = {}
        self.locked_doors: set[str] = set()
        self.items: list[BaseItem] = []
        self.monster: Monster | None = None

    def connect(self, direction: str, other: "Room"):
        """Adds a single directed exit from this room."""
        self.neighbors[direction] = other

    def lock_door(self, direction: str):
        if direction not in self.neighbors:
            raise ValueError(f"Room '{self.name}' has no exit '{direction}' to lock.")
        self.locked_doors.add(direction)

    def unlock_door(self, direction: str):
        self.locked_doors.discard(direction)

    def is_door_locked(self, direction: str) -> bool:
        return direction in self.locked_doors

    def find_item(self, name: str) -> BaseItem | None:
        """Case-insensitive exact match; the first item in room order wins."""
        wanted = name.lower()
        for item in self.items:
            if item.name.lower() == wanted:
                return item
        return None

    def remove_item(self, item: BaseItem):
        """Removes this exact item instance from the room."""
        for index, present in enumerate(self.items):
            if present is item:
                del self.items[index]
                return
        raise ValueError(f"{item.name} is not in room '{self.name}'.")

    def item_names(self) -> list[str]:
        return [item.name for item in self.items]

    def describe(self) -> str:
        """Human-readable block with exits, items, monster and locked doors."""
        lines = [f"== {self.name} ==", self.description]

        exits = ", ".join(sorted(self.neighbors)) if self.neighbors else "none"
        lines.append(f"Exits: {exits}")

        if self.items:
            lines.append(f"Items: {', '.join(self.item_names())}")
        else:
            lines.append("Items: none")

        if self.monster is not None:
            lines.append(f"Monster here: {self.monster.name} (level {self.monster.level}, hp {self.monster.hp})")

        if self.locked_doors:
            lines.append(f"Locked exits: {', '.join(sorted(self.locked_doors))}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Room(name={self.name!r}, exits={sorted(self.neighbors)})"
