from .item import BaseItem


class Player:
    """
    The single adventurer controlled by the session.
    Tracks vitals and an ordered inventory; dies when hp drops to 0 or below.
    """

    def __init__(self, name: str, hp: int, attack: int):
        self.name = name
        self.hp = hp
        self.attack = attack
        self.inventory: list[BaseItem] = []

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def add_item(self, item: BaseItem):
        self.inventory.append(item)

    def find_item(self, name: str) -> BaseItem | None:
        """Case-insensitive exact match; the first item in inventory order wins."""
        wanted = name.lower()
        for item in self.inventory:
            if item.name.lower() == wanted:
                return item
        return None

    def discard(self, item: BaseItem):
        """Removes this exact item instance from the inventory."""
        for index, held in enumerate(self.inventory):
            if held is item:
                del self.inventory[index]
                return
        raise ValueError(f"{item.name} is not in {self.name}'s inventory.")

    def inventory_names(self) -> list[str]:
        return [item.name for item in self.inventory]

    def __repr__(self) -> str:
        return f"Player(name={self.name!r}, hp={self.hp}, attack={self.attack}, items={len(self.inventory)})"


class Monster:
    """A room guardian. Its level is also the damage it deals per combat round."""

    def __init__(self, name: str, level: int, hp: int):
        self.name = name
        self.level = level
        self.hp = hp

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    def __repr__(self) -> str:
        return f"Monster(name={self.name!r}, level={self.level}, hp={self.hp})"
