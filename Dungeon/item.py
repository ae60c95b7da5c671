from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

if TYPE_CHECKING:
    from .state_manager import GameState


class BaseItem(BaseModel):
    """
    Represents a portable object in the dungeon.
    Items live in exactly one container at a time: a room's item list or the player's inventory.
    Containers compare items by identity, since two potions with the same name are equal by value.
    """

    # The save file separates inventory entries with commas and records with newlines.
    name: str = Field(min_length=1, pattern=r"^[^,\r\n]+$", description="Display name, matched case-insensitively")

    def label(self) -> str:
        """Variant and name as written to the save file, e.g. 'Potion:Small Potion'."""
        return f"{self.kind}:{self.name}"


class Potion(BaseItem):
    kind: Literal["Potion"] = "Potion"
    heal: int = Field(ge=0, description="HP restored when drunk")


class Weapon(BaseItem):
    kind: Literal["Weapon"] = "Weapon"
    bonus: int = Field(description="Permanent attack bonus granted when equipped")


class Key(BaseItem):
    kind: Literal["Key"] = "Key"


# Closed set of variants; "kind" is the discriminator and doubles as the save file tag.
Item = Annotated[Union[Potion, Weapon, Key], Field(discriminator="kind")]
ITEM_ADAPTER: TypeAdapter = TypeAdapter(Item)
ITEM_KINDS: tuple[str, ...] = ("Potion", "Weapon", "Key")


def parse_item(data: dict) -> BaseItem:
    """Validates a plain dict (e.g. from a JSON config) into the matching item variant."""
    return ITEM_ADAPTER.validate_python(data)


def apply_item(item: BaseItem, state: "GameState") -> list[str]:
    """
    Applies an inventory item to the game state and returns feedback lines.
    Consumed items remove themselves from the inventory.
    """
    player = state.player

    if item.kind == "Potion":
        old_hp = player.hp
        player.hp += item.heal
        player.discard(item)
        return [f"You drink {item.name}. HP {old_hp} -> {player.hp}."]

    if item.kind == "Weapon":
        old_attack = player.attack
        player.attack += item.bonus
        player.discard(item)
        return [
            f"{item.name} equipped!",
            f"Attack increased: {old_attack} -> {player.attack}.",
        ]

    if item.kind == "Key":
        room = state.current
        locked = sorted(room.locked_doors)
        if not locked:
            return [f"There are no locked doors here for {item.name}."]

        # Lexical order keeps the choice deterministic when several doors are locked.
        direction = locked[0]
        room.unlock_door(direction)
        player.discard(item)
        return [
            f"{item.name} unlocked the door to the {direction}!",
            f"The way to {room.neighbors[direction].name} is open.",
        ]

    raise KeyError(f"No apply handler for item kind '{item.kind}'.")
