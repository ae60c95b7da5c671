from .character import Monster
from .item import BaseItem
from .room import Room


class GameCore:
    """
    The central authority for the dungeon's topology.

    Responsibilities:
    - Registering rooms under unique names.
    - Wiring directed exits and locked doors between rooms.
    - Placing items and monsters at their starting rooms.
    - Remembering every item the world defines, so saved inventories can be restored.
    """

    def __init__(self, world_name: str = "Dungeon"):
        self.world_name = world_name
        self.rooms: dict[str, Room] = {}
        self.start_room_name: str | None = None

        # Item catalogue: (kind, lowercase name) -> template instance as defined by the world.
        self.item_catalogue: dict[tuple[str, str], BaseItem] = {}

    def add_room(self, room: Room) -> Room:
        if room.name in self.rooms:
            raise ValueError(f"Room '{room.name}' is already defined.")
        self.rooms[room.name] = room
        return room

    def has_room(self, name: str) -> bool:
        return name in self.rooms

    def get_room(self, name: str) -> Room:
        if name not in self.rooms:
            raise KeyError(f"Room '{name}' is not defined in the world map.")
        return self.rooms[name]

    def get_room_names(self) -> list[str]:
        return list(self.rooms.keys())

    @property
    def start_room(self) -> Room:
        if self.start_room_name is None:
            raise RuntimeError("GameCore has no start room configured.")
        return self.get_room(self.start_room_name)

    def connect(self, source: str, direction: str, target: str, reverse: str | None = None):
        """
        Adds a directed exit from source to target.
        The way back is only created when a reverse direction is given explicitly.
        """
        origin = self.get_room(source)
        destination = self.get_room(target)
        origin.connect(direction, destination)
        if reverse is not None:
            destination.connect(reverse, origin)

    def lock(self, source: str, direction: str):
        self.get_room(source).lock_door(direction)

    def register_item(self, item: BaseItem):
        """Remembers an item template; the first definition of a (kind, name) pair wins."""
        key = (item.kind, item.name.lower())
        if key not in self.item_catalogue:
            self.item_catalogue[key] = item.model_copy()

    def catalogue_item(self, kind: str, name: str) -> BaseItem | None:
        """Returns a fresh copy of the world's definition of an item, or None when unknown."""
        template = self.item_catalogue.get((kind, name.lower()))
        if template is None:
            return None
        return template.model_copy(update={"name": name})

    def place_item(self, room_name: str, item: BaseItem):
        self.register_item(item)
        self.get_room(room_name).items.append(item)

    def place_monster(self, room_name: str, monster: Monster):
        room = self.get_room(room_name)
        if room.monster is not None:
            raise ValueError(f"Room '{room_name}' already holds {room.monster.name}.")
        room.monster = monster

    def get_map_info(self) -> dict:
        """
        Provides a serialisable summary of the world map structure.
        """
        return {
            "world_name": self.world_name,
            "rooms": {
                name: {
                    "exits": {direction: target.name for direction, target in room.neighbors.items()},
                    "locked": sorted(room.locked_doors),
                    "items": room.item_names(),
                    "monster": room.monster.name if room.monster else None,
                }
                for name, room in self.rooms.items()
            },
            "total_rooms": len(self.rooms),
        }
