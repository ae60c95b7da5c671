import pytest

from Dungeon import Key, Monster, Potion, Room


def test_lock_state_follows_the_locked_set(small_core):
    hall = small_core.get_room("Hall")
    assert not hall.is_door_locked("north")

    hall.lock_door("north")
    assert hall.is_door_locked("north")
    assert hall.locked_doors == {"north"}

    hall.unlock_door("north")
    assert not hall.is_door_locked("north")
    assert hall.locked_doors == set()


def test_unknown_direction_is_never_locked(small_core):
    assert not small_core.get_room("Hall").is_door_locked("up")


def test_cannot_lock_a_missing_exit(small_core):
    with pytest.raises(ValueError):
        small_core.get_room("Garden").lock_door("west")


def test_unlocking_an_open_door_is_a_no_op(small_core):
    hall = small_core.get_room("Hall")
    hall.unlock_door("east")
    assert hall.locked_doors == set()


def test_edges_are_directional(small_core):
    hall = small_core.get_room("Hall")
    garden = small_core.get_room("Garden")
    vault = small_core.get_room("Vault")

    assert hall.neighbors["east"] is garden
    assert garden.neighbors == {}
    assert vault.neighbors["south"] is hall


def test_describe_lists_everything_in_the_room():
    room = Room("Crypt", "Bones everywhere.")
    other = Room("Tunnel")
    room.connect("west", other)
    room.connect("down", other)
    room.lock_door("west")
    room.items.append(Potion(name="Red Potion", heal=4))
    room.items.append(Key(name="Bone Key"))
    room.monster = Monster("Ghoul", 3, 10)

    text = room.describe()

    assert "Crypt" in text
    assert "Bones everywhere." in text
    assert "Exits: down, west" in text
    assert "Items: Red Potion, Bone Key" in text
    assert "Ghoul" in text
    assert "Locked exits: west" in text


def test_describe_empty_room():
    text = Room("Cell", "Bare walls.").describe()
    assert "Items: none" in text
    assert "Monster" not in text
    assert "Locked" not in text


def test_find_item_is_case_insensitive_and_first_match_wins():
    room = Room("Store")
    first = Potion(name="Tonic", heal=1)
    second = Potion(name="tonic", heal=9)
    room.items.extend([first, second])

    assert room.find_item("TONIC") is first
    assert room.find_item("Ton") is None


def test_remove_item_uses_identity():
    room = Room("Store")
    first = Potion(name="Tonic", heal=1)
    twin = Potion(name="Tonic", heal=1)
    room.items.extend([first, twin])

    room.remove_item(twin)

    assert len(room.items) == 1
    assert room.items[0] is first


def test_core_rejects_duplicate_rooms(small_core):
    with pytest.raises(ValueError):
        small_core.add_room(Room("Hall"))


def test_core_unknown_room_raises_key_error(small_core):
    with pytest.raises(KeyError):
        small_core.get_room("Attic")


def test_core_allows_one_monster_per_room(small_core):
    with pytest.raises(ValueError):
        small_core.place_monster("Vault", Monster("Rat", 1, 1))


def test_catalogue_returns_fresh_copies(small_core):
    small_core.place_item("Garden", Potion(name="Herbal Tea", heal=7))

    restored = small_core.catalogue_item("Potion", "herbal tea")

    assert restored is not None
    assert restored.heal == 7
    assert restored.name == "herbal tea"
    assert restored is not small_core.get_room("Garden").items[0]
    assert small_core.catalogue_item("Weapon", "Herbal Tea") is None
