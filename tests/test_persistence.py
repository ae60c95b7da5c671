import csv
from collections import Counter

import pytest

from Dungeon import PersistenceError, Potion, SessionSignal, Weapon
from Dungeon.persistence import decode_records, parse_records


def inventory_multiset(state):
    return Counter((item.kind, item.name) for item in state.player.inventory)


def write_save(settings, *records):
    with open(settings.save_path, "w", encoding="utf-8") as f:
        f.write("\n".join(records) + "\n")


def write_ledger(settings, rows, header=True):
    with open(settings.scores_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        if header:
            writer.writerow(["ts", "player", "score"])
        writer.writerows(rows)


def test_save_writes_the_four_records(session, settings):
    session.handle("move north")
    session.handle("take small potion")

    session.persistence.save(session.state)

    with open(settings.save_path, encoding="utf-8") as f:
        records = f.read().splitlines()
    assert records == [
        "player;Hero;20;5",
        "inventory;Potion:Small Potion",
        "room;Forest",
        "score;2",
    ]


def test_save_appends_ledger_with_a_single_header(session, settings):
    session.handle("save")
    session.handle("look")
    session.handle("save")

    with open(settings.scores_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["ts", "player", "score"]
    assert [row[1:] for row in rows[1:]] == [["Hero", "0"], ["Hero", "2"]]


def test_round_trip_restores_the_session(session):
    state = session.state
    session.handle("move north")
    session.handle("take small potion")
    session.handle("fight")
    session.handle("move east")
    session.handle("take old key")
    saved = (state.player.name, state.player.hp, state.player.attack,
             inventory_multiset(state), state.score, state.current.name)
    session.persistence.save(state)

    session.handle("use small potion")
    session.handle("move west")
    state.player.name = "Someone Else"

    session.persistence.load(state)

    assert (state.player.name, state.player.hp, state.player.attack,
            inventory_multiset(state), state.score, state.current.name) == saved


def test_load_via_command_restores_exact_score_then_counts_the_command(session):
    session.handle("move north")
    session.handle("save")
    session.handle("look")
    session.handle("look")

    session.handle("load")

    assert session.state.score == 1 + 1


def test_load_without_save_is_a_notice(session):
    session.handle("move north")

    result = session.handle("load")

    assert result.ok
    assert result.lines == ["No saved game found."]
    assert session.state.current.name == "Forest"


def test_load_rebuilds_the_full_world(session, settings):
    write_save(settings, "room;Hall of Glory", "score;3")

    session.persistence.load(session.state)

    hall = session.state.current
    assert hall.name == "Hall of Glory"
    cave = hall.neighbors["south"]
    assert cave.name == "Cave"
    assert cave.is_door_locked("north")
    assert cave.monster.name == "Goblin"
    assert session.state.game.get_room_names() == ["Square", "Forest", "Cave", "Hall of Glory"]


def test_missing_records_fall_back_to_defaults(session, settings):
    write_save(settings, "inventory;")

    session.persistence.load(session.state)

    player = session.state.player
    assert (player.name, player.hp, player.attack) == ("Hero", 10, 3)
    assert player.inventory == []
    assert session.state.current.name == "Square"
    assert session.state.score == 0


def test_unknown_room_falls_back_to_start(session, settings):
    write_save(settings, "room;Moon Base")
    session.persistence.load(session.state)
    assert session.state.current.name == "Square"


def test_records_are_order_independent_and_unknown_tags_ignored(session, settings):
    write_save(
        settings,
        "score;42",
        "weather;rainy",
        "room;Cave",
        "garbage line without separator",
        "player;Aria;13;4",
    )

    session.persistence.load(session.state)

    assert session.state.player.name == "Aria"
    assert session.state.player.hp == 13
    assert session.state.current.name == "Cave"
    assert session.state.score == 42


def test_unknown_variants_are_dropped(session, settings):
    write_save(settings, "inventory;Scroll:Fireball,Key:Brass Key,NoColon,Potion:")

    session.persistence.load(session.state)

    assert inventory_multiset(session.state) == Counter({("Key", "Brass Key"): 1})


def test_item_payloads_come_from_the_world_when_known(session, settings):
    write_save(
        settings,
        "inventory;Weapon:Legendary Sword,Weapon:Stick,Potion:Dropped Potion,Potion:Mystery Brew",
    )

    session.persistence.load(session.state)

    by_name = {item.name: item for item in session.state.player.inventory}
    assert by_name["Legendary Sword"].bonus == 10
    assert by_name["Stick"].bonus == 3
    assert by_name["Dropped Potion"].heal == 3
    assert by_name["Mystery Brew"].heal == 5


def test_carried_items_are_not_duplicated_in_rooms(session, settings):
    write_save(settings, "inventory;Key:Old Key,Potion:Small Potion", "room;Square")

    session.persistence.load(session.state)

    game = session.state.game
    assert game.get_room("Cave").items == []
    assert game.get_room("Forest").items == []
    assert inventory_multiset(session.state) == Counter({("Key", "Old Key"): 1, ("Potion", "Small Potion"): 1})


@pytest.mark.parametrize("record", ["player;Hero;lots;5", "player;Hero;5", "player;Hero;0;5", "player;Hero;-3;5", "score;many", "score;-4"])
def test_malformed_save_is_a_persistence_error(session, settings, record):
    write_save(settings, record)
    session.handle("move north")

    with pytest.raises(PersistenceError):
        session.persistence.load(session.state)

    assert session.state.current.name == "Forest"


def test_malformed_save_reported_by_dispatcher(session, settings):
    write_save(settings, "score;many")

    result = session.handle("load")

    assert result.category == "persistence"
    assert result.signal == SessionSignal.RUNNING
    assert session.state.score == 0


def test_unwritable_save_slot(session, settings, tmp_path):
    settings.save_path = str(tmp_path / "missing" / "save.txt")

    result = session.handle("save")

    assert result.category == "persistence"
    assert session.state.score == 0


def test_player_names_may_contain_separators(session, settings):
    session.state.player.name = "Sir;Lancelot"
    session.persistence.save(session.state)
    session.state.player.name = "Nobody"

    session.persistence.load(session.state)

    assert session.state.player.name == "Sir;Lancelot"


def test_dead_player_in_save_keeps_the_game_over(session, settings):
    session.handle("move north")
    session.state.player.hp = 1
    assert session.handle("fight").signal == SessionSignal.GAME_OVER
    write_save(settings, "player;Hero;0;5", "room;Square", "score;3")

    result = session.handle("load")

    assert result.category == "persistence"
    assert result.signal == SessionSignal.GAME_OVER
    assert session.state.current.name == "Forest"


def test_item_names_with_colons_survive_a_round_trip(session):
    session.state.player.add_item(Potion(name="Elixir: Strong", heal=7))
    session.state.player.add_item(Weapon(name="Axe", bonus=2))
    session.persistence.save(session.state)
    session.state.player.inventory.clear()

    session.persistence.load(session.state)

    assert inventory_multiset(session.state) == Counter({("Potion", "Elixir: Strong"): 1, ("Weapon", "Axe"): 1})


def test_load_after_game_over_resumes(session):
    session.handle("save")
    session.handle("move north")
    session.state.player.hp = 1
    assert session.handle("fight").signal == SessionSignal.GAME_OVER

    result = session.handle("load")

    assert result.signal == SessionSignal.RUNNING
    assert session.state.player.hp == 20
    assert session.state.current.name == "Square"


def test_parse_and_decode_records():
    records = parse_records(["player;A;1;2\n", "room;Cave\r\n", "\n"])
    assert records == {"player": "A;1;2", "room": "Cave"}

    data = decode_records(records)
    assert data.player == ("A", 1, 2)
    assert data.room == "Cave"
    assert data.score is None
    assert data.inventory == []


def test_scores_sorted_descending_and_truncated(session, settings):
    rows = [[f"2024-01-{day:02d}T10:00:00", f"p{day}", str(score)]
            for day, score in enumerate([5, 90, 12, 7, 33, 1, 64, 20, 18, 75, 3, 41], start=1)]
    write_ledger(settings, rows)

    entries = session.persistence.read_scores()

    assert [entry.score for entry in entries] == [90, 75, 64, 41, 33, 20, 18, 12, 7, 5]


def test_scores_ties_keep_ledger_order(session, settings):
    write_ledger(settings, [["t", "first", "10"], ["t", "second", "10"], ["t", "third", "30"]])

    entries = session.persistence.read_scores()

    assert [entry.player for entry in entries] == ["third", "first", "second"]


def test_scores_skip_malformed_rows(session, settings):
    write_ledger(settings, [["t", "ok", "4"], ["t", "bad", "four"], ["broken"], ["t", "fine", "9"]])

    entries = session.persistence.read_scores()

    assert [(entry.player, entry.score) for entry in entries] == [("fine", 9), ("ok", 4)]


def test_scores_command_output(session, settings):
    assert session.handle("scores").lines == ["No scores yet."]

    write_ledger(settings, [["t", "Ann", "3"], ["t", "Bo", "8"]])
    result = session.handle("scores")

    assert result.lines[0] == "Leaderboard (top 10):"
    assert result.lines[1].endswith("Bo - 8")
    assert result.lines[2].endswith("Ann - 3")
