import random

import pytest

from drawphone.game.models import Player, Room
from drawphone.game.store import RoomStore


def _room(store, room_id, player_id='p1', phase='lobby'):
    room = Room(id=room_id, code=store.generate_code(), phase=phase,
                players=[Player(id=player_id, nickname=player_id, is_host=True)])
    return store.create(room)


def test_generate_code_is_four_uppercase_letters(store):
    code = store.generate_code()
    assert len(code) == 4
    assert code.isalpha() and code.isupper()


def test_generate_code_retries_on_collision():
    # Two stores seeded identically produce the same first code; the second
    # store must skip it once it is taken.
    first = RoomStore(rng=random.Random(7)).generate_code()
    store = RoomStore(rng=random.Random(7))
    store.create(Room(id='r1', code=first, players=[Player(id='a', nickname='a', is_host=True)]))
    assert store.generate_code() != first


def test_codes_unique_across_many_rooms(store):
    for i in range(300):
        _room(store, f'r{i}', player_id=f'p{i}')
    codes = [r.code for r in store.list_rooms()]
    assert len(codes) == len(set(codes)) == 300


def test_create_rejects_duplicate_code(store):
    room = _room(store, 'r1')
    with pytest.raises(ValueError):
        store.create(Room(id='r2', code=room.code))


def test_find_by_code_is_case_insensitive(store):
    room = _room(store, 'r1')
    assert store.find_by_code(room.code.lower()) is room
    assert store.find_by_code(' ' + room.code + ' ') is room
    assert store.find_by_code('ZZZZZ') is None


def test_delete_is_idempotent(store):
    room = _room(store, 'r1')
    assert store.delete('r1') is True
    assert store.delete('r1') is False
    assert store.get('r1') is None
    assert store.find_by_code(room.code) is None
    assert len(store) == 0


def test_find_by_player(store):
    _room(store, 'r1', player_id='alice')
    room2 = _room(store, 'r2', player_id='bob')
    found = store.find_by_player('bob')
    assert found is not None
    room, player = found
    assert room is room2
    assert player.id == 'bob'
    assert store.find_by_player('nobody') is None


def test_list_lobby_rooms_excludes_started_rooms(store):
    lobby = _room(store, 'r1', player_id='a')
    _room(store, 'r2', player_id='b', phase='writing')
    lobby.locked = True
    assert store.list_lobby_rooms() == [{'code': lobby.code, 'playerCount': 1, 'locked': True}]
