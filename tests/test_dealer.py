from __future__ import annotations

import random
from collections import Counter

import pytest

from sleuthers.models.game import ActionType, GameStage, TurnState
from sleuthers.services import catalog, dealer
from sleuthers.services.errors import InvalidArgument, NotFound


@pytest.mark.parametrize("count", [2, 3, 4, 5, 6])
def test_deal_structure(count):
    ids = [f"u{i}" for i in range(count)]
    game = dealer.deal_game("u0", "Manor", ids, rng=random.Random(count))

    assert game.stage == GameStage.PLAYING
    assert sorted(p.order for p in game.players) == list(range(count))
    assert [p.user_id for p in sorted(game.players, key=lambda p: p.order)] == ids

    secret = [p.character for p in game.players]
    assert len(set(secret)) == count
    assert set(secret) <= set(catalog.character_ids())

    assert len(game.cards) == 28
    assert all(len(p.hand) == dealer.CARDS_PER_HAND for p in game.players)
    held = [c for p in game.players for c in p.hand]
    assert len(set(held)) == 2 * count
    assert all(game.cards[c].deck_order is None for c in held)
    assert sorted(c.deck_order for c in game.deck()) == list(range(28 - 2 * count))

    assert {t.stock for t in game.tokens.values()} == {count + 2}


def test_opening_log_is_a_single_roll():
    game = dealer.deal_game("a", "Manor", ["a", "b"], rng=random.Random(1))
    assert len(game.log) == 1
    entry = game.log[0]
    assert entry.id == 0
    assert entry.action == ActionType.ROLL
    assert entry.user == "a"
    assert game.turn == TurnState.from_log(game.log)
    assert game.turn.phase == 1


def test_two_player_stock_total():
    game = dealer.deal_game("a", "Manor", ["a", "b"], rng=random.Random(2))
    assert sum(t.stock for t in game.tokens.values()) == 12


def test_token_locations_are_fixed():
    game = dealer.deal_game("a", "Manor", ["a", "b", "c"], rng=random.Random(3))
    for token_id, state in game.tokens.items():
        assert state.locations == catalog.TOKEN_LOCATIONS[token_id]


def test_starting_positions_leave_middle_free():
    game = dealer.deal_game("a", "Manor", ["a", "b"], rng=random.Random(4))
    cells = sorted(c.location for c in game.characters.values())
    assert cells == [0, 1, 2, 3, 4, 7, 8, 9, 10, 11]
    assert not any(c.eliminated for c in game.characters.values())


def test_deck_composition():
    cards = dealer.build_deck(catalog.character_ids())
    assert len(cards) == 28
    kinds = Counter(frozenset((c.action1.type, c.action2.type)) for c in cards)
    assert kinds[frozenset((ActionType.PICK_TOKEN, ActionType.SIGHT))] == 10
    assert kinds[frozenset((ActionType.MOVE, ActionType.SIGHT))] == 5
    assert kinds[frozenset((ActionType.ELIMINATE, ActionType.SIGHT))] == 5
    assert kinds[frozenset((ActionType.SPECIFIC_TOKEN, ActionType.MOVE))] == 3
    assert kinds[frozenset((ActionType.SPECIFIC_TOKEN, ActionType.ELIMINATE))] == 3
    assert all(c.action1.type != c.action2.type for c in cards)

    sight = Counter(c.action2.character for c in cards if c.action2.type == ActionType.SIGHT)
    assert set(sight.values()) == {2}


def test_same_seed_same_table():
    a = dealer.deal_game("a", "Manor", ["a", "b"], rng=random.Random(42))
    b = dealer.deal_game("a", "Manor", ["a", "b"], rng=random.Random(42))
    assert {k: v.location for k, v in a.characters.items()} == {k: v.location for k, v in b.characters.items()}
    assert [p.character for p in a.players] == [p.character for p in b.players]
    assert (a.log[0].die1, a.log[0].die2) == (b.log[0].die1, b.log[0].die2)


# -----------------------------
# create_game (validation + persistance)
# -----------------------------

def test_create_game_persists(store, users, players, rng):
    game_id = dealer.create_game(players[0], "  Manor ", players, store=store, users=users, rng=rng)
    game = store.load(game_id)
    assert game.name == "Manor"
    assert game.owner == players[0]
    assert game.version == 0
    assert store.list_ids() == [game_id]


@pytest.mark.parametrize("name", ["", "   "])
def test_create_game_requires_name(store, users, players, name):
    with pytest.raises(InvalidArgument):
        dealer.create_game(players[0], name, players, store=store, users=users)


@pytest.mark.parametrize("ids", [[], ["x"], [f"x{i}" for i in range(7)]])
def test_create_game_player_count(store, users, players, ids):
    with pytest.raises(InvalidArgument):
        dealer.create_game(players[0], "Manor", ids, store=store, users=users)
    assert store.list_ids() == []


def test_create_game_rejects_duplicates(store, users, players):
    with pytest.raises(InvalidArgument):
        dealer.create_game(players[0], "Manor", [players[0], players[0]], store=store, users=users)


def test_create_game_unknown_user(store, users, players):
    with pytest.raises(NotFound):
        dealer.create_game(players[0], "Manor", [players[0], "ghost"], store=store, users=users)
    assert store.list_ids() == []
