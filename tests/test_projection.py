from __future__ import annotations

import pytest

from helpers import rig
from sleuthers.models.game import ActionType, Card, CardAction, GameStage
from sleuthers.services import projection
from sleuthers.services.errors import Forbidden


def _player(view, user_id):
    return next(p for p in view.players if p.user_id == user_id)


def test_self_sees_secret_and_cards(store, users, game_id, players):
    a, b = players
    view = projection.project_view(game_id, a, store=store, users=users)
    game = store.load(game_id)

    me = _player(view, a)
    assert me.is_self
    assert me.username == "alice"
    assert me.character == game.player(a).character
    assert sorted(c.id for c in me.cards) == sorted(game.player(a).hand)
    assert me.guesses == {}
    assert me.active and me.phase == 1

    other = _player(view, b)
    assert other.username == "bob"
    assert other.character is None
    assert other.cards is None
    assert other.guesses is None
    assert not other.active


def test_outsider_cannot_view(store, users, game_id):
    with pytest.raises(Forbidden):
        projection.project_view(game_id, "stranger", store=store, users=users)


def test_board_is_public(store, users, game_id, players):
    view = projection.project_view(game_id, players[1], store=store, users=users)
    assert len(view.characters) == 10
    assert all(c.name and c.bg_color for c in view.characters)
    assert {t.name for t in view.tokens} == {"diamond", "ruby", "emerald"}
    assert [e.action for e in view.log] == [ActionType.ROLL]


def test_card_slots_show_bindings():
    card = Card(
        id="c1",
        action1=CardAction(type=ActionType.MOVE, character="ignored"),
        action2=CardAction(type=ActionType.SIGHT, character="x"),
    )
    view = projection.project_card(card)
    assert view.action1.character is None
    assert view.action2.character == "x"


def _with_private_entries(game, actor):
    game.append_log(actor, ActionType.SIGHT, card="k", character="w", sight_user="t", sight_result=True)
    game.append_log(actor, ActionType.ELIMINATE, card="k", character="gone")


def test_private_results_only_for_actor(store, users, game_id, players):
    a, b = players
    rig(store, game_id, lambda g: _with_private_entries(g, a))

    mine = projection.project_view(game_id, a, store=store, users=users).log
    theirs = projection.project_view(game_id, b, store=store, users=users).log

    assert mine[-2].sight_result is True
    assert theirs[-2].sight_result is None
    assert theirs[-2].sight_user == "t"
    assert mine[-1].character == "gone"
    assert theirs[-1].character is None


def test_finished_reveals_guesses_and_eliminations(store, users, game_id, players):
    a, b = players

    def finish(game):
        _with_private_entries(game, a)
        game.player(a).guesses = {b: {game.player(b).character: True}}
        game.stage = GameStage.FINISHED

    rig(store, game_id, finish)
    view = projection.project_view(game_id, b, store=store, users=users)
    assert _player(view, a).guesses
    assert _player(view, a).character is None
    assert view.log[-1].character == "gone"
    assert view.log[-2].sight_result is None


def test_role_for(store, game_id, players):
    game = store.load(game_id)
    a, b = players
    assert projection.role_for(game, a, game.player(a)) == projection.ViewerRole.SELF
    assert projection.role_for(game, a, game.player(b)) == projection.ViewerRole.OTHER
    game.stage = GameStage.FINISHED
    assert projection.role_for(game, a, game.player(b)) == projection.ViewerRole.FINISHED


def test_list_games(store, game_id, players):
    summaries = projection.list_games(players[1], store=store)
    assert [s.id for s in summaries] == [game_id]
    assert summaries[0].stage == GameStage.PLAYING
    assert projection.list_games("stranger", store=store) == []
