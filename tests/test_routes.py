from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from helpers import rig
from sleuthers.main import app
from sleuthers.routes.games import get_rng
from sleuthers.services.game_store import get_game_store
from sleuthers.services.user_store import get_user_store

ALICE = ("alice", "pw-alice")
BOB = ("bob", "pw-bob")


@pytest.fixture
def client(store, users, rng):
    app.dependency_overrides[get_game_store] = lambda: store
    app.dependency_overrides[get_user_store] = lambda: users
    app.dependency_overrides[get_rng] = lambda: rng
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def created(client, players):
    resp = client.put("/game", json={"name": "Manor", "user_ids": players}, auth=ALICE)
    assert resp.status_code == 201
    return resp.json()["id"]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_register(client):
    resp = client.post("/users", json={"username": "carol", "password": "secret"})
    assert resp.status_code == 201
    assert resp.json()["username"] == "carol"
    assert "password_hash" not in resp.json()

    dup = client.post("/users", json={"username": "Carol ", "password": "other"})
    assert dup.status_code == 409
    assert dup.json()["kind"] == "conflict"

    blank = client.post("/users", json={"username": "dave", "password": ""})
    assert blank.status_code == 400
    assert blank.json()["kind"] == "invalid_argument"


def test_game_routes_need_credentials(client, players):
    assert client.get("/game").status_code == 401
    assert client.get("/game", auth=("alice", "wrong")).status_code == 401


def test_create_list_and_view(client, created, players):
    listed = client.get("/game", auth=BOB).json()
    assert listed == [{"id": created, "name": "Manor", "stage": "PLAYING"}]

    view = client.get(f"/game/{created}", auth=BOB).json()
    me = next(p for p in view["players"] if p["user_id"] == players[1])
    other = next(p for p in view["players"] if p["user_id"] == players[0])
    assert "character" in me and "cards" in me
    assert "character" not in other
    assert "cards" not in other
    assert other["active"] is True
    assert view["log"][0]["action"] == "ROLL"


def test_create_validation(client, players):
    resp = client.put("/game", json={"name": "Solo", "user_ids": [players[0]]}, auth=ALICE)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid_argument"

    resp = client.put("/game", json={"name": "Ghosts", "user_ids": [players[0], "ghost"]}, auth=ALICE)
    assert resp.status_code == 404


def test_unknown_game(client, players):
    resp = client.get("/game/nope", auth=ALICE)
    assert resp.status_code == 404
    assert resp.json()["kind"] == "not_found"


def test_turn_errors_are_mapped(client, created, players, store):
    character_id = next(iter(store.load(created).characters))

    resp = client.post(f"/game/{created}", json={"type": "MOVE", "character_id": character_id, "move_to": 0}, auth=BOB)
    assert resp.status_code == 403
    assert resp.json()["kind"] == "forbidden"

    resp = client.post(f"/game/{created}", json={"type": "ELIMINATE"}, auth=ALICE)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid_action"

    resp = client.post(f"/game/{created}", json={"type": "MOVE", "character_id": character_id, "move_to": 12}, auth=ALICE)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid_argument"


def test_move_through_http(client, created, players, store):
    def free_dice(game):
        game.log[-1].die1 = game.log[-1].die2 = None
        game.turn.die1 = game.turn.die2 = None

    rig(store, created, free_dice)
    game = store.load(created)
    character_id = next(iter(game.characters))
    start = game.characters[character_id].location
    target = start + 1 if start % 4 != 3 else start - 1

    resp = client.post(
        f"/game/{created}", json={"type": "MOVE", "character_id": character_id, "move_to": target}, auth=ALICE
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["phase"] == 1
    assert body["next_phase"] == 2
    assert body["active_player"] == players[0]
    assert store.load(created).characters[character_id].location == target


def test_internal_errors_are_masked(client, created, store):
    def corrupt(game):
        game.turn.phase = 4

    rig(store, created, corrupt)
    resp = client.post(f"/game/{created}", json={"type": "ELIMINATE"}, auth=ALICE)
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal error", "kind": "internal_error"}


def test_guess_routes(client, created, players, store):
    alice_secret = store.load(created).player(players[0]).character
    bob_secret = store.load(created).player(players[1]).character

    resp = client.post(
        f"/game/{created}/guess", json={"character_id": bob_secret, "user_id": players[1], "guess": True}, auth=ALICE
    )
    assert resp.status_code == 200
    assert resp.json()["stage"] == "PLAYING"

    resp = client.request(
        "DELETE", f"/game/{created}/guess", json={"character_id": bob_secret, "user_id": players[1]}, auth=ALICE
    )
    assert resp.status_code == 200
    assert store.load(created).player(players[0]).guesses == {}

    client.post(
        f"/game/{created}/guess", json={"character_id": bob_secret, "user_id": players[1], "guess": True}, auth=ALICE
    )
    resp = client.post(
        f"/game/{created}/guess", json={"character_id": alice_secret, "user_id": players[0], "guess": True}, auth=BOB
    )
    assert resp.json()["stage"] == "FINISHED"

    view = client.get(f"/game/{created}", auth=BOB).json()
    alice = next(p for p in view["players"] if p["user_id"] == players[0])
    assert alice["guesses"] == {players[1]: {bob_secret: True}}


def test_malformed_guess_bodies_are_invalid_arguments(client, created, players):
    bodies = [
        {"character_id": "x", "user_id": players[1]},
        {"guess": True, "user_id": players[1]},
        {"guess": True, "character_id": "x"},
    ]
    for body in bodies:
        resp = client.post(f"/game/{created}/guess", json=body, auth=ALICE)
        assert resp.status_code == 400
        assert resp.json()["kind"] == "invalid_argument"

    resp = client.request("DELETE", f"/game/{created}/guess", json={"user_id": players[1]}, auth=ALICE)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid_argument"


def test_malformed_action_bodies_are_invalid_arguments(client, created):
    resp = client.post(f"/game/{created}", json={"character_id": "x", "move_to": 1}, auth=ALICE)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid_argument"
    assert resp.json()["detail"].startswith("type")

    resp = client.post(f"/game/{created}", json={"type": "MOVE", "character_id": "x", "move_to": "north"}, auth=ALICE)
    assert resp.status_code == 400
    assert resp.json()["kind"] == "invalid_argument"
