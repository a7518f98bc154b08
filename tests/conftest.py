from __future__ import annotations

import random
from typing import List

import pytest

from sleuthers.services import dealer
from sleuthers.services.game_store import GameStore
from sleuthers.services.user_store import UserStore


@pytest.fixture
def store(tmp_path) -> GameStore:
    return GameStore(tmp_path / "games")


@pytest.fixture
def users(tmp_path) -> UserStore:
    return UserStore(tmp_path / "users.json")


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def players(users) -> List[str]:
    return [users.register("alice", "pw-alice")["id"], users.register("bob", "pw-bob")["id"]]


@pytest.fixture
def game_id(store, users, players, rng) -> str:
    return dealer.create_game(players[0], "Manor", players, store=store, users=users, rng=rng)

