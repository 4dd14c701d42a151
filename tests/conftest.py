import random
from unittest.mock import Mock

import pytest

from citysim.server.session import GameSession
from citysim.shared.config import GameConfig


def make_rng(*rolls: float, randint: int = 50) -> Mock:
    """
    RNG stand-in. `random()` yields the given rolls, then 0.99 (no event fires).
    """
    rng = Mock(spec=random.Random)
    sequence = list(rolls)
    rng.random.side_effect = lambda: sequence.pop(0) if sequence else 0.99
    rng.randint.return_value = randint
    rng.choice.side_effect = lambda items: items[0]
    return rng


@pytest.fixture
def quiet_rng():
    return make_rng()


@pytest.fixture
def config(tmp_path):
    return GameConfig(tmp_path)


@pytest.fixture
def session(config, quiet_rng):
    session = GameSession.create_local(config)
    session.rng = quiet_rng
    return session


@pytest.fixture
def rng_factory():
    return make_rng
