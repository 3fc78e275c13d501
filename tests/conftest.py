import pytest

from hexhunt.registry import TreasureRegistry
from hexhunt.shapes import make_shape

from .helpers import full_board


@pytest.fixture
def board():
    return full_board()


@pytest.fixture
def single():
    return make_shape(1, [(0, 0)])


@pytest.fixture
def registry(single):
    return TreasureRegistry([single])
