import random
import pytest

from cube_engine import TwoPhaseSolver
from cube_engine.solver import get_tables


@pytest.fixture(scope="session")
def tables():
    return get_tables()


@pytest.fixture(scope="session")
def solver(tables):
    return TwoPhaseSolver(tables=tables)


@pytest.fixture
def rng():
    return random.Random(2024)
