import decimal

import pytest

from Calculator import Registry
from Calculator.MathEngine import Executor


@pytest.fixture
def executor():
    return Executor()


@pytest.fixture
def wide_context():
    """Same Decimal working precision the Executor opens per evaluation."""
    with decimal.localcontext() as ctx:
        ctx.prec = 200
        yield ctx


@pytest.fixture(autouse=True)
def seeded_rand():
    Registry.seed_random(1234)
    yield
    Registry.seed_random()
