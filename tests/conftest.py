import pytest

from fakes import FakeBroker


@pytest.fixture
def broker():
    return FakeBroker()
