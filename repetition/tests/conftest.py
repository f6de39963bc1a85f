import uuid

import pytest

from repetition.utils.time import FixedClock
from .helpers import NOW


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def clock():
    return FixedClock(NOW)
