from __future__ import annotations

import pytest

from tests.fakes import build_world


@pytest.fixture()
def world():
    w = build_world()
    w.add_employee()
    w.add_schedule()
    return w
