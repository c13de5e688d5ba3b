from __future__ import annotations

from datetime import datetime

import pytest

from timeclock.container import Container, assemble

from tests.fakes import API_USER_ID, Store

PERIOD_START = datetime(2026, 1, 5, 0, 0, 0)
PERIOD_END = datetime(2026, 1, 18, 23, 59, 59)


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday of the second week of the seeded pay period.
    return datetime(2026, 1, 14, 12, 0, 0)


@pytest.fixture
def store() -> Store:
    return Store()


@pytest.fixture
def period(store: Store):
    return store.periods.add(PERIOD_START, PERIOD_END)


@pytest.fixture
def container(store: Store) -> Container:
    return assemble(
        employees_repo=store.employees,
        entries_repo=store.entries,
        actions_repo=store.actions,
        pay_periods_repo=store.periods,
        api_user_id=API_USER_ID,
    )
