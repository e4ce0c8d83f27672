from datetime import datetime, timedelta, timezone

import pytest

from tocapi.services.notifications import InMemoryNotifier
from tocapi.services.password_reset import PasswordResetService
from tocapi.services.projects import ProjectService
from tocapi.stores.memory import InMemoryAccountStore, InMemoryProjectStore, InMemoryResetTokenStore
from tocapi.utils.hashing import BcryptPasswordHasher

OWNER_ID = "user-abc-123"
START = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable replacement for utc_now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def project_store():
    return InMemoryProjectStore()


@pytest.fixture
def project_service(project_store, clock):
    return ProjectService(project_store, clock=clock)


@pytest.fixture
def hasher():
    # Lowest bcrypt cost keeps the suite fast
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def accounts():
    return InMemoryAccountStore()


@pytest.fixture
def tokens():
    return InMemoryResetTokenStore()


@pytest.fixture
def notifier():
    return InMemoryNotifier()


@pytest.fixture
def reset_service(accounts, tokens, notifier, hasher, clock):
    return PasswordResetService(
        accounts=accounts,
        tokens=tokens,
        notifier=notifier,
        hasher=hasher,
        clock=clock,
    )
