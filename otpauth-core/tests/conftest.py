"""Shared fixtures for otpauth-core tests."""

import asyncio
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

import pytest

from otpauth_core.cache import InMemoryCache
from otpauth_core.config import AuthConfig
from otpauth_core.exceptions import CacheTimeoutError
from otpauth_core.service import AuthService
from otpauth_core.session import UserIdentity

EMAIL = "a@x.example.gov"


class FakeClock:
    """Monotonic seconds that only move when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDateClock:
    """Wall-clock datetimes that only move when told to."""

    def __init__(self):
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingMailer:
    """Captures dispatched codes; can be told to fail or to hang."""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []
        self.fail_with = None
        self.returns = True
        self.entered = asyncio.Event()
        self.gate: Optional[asyncio.Event] = None

    async def send(self, to_address: str, code: str) -> bool:
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        if self.returns is not True:
            return self.returns
        self.sent.append((to_address, code))
        return True

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


class FakeUserDirectory:
    def __init__(self):
        self.users = {}
        self.fail_with = None

    async def find_or_create_by_email(self, email: str) -> UserIdentity:
        if self.fail_with is not None:
            raise self.fail_with
        if email not in self.users:
            self.users[email] = UserIdentity(id=f"user-{len(self.users) + 1}", email=email)
        return self.users[email]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def date_clock():
    return FakeDateClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(clock=clock)


@pytest.fixture
def config():
    return AuthConfig(
        allowed_email_domains="*.example.gov",
        max_verify_attempts=3,
        resend_cooldown_seconds=20,
        hash_rounds=4,
    )


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def user_directory():
    return FakeUserDirectory()


@pytest.fixture
def service(config, cache, mailer, user_directory, date_clock):
    return AuthService.from_config(
        config,
        cache=cache,
        mailer=mailer,
        user_directory=user_directory,
        clock=date_clock,
    )


class FlakyCache(InMemoryCache):
    """In-memory cache whose chosen operations time out on matching keys."""

    def __init__(self, clock=time.monotonic):
        super().__init__(clock=clock)
        self.failing = {}

    def fail(self, operation: str, key_part: str) -> None:
        self.failing[operation] = key_part

    def _check(self, operation: str, key: str) -> None:
        key_part = self.failing.get(operation)
        if key_part is not None and key_part in key:
            raise CacheTimeoutError(f"Cache {operation} timed out", operation=operation)

    async def get(self, key):
        self._check("get", key)
        return await super().get(key)

    async def set(self, key, value, ttl, *, only_if_absent=False):
        self._check("set", key)
        return await super().set(key, value, ttl, only_if_absent=only_if_absent)

    async def compare_and_set(self, key, expected, value):
        self._check("compare_and_set", key)
        return await super().compare_and_set(key, expected, value)
