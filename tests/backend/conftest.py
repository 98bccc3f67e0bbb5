"""Shared fixtures: a controllable clock and a fake upstream transport."""

from datetime import datetime, timedelta, timezone

import pytest

T0 = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTransport:
    """Records hub calls; tests drive upstream events through the listener."""

    def __init__(self):
        self.listener = None
        self.started = False
        self.stopped = False
        self.subscriptions: list[list[str]] = []
        self.fail_subscribe = False

    def set_listener(self, listener) -> None:
        self.listener = listener

    async def start(self) -> None:
        self.started = True

    async def stop(self) -> None:
        self.stopped = True

    async def subscribe(self, api_keys: list[str]) -> None:
        if self.fail_subscribe:
            raise ConnectionError("emit failed")
        self.subscriptions.append(list(api_keys))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
