from __future__ import annotations

from typing import List

import pytest

from tests._fixtures.http_stub import FakeHTTP


@pytest.fixture
def fake_http() -> FakeHTTP:
    """Provide a URL-routed stand-in for ``urllib.request.urlopen``."""
    return FakeHTTP()


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    """Record requested sleeps instead of waiting."""
    return SleepRecorder()
