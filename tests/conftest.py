from typing import List

import pytest
from loguru import logger


class Flaky:
    """Operation failing ``failures`` times before returning ``value``."""

    def __init__(self, failures: int, value="ok", log=None) -> None:
        self.failures = failures
        self.value = value
        self.calls = 0
        self.log = log

    def _step(self):
        self.calls += 1
        if self.log is not None:
            self.log.append("call")
        if self.calls <= self.failures:
            raise ValueError(f"fail {self.calls}")
        return self.value

    def __call__(self):
        return self._step()


class AsyncFlaky(Flaky):
    async def __call__(self):  # type: ignore[override]
        return self._step()


@pytest.fixture
def log_messages() -> List[str]:
    """Messages emitted through the loguru logger while the test runs."""
    messages: List[str] = []
    logger.enable("tryto")
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="TRACE")
    try:
        yield messages
    finally:
        logger.remove(handler_id)


@pytest.fixture
def flaky():
    return Flaky


@pytest.fixture
def async_flaky():
    return AsyncFlaky
