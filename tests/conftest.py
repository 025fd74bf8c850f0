import pytest

from crowdframe.collect.retry import RetryPolicy


class RecordingSleep:
    """Stand-in for ``time.sleep`` that only records the requested delays."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def no_wait_retry(sleeper):
    """Default retry budget without real sleeping."""

    return RetryPolicy(max_attempts=5, backoff_seconds=5.0, sleep=sleeper)
