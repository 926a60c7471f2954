from __future__ import annotations

import pytest

from core.services.retry import RetryPolicy, retry_until


def test_fixed_interval_is_the_default_schedule():
    policy = RetryPolicy(max_attempts=4, base_delay=2.0)
    assert policy.schedule() == [2.0, 2.0, 2.0]


def test_exponential_backoff_is_capped():
    policy = RetryPolicy(max_attempts=6, base_delay=1.0, backoff_factor=2.0, max_delay=5.0)
    assert policy.schedule() == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_stops_at_first_success_without_extra_sleep():
    sleeps: list[float] = []
    answers = iter([False, False, True])

    attempt = retry_until(lambda: next(answers), RetryPolicy(max_attempts=30, base_delay=2.0), sleep=sleeps.append)

    assert attempt == 3
    assert sleeps == [2.0, 2.0]


def test_exhaustion_probes_exactly_max_attempts():
    probes = 0
    sleeps: list[float] = []
    failures: list[int] = []

    def probe() -> bool:
        nonlocal probes
        probes += 1
        return False

    result = retry_until(
        probe,
        RetryPolicy(max_attempts=30, base_delay=2.0),
        sleep=sleeps.append,
        on_failure=lambda attempt, delay: failures.append(attempt),
    )

    assert result is None
    assert probes == 30
    assert sleeps == [2.0] * 29
    assert failures == list(range(1, 30))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"base_delay": -1.0},
        {"backoff_factor": 0.5},
    ],
)
def test_invalid_policies_are_rejected(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)
