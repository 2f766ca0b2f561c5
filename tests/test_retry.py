import pytest

from video2blog.utils.retry import with_retry


def test_returns_first_success_without_sleeping():
    sleeps = []
    assert with_retry(lambda: "ok", sleep=sleeps.append) == "ok"
    assert sleeps == []


def test_retries_with_linear_delay():
    sleeps = []
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionResetError("reset")
        return "done"

    assert with_retry(flaky, retries=3, base_delay=2.0, sleep=sleeps.append) == "done"
    assert sleeps == [2.0, 4.0]


def test_raises_last_error_after_exhausting_attempts():
    sleeps = []
    errors = iter([TimeoutError("first"), TimeoutError("second"), TimeoutError("third")])

    def always_fails():
        raise next(errors)

    with pytest.raises(TimeoutError, match="third"):
        with_retry(always_fails, retries=3, base_delay=1.0, sleep=sleeps.append)
    assert sleeps == [1.0, 2.0]


def test_non_retryable_error_is_raised_immediately():
    sleeps = []
    calls = []

    def bad_credentials():
        calls.append(1)
        raise PermissionError("invalid api key")

    with pytest.raises(PermissionError):
        with_retry(
            bad_credentials,
            retries=3,
            should_retry=lambda exc: isinstance(exc, ConnectionError),
            sleep=sleeps.append,
        )
    assert len(calls) == 1
    assert sleeps == []
