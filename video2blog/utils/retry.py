import time
from typing import Callable, Optional, TypeVar


T = TypeVar("T")


def with_retry(
    func: Callable[[], T],
    retries: int = 3,
    base_delay: float = 1.0,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``func`` up to ``retries`` times, waiting ``base_delay * attempt`` between tries.

    Errors rejected by ``should_retry`` are raised on the spot.
    """
    last_error: Exception | None = None
    for attempt in range(1, retries + 1):
        try:
            return func()
        except Exception as exc:
            last_error = exc
            if attempt >= retries or (should_retry is not None and not should_retry(exc)):
                raise
            delay = base_delay * attempt
            print(f"[retry] attempt {attempt} failed: {exc}; retrying in {delay:.1f}s")
            sleep(delay)
    if last_error:
        raise last_error
    raise RuntimeError("Retry failed without exception")
