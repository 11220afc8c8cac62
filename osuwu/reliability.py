from __future__ import annotations

import httpx
from fastapi import status
from tenacity import RetryCallState
from tenacity import retry_if_exception
from tenacity.wait import wait_base


class retry_if_exception_network_related(retry_if_exception):
    """Retries if an exception is from a network related failure, or the
    osu! api asked us to slow down."""

    def __init__(self) -> None:
        def predicate(exc: BaseException) -> bool:
            if isinstance(exc, httpx.HTTPStatusError):
                if exc.response.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
                    return True
            elif isinstance(exc, (httpx.NetworkError, httpx.TimeoutException)):
                return True
            return False

        super().__init__(predicate)


class wait_retry_after(wait_base):
    """Waits as long as a rate limited response's `Retry-After` header asks,
    and falls back to another strategy for everything else."""

    def __init__(self, fallback: wait_base, maximum: float = 60.0) -> None:
        self.fallback = fallback
        self.maximum = maximum

    def __call__(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            exc = outcome.exception()
            if isinstance(exc, httpx.HTTPStatusError):
                retry_after = exc.response.headers.get("Retry-After", "")
                # only the delay-seconds form is used by the osu! api
                if retry_after.isdigit():
                    return min(float(retry_after), self.maximum)

        return self.fallback(retry_state)
