"""
Retries store operations which fail with a transient (connectivity) fault.

Policy: up to 3 retries after the first attempt, waiting 2s, 4s and 8s before them. No jitter.
The failure of the final attempt is re-raised unchanged. Non-transient failures are raised after the first attempt.

Cancellation: asyncio task cancellation propagates through the store call and the backoff wait. A caller may also pass an
asyncio.Event; once it is set, the operation is abandoned at the next attempt boundary, during the store call, or during the
backoff wait, and asyncio.CancelledError is raised without consuming a retry.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from .mongo_db import is_transient_fault
from ..utilities.logger import logger


T = TypeVar('T')


@dataclass(frozen=True)
class RetryPolicy:
    """ Retry configuration. """
    max_retries: int = 3
    base_delay_s: float = 2.0
    backoff_multiplier: float = 2.0

    def delay_for(self, retry_number: int) -> float:
        """ Seconds to wait before the given retry. Retries are numbered from 1, so the default policy waits 2s, 4s, 8s. """
        if retry_number < 1:
            raise ValueError(f"Retries are numbered from 1. Got {retry_number}.")
        return self.base_delay_s * (self.backoff_multiplier ** (retry_number - 1))

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


class ResilientExecutor:
    """ Runs an async store operation, retrying it while it fails with a transient fault. """

    def __init__(
            self,
            policy: RetryPolicy | None = None,
            *,
            is_transient: Callable[[BaseException], bool] = is_transient_fault,
            sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
        ) -> None:
        self.policy = policy or RetryPolicy()
        self.is_transient = is_transient
        self._sleep = sleep

    async def execute(
            self,
            operation: Callable[[], Awaitable[T]],
            *,
            cancellation: asyncio.Event | None = None,
            operation_name: str = "Store operation"
        ) -> T:
        """ Run the operation. The operation is a zero-argument callable which returns a new awaitable for every attempt. """
        retry_count = 0
        while True:
            self._raise_if_cancelled(cancellation, operation_name)

            try:
                return await self._run_cancellable(operation(), cancellation, operation_name)
            except Exception as e:
                if not self.is_transient(e) or retry_count >= self.policy.max_retries:
                    raise
                retry_count += 1
                delay = self.policy.delay_for(retry_count)
                logger.warning(f"{operation_name}: retry {retry_count} after {delay}s delay due to: {e}")

            await self._run_cancellable(self._sleep(delay), cancellation, operation_name)

    @staticmethod
    def _raise_if_cancelled(cancellation: asyncio.Event | None, operation_name: str) -> None:
        if cancellation is not None and cancellation.is_set():
            raise asyncio.CancelledError(f"{operation_name} was cancelled.")

    @staticmethod
    async def _run_cancellable(awaitable: Awaitable[T], cancellation: asyncio.Event | None, operation_name: str) -> T:
        """ Await the awaitable, abandoning it as soon as the cancellation event is set. """
        if cancellation is None:
            return await awaitable

        work = asyncio.ensure_future(awaitable)
        cancelled = asyncio.ensure_future(cancellation.wait())
        try:
            await asyncio.wait({work, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not work.done():
                work.cancel()

        if work.done() and not work.cancelled():
            return work.result()
        raise asyncio.CancelledError(f"{operation_name} was cancelled.")
