"""Explicit state machine for write requests (idle -> pending -> success | error)."""

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any, Generic, TypeVar

from src.core.exceptions import MutationInProgressError

V = TypeVar("V")
R = TypeVar("R")

Rollback = Callable[[], None]


class MutationStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class Mutation(Generic[V, R]):
    """
    One write operation with observable status.

    ``optimistic(variables)`` may change local state before the request and
    returns a rollback callable; the rollback runs if ``fn`` raises. Errors
    never propagate out of run(): they are stored on ``error`` and passed to
    ``on_error``.
    """

    def __init__(
        self,
        fn: Callable[[V], Awaitable[R]],
        *,
        name: str = "mutation",
        on_success: Callable[[R, V], Any] | None = None,
        on_error: Callable[[Exception, V], Any] | None = None,
        optimistic: Callable[[V], Rollback | None] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.fn = fn
        self.name = name
        self.on_success = on_success
        self.on_error = on_error
        self.optimistic = optimistic
        self.logger = logger or logging.getLogger(__name__)
        self.status = MutationStatus.IDLE
        self.result: R | None = None
        self.error: Exception | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is MutationStatus.PENDING

    def reset(self) -> None:
        if self.is_pending:
            raise MutationInProgressError(self.name)
        self.status = MutationStatus.IDLE
        self.result = None
        self.error = None

    async def run(self, variables: V) -> R | None:
        if self.is_pending:
            raise MutationInProgressError(self.name)

        self.status = MutationStatus.PENDING
        self.result = None
        self.error = None
        rollback = self.optimistic(variables) if self.optimistic else None

        try:
            result = await self.fn(variables)
        except Exception as e:
            if rollback is not None:
                rollback()
            self.status = MutationStatus.ERROR
            self.error = e
            self.logger.info("%s failed: %s", self.name, e)
            if self.on_error:
                await maybe_await(self.on_error(e, variables))
            return None

        self.status = MutationStatus.SUCCESS
        self.result = result
        if self.on_success:
            await maybe_await(self.on_success(result, variables))
        return result
