"""Retrying wrapper for unary RPC calls."""

from __future__ import annotations

import enum
import functools
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


class Code(enum.IntEnum):
    """RPC status codes."""

    CANCELED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class ConnectError(Exception):
    """An RPC failure carrying a status code."""

    def __init__(self, code: Code, message: str = "") -> None:
        super().__init__(f"{code.name.lower()}: {message}" if message else code.name.lower())
        self.code = code
        self.message = message


_RETRYABLE = frozenset({Code.DEADLINE_EXCEEDED, Code.CANCELED})


def _find_connect_error(err: BaseException) -> ConnectError | None:
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        if isinstance(current, ConnectError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def _delegate(next_call: F) -> F:
    @functools.wraps(next_call)
    def call(*args: Any, **kwargs: Any) -> Any:
        return next_call(*args, **kwargs)

    return call  # type: ignore[return-value]


@dataclass
class RetryInterceptor:
    """Retries unary calls that fail with a deadline or cancellation error."""

    max_retries: int = 0
    backoff: float = 0.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def wrap_unary(self, next_call: F) -> F:
        @functools.wraps(next_call)
        def call(*args: Any, **kwargs: Any) -> Any:
            last: BaseException | None = None
            for _ in range(self.max_retries + 1):
                try:
                    return next_call(*args, **kwargs)
                except Exception as err:
                    found = _find_connect_error(err)
                    if found is None or found.code not in _RETRYABLE:
                        raise
                    last = err
                    self.sleep(self.backoff)
            assert last is not None
            raise last

        return call  # type: ignore[return-value]

    def wrap_streaming_client(self, next_call: F) -> F:
        """Wrap a streaming client call; streams are not retried."""
        return _delegate(next_call)

    def wrap_streaming_handler(self, next_call: F) -> F:
        """Wrap a streaming handler; streams are not retried."""
        return _delegate(next_call)