"""
Result Type

Application handlers never let domain failures escape as exceptions; they
return a Result that is either a success carrying a value or a failure
carrying a DomainError. Interface code (views, tasks) branches on
``result.ok``.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from shared.domain.errors import DomainError, InternalError

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: DomainError | None = None

    @classmethod
    def success(cls, value: T = None) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: DomainError) -> 'Result[T]':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or re-raise the carried error"""
        if self.error is not None:
            raise self.error
        return self.value


def returns_result(func: Callable[..., T]) -> Callable[..., Result[T]]:
    """
    Wrap a handler so that it returns a Result

    DomainError becomes a failure as-is. Any other exception is logged with
    its traceback and reported as an opaque InternalError.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Result[T]:
        try:
            return Result.success(func(*args, **kwargs))
        except DomainError as e:
            logger.info(f"{func.__qualname__} rejected: {e.code} ({e.message})")
            return Result.failure(e)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__qualname__}: {e}", exc_info=True)
            return Result.failure(InternalError())

    return wrapper
