"""
Result type - explicit success/failure values for the public operation surface.

Engine operations return ``Ok(value)`` or ``Err(error)`` instead of raising,
so callers (UI layers, the CLI) can render a failure without crashing.

Example:
    >>> result = await engine.get_status()
    >>> if result.is_ok():
    ...     print(result.unwrap().current_branch)
    ... else:
    ...     print(result.unwrap_err().code)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union


T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


__all__ = ["Err", "Ok", "Result", "ResultError"]


class ResultError(Exception):
    """Raised when unwrapping the wrong variant of a Result."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result holding a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def ok(self) -> T:
        return self.value

    def err(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise ResultError(f"Called unwrap_err on Ok: {self.value!r}")

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, fn: Callable[[Any], T]) -> T:
        return self.value

    def expect(self, message: str) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], F]) -> Ok[T]:
        return self

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)

    def or_else(self, fn: Callable[[Any], Result[T, F]]) -> Ok[T]:
        return self

    def inspect(self, fn: Callable[[T], Any]) -> Ok[T]:
        fn(self.value)
        return self

    def inspect_err(self, fn: Callable[[Any], Any]) -> Ok[T]:
        return self

    def to_optional(self) -> T | None:
        return self.value

    def to_exception(self, factory: Callable[[Any], Exception] | None = None) -> T:
        return self.value

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result holding an error."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self.error

    def unwrap(self) -> Any:
        raise ResultError(f"Called unwrap on Err: {self.error}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, fn: Callable[[E], T]) -> T:
        return fn(self.error)

    def expect(self, message: str) -> Any:
        raise ResultError(f"{message}: {self.error}")

    def map(self, fn: Callable[[Any], U]) -> Err[E]:
        return self

    def map_err(self, fn: Callable[[E], F]) -> Err[F]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Result[U, E]]) -> Err[E]:
        return self

    def or_else(self, fn: Callable[[E], Result[T, F]]) -> Result[T, F]:
        return fn(self.error)

    def inspect(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def inspect_err(self, fn: Callable[[E], Any]) -> Err[E]:
        fn(self.error)
        return self

    def to_optional(self) -> None:
        return None

    def to_exception(self, factory: Callable[[E], Exception] | None = None) -> Any:
        if factory is not None:
            raise factory(self.error)
        if isinstance(self.error, Exception):
            raise self.error
        raise ResultError(str(self.error))

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


class Result:
    """
    Namespace for Result factories.

    ``Result[T, E]`` in annotations means ``Ok[T] | Err[E]``.
    """

    def __class_getitem__(cls, params: Any) -> Any:
        ok_type, err_type = params
        return Union[Ok[ok_type], Err[err_type]]  # noqa: UP007

    @staticmethod
    def from_optional(value: T | None, error: E) -> Ok[T] | Err[E]:
        """Wrap a possibly-missing value."""
        if value is None:
            return Err(error)
        return Ok(value)

    @staticmethod
    def try_call(
        fn: Callable[[], T],
        error_factory: Callable[[Exception], E] | None = None,
    ) -> Ok[T] | Err[Any]:
        """Call ``fn`` and capture any exception as an Err."""
        try:
            return Ok(fn())
        except Exception as e:
            if error_factory is not None:
                return Err(error_factory(e))
            return Err(e)
