"""Result[T, E] — Ok and Err variants returned by non-raising entry points."""

from __future__ import annotations

from typing import Callable, Generic, NoReturn, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)


class Ok(Generic[T]):
    """Successful result variant."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self._value

    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        return Ok(func(self._value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and other._value == self._value

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"


class Err(Generic[E]):
    """Error result variant; :meth:`unwrap` re-raises the held exception."""

    __slots__ = ("_error",)

    def __init__(self, error: E) -> None:
        self._error = error

    @property
    def error(self) -> E:
        return self._error

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self._error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable[[T], U]) -> "Err[E]":  # noqa: ARG002
        return self

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Err) and other._error is self._error

    def __repr__(self) -> str:
        return f"Err({self._error!r})"


Result = Ok[T] | Err[E]

__all__ = ["Err", "Ok", "Result"]
