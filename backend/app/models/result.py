from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], Any]) -> Ok[T]:
        _ = fn
        return self

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)

    def unwrap_or(self, default: T) -> T:
        _ = default
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> Err[E]:
        _ = fn
        return self

    def map_err(self, fn: Callable[[E], F]) -> Err[F]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Any]) -> Err[E]:
        _ = fn
        return self

    def unwrap_or(self, default: U) -> U:
        return default


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class Some(Generic[T]):
    value: T

    def is_some(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> Some[U]:
        return Some(fn(self.value))

    def and_then(self, fn: Callable[[T], Option[U]]) -> Option[U]:
        return fn(self.value)

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        if predicate(self.value):
            return self
        return NOTHING

    def ok_or(self, error: E) -> Ok[T]:
        _ = error
        return Ok(self.value)

    def unwrap_or(self, default: T) -> T:
        _ = default
        return self.value


@dataclass(frozen=True)
class Nothing:
    def is_some(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> Nothing:
        _ = fn
        return self

    def and_then(self, fn: Callable[[Any], Any]) -> Nothing:
        _ = fn
        return self

    def filter(self, predicate: Callable[[Any], bool]) -> Nothing:
        _ = predicate
        return self

    def ok_or(self, error: E) -> Err[E]:
        return Err(error)

    def unwrap_or(self, default: U) -> U:
        return default


NOTHING = Nothing()

Option = Union[Some[T], Nothing]


def from_nullable(value: T | None) -> Option[T]:
    if value is None:
        return NOTHING
    return Some(value)
