"""Lightweight Result types (Ok/Err) returned by the public operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeGuard, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: Exception

    @property
    def message(self) -> str:
        return str(self.error)


Result = Union[Ok[T], Err]

OK_NONE = Ok(None)


def is_ok(result: Result[T]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err(result: Result[T]) -> TypeGuard[Err]:
    return isinstance(result, Err)


def unwrap(result: Result[T]) -> T:
    if isinstance(result, Ok):
        return result.value
    raise result.error


def error_message(result: Result[T]) -> Optional[str]:
    if isinstance(result, Err):
        return str(result.error)
    return None


def capture(func: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Run ``func`` and turn a project error into ``Err``.

    Only :class:`~hack_downloader.exceptions.BaseError` is captured; anything
    else is a bug and propagates.
    """
    from ..exceptions import BaseError

    try:
        return Ok(func(*args, **kwargs))
    except BaseError as exc:
        return Err(exc)
