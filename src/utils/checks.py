"""Startup sanity checks for wiring objects together."""

from typing import Any, Type, TypeVar

T = TypeVar("T")


def ensure_instance(obj: Any, expected: Type[T]) -> T:
    """
    Return obj unchanged if it is an instance of expected.

    Raises:
        TypeError: on mismatch (a wiring error, fatal at startup)
    """
    if isinstance(obj, expected):
        return obj
    raise TypeError(f"Object instance check failed: {obj!r} isn't {expected.__name__}")
