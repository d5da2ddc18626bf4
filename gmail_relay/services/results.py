"""
Gmail Relay — Outcomes of Non-Fatal Steps
==========================================

What:  Tiny result types for steps whose failure must not abort a request.
Who:   Display-name lookup strategies and the SENT-label step.

    Ok(value)         the step ran; value may be None ("nothing found")
    Degraded(reason)  the step failed; the caller falls back and logs it

Callers branch on the type explicitly instead of catching broad exceptions.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: Optional[T] = None


@dataclass(frozen=True)
class Degraded:
    reason: str
    step: str = ""


Outcome = Union[Ok[Any], Degraded]
