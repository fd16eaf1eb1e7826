from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Protocol

from ..models import Outcome


class Check(Protocol):
    """Protocol for a single named check."""

    name: str
    description: str

    def run(self) -> Outcome:
        ...


@dataclass
class SimpleCheck:
    """Adapts a plain callable to the Check protocol."""

    name: str
    description: str
    fn: Callable[[], Outcome]

    def run(self) -> Outcome:
        return self.fn()
