from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class Status(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class Outcome:
    """Classification of a single check: Pass, Warn(reason) or Fail(reason)."""
    status: Status
    reason: str = ""

    @classmethod
    def passed(cls, reason: str = "") -> "Outcome":
        return cls(Status.PASS, reason)

    @classmethod
    def warn(cls, reason: str) -> "Outcome":
        return cls(Status.WARN, reason)

    @classmethod
    def fail(cls, reason: str) -> "Outcome":
        return cls(Status.FAIL, reason)

    @property
    def ok(self) -> bool:
        return self.status != Status.FAIL


@dataclass
class CheckResult:
    """Outcome of one executed check."""
    name: str
    description: str
    outcome: Outcome
    duration_s: float = 0.0


@dataclass
class Summary:
    """Per-run collection of check results, in execution order."""
    results: List[CheckResult] = field(default_factory=list)

    def add(self, result: CheckResult) -> None:
        self.results.append(result)

    @property
    def outcomes(self) -> Dict[str, Outcome]:
        return {r.name: r.outcome for r in self.results}

    def counts(self) -> Tuple[int, int, int]:
        ok = warn = fail = 0
        for r in self.results:
            if r.outcome.status == Status.PASS:
                ok += 1
            elif r.outcome.status == Status.WARN:
                warn += 1
            else:
                fail += 1
        return ok, warn, fail

    def has_failures(self) -> bool:
        return any(r.outcome.status == Status.FAIL for r in self.results)

    def has_warnings(self) -> bool:
        return any(r.outcome.status == Status.WARN for r in self.results)

    def exit_code(self, fail_on_warn: bool = False) -> int:
        if self.has_failures():
            return 1
        if fail_on_warn and self.has_warnings():
            return 2
        return 0
