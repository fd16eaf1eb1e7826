from __future__ import annotations
import logging
import time
from typing import Callable, Optional, Sequence

from .checks.base import Check
from .models import CheckResult, Outcome, Summary

log = logging.getLogger("longhorn_check.runner")


class ProbeRunner:
    """Runs checks strictly in order and collects one result per check.

    A Warn or Fail never stops the sequence. The optional preflight is the
    only place a fatal error (ClusterUnreachable) may come from; it is
    raised before any check runs.
    """

    def __init__(
        self,
        preflight: Optional[Callable[[], None]] = None,
        on_result: Optional[Callable[[CheckResult], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.preflight = preflight
        self.on_result = on_result
        self.clock = clock

    def run(self, checks: Sequence[Check], teardown: Sequence[Check] = ()) -> Summary:
        if self.preflight is not None:
            self.preflight()
        summary = Summary()
        try:
            for check in checks:
                self._execute(check, summary)
        finally:
            # teardown also runs when the sequence is interrupted
            for check in teardown:
                self._execute(check, summary)
        return summary

    def _execute(self, check: Check, summary: Summary) -> None:
        log.info("running %s: %s", check.name, check.description)
        start = self.clock()
        try:
            outcome = check.run()
        except Exception as e:
            log.debug("check %s raised", check.name, exc_info=True)
            outcome = Outcome.fail(str(e) or type(e).__name__)
        result = CheckResult(
            name=check.name,
            description=check.description,
            outcome=outcome,
            duration_s=self.clock() - start,
        )
        summary.add(result)
        if self.on_result is not None:
            self.on_result(result)
