from __future__ import annotations
from typing import Optional, Sequence


class ProbeError(Exception):
    """Base class for errors raised while probing a cluster."""


class CommandError(ProbeError):
    """An external CLI exited unsuccessfully."""

    def __init__(self, argv: Sequence[str], returncode: Optional[int], stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr.strip()
        super().__init__(self._describe())

    def _describe(self) -> str:
        cmd = " ".join(self.argv[:3])
        detail = self.stderr or "no output"
        return f"{cmd} failed (exit {self.returncode}): {detail}"

    @property
    def not_found(self) -> bool:
        text = self.stderr.lower()
        return "notfound" in text or "not found" in text


class ToolNotFound(CommandError):
    """The executable is not installed or not on PATH."""

    def _describe(self) -> str:
        return f"{self.argv[0]} not available"


class CommandTimeout(CommandError):
    """The external CLI did not finish within its timeout."""

    def _describe(self) -> str:
        return f"{' '.join(self.argv[:3])} timed out"


class ClusterUnreachable(ProbeError):
    """Fatal: the cluster API cannot be reached, no checks can run."""
