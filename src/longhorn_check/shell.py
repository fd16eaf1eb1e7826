from __future__ import annotations
import logging
import shutil
import subprocess
from typing import Optional, Sequence

from .errors import CommandError, CommandTimeout, ToolNotFound

log = logging.getLogger("longhorn_check.shell")


class Shell:
    """Runs external command-line clients and returns their stdout."""

    def __init__(self, timeout_s: float = 30.0) -> None:
        self.timeout_s = timeout_s

    def which(self, tool: str) -> Optional[str]:
        return shutil.which(tool)

    def run(self, argv: Sequence[str], input: Optional[str] = None, timeout_s: Optional[float] = None) -> str:
        timeout = timeout_s if timeout_s is not None else self.timeout_s
        log.debug("$ %s", " ".join(argv))
        try:
            proc = subprocess.run(
                list(argv),
                input=input,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise ToolNotFound(argv, None, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise CommandTimeout(argv, None, f"no result after {timeout:.0f}s") from e
        if proc.returncode != 0:
            log.debug("exit %s: %s", proc.returncode, proc.stderr.strip())
            raise CommandError(argv, proc.returncode, proc.stderr or proc.stdout)
        return proc.stdout
