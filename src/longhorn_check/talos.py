from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

import yaml

from .config import Settings
from .errors import CommandError
from .shell import Shell

log = logging.getLogger("longhorn_check.talos")


def _extension_name(doc: Dict[str, Any]) -> Optional[str]:
    spec = doc.get("spec") or {}
    meta = spec.get("metadata") or {}
    if meta.get("name"):
        return meta["name"]
    return (doc.get("metadata") or {}).get("id")


class TalosClient:
    """Node administration queries through talosctl. Read-only."""

    def __init__(self, shell: Shell, settings: Settings) -> None:
        self.shell = shell
        self.settings = settings

    def available(self) -> bool:
        return self.shell.which(self.settings.talosctl) is not None

    def _argv(self, node: Optional[str], *args: str) -> List[str]:
        argv = [self.settings.talosctl]
        if self.settings.talosconfig:
            argv += ["--talosconfig", self.settings.talosconfig]
        if node:
            argv += ["-n", node]
        argv += list(args)
        return argv

    def extensions(self, node: Optional[str] = None) -> List[str]:
        out = self.shell.run(
            self._argv(node, "get", "extensions", "-o", "yaml"),
            timeout_s=self.settings.command_timeout_s,
        )
        names: List[str] = []
        for doc in yaml.safe_load_all(out):
            if not isinstance(doc, dict):
                continue
            name = _extension_name(doc)
            if name and name not in names:
                names.append(name)
        log.debug("extensions on %s: %s", node or "default nodes", names)
        return names

    def file_exists(self, node: str, path: str) -> bool:
        try:
            self.shell.run(self._argv(node, "ls", path), timeout_s=self.settings.command_timeout_s)
        except CommandError as e:
            if e.returncode is not None and (e.not_found or "no such file" in e.stderr.lower()):
                return False
            raise
        return True
