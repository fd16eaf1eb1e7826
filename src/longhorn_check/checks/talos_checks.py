from __future__ import annotations
from typing import Optional

from ..config import Settings
from ..errors import CommandError
from ..kube import KubeClient
from ..models import Outcome
from ..talos import TalosClient


class ExtensionsCheck:
    """Talos system extensions Longhorn depends on (iSCSI, util-linux)."""

    name = "TALOS-EXT"
    description = "Talos system extensions"

    def __init__(self, talos: TalosClient, settings: Settings) -> None:
        self.talos = talos
        self.settings = settings

    def run(self) -> Outcome:
        if not self.talos.available():
            return Outcome.warn(f"{self.settings.talosctl} not available, skipping extension checks")
        try:
            installed = self.talos.extensions(self.settings.talos_node)
        except CommandError as e:
            return Outcome.warn(f"Extensions not visible via talosctl: {e}")
        missing = [x for x in self.settings.required_extensions if x not in installed]
        if missing:
            return Outcome.warn(f"Extensions not visible via talosctl: {', '.join(missing)}")
        return Outcome.passed(", ".join(self.settings.required_extensions) + " installed")


class IscsiadmCheck:
    name = "TALOS-ISCSI"
    description = "iscsiadm present on node"

    def __init__(self, kube: KubeClient, talos: TalosClient, settings: Settings) -> None:
        self.kube = kube
        self.talos = talos
        self.settings = settings

    def _node(self) -> Optional[str]:
        if self.settings.talos_node:
            return self.settings.talos_node
        nodes = self.kube.list_nodes().items
        if not nodes:
            return None
        first = nodes[0]
        return first.internal_ip or first.metadata.name

    def run(self) -> Outcome:
        if not self.talos.available():
            return Outcome.warn(f"{self.settings.talosctl} not available, skipping iscsiadm check")
        try:
            node = self._node()
        except CommandError as e:
            return Outcome.fail(f"cannot list nodes: {e}")
        if node is None:
            return Outcome.fail("cluster reports no nodes")
        path = self.settings.iscsiadm_path
        try:
            found = self.talos.file_exists(node, path)
        except CommandError as e:
            return Outcome.warn(f"could not query {node}: {e}")
        if found:
            return Outcome.passed(f"{path} found on {node}")
        return Outcome.fail(f"{path} not found on {node}")
