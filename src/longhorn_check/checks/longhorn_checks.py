from __future__ import annotations

from ..config import Settings
from ..errors import CommandError
from ..kube import KubeClient
from ..models import Outcome


class PodsCheck:
    """Longhorn control-plane pods are scheduled and running."""

    name = "LH-PODS"
    description = "Longhorn deployment"

    def __init__(self, kube: KubeClient, settings: Settings) -> None:
        self.kube = kube
        self.settings = settings

    def run(self) -> Outcome:
        ns = self.settings.longhorn_namespace
        try:
            pods = self.kube.list_pods(ns).items
        except CommandError as e:
            return Outcome.fail(str(e))
        total = len(pods)
        running = sum(1 for p in pods if p.running)
        counts = f"Total pods: {total}, Running: {running}"
        if total == 0:
            return Outcome.fail(f"no pods in namespace {ns}")
        if running >= self.settings.min_running_pods:
            return Outcome.passed(f"{counts}; Longhorn appears healthy")
        return Outcome.warn(f"{counts}; some Longhorn pods may not be running")


class StorageClassCheck:
    name = "LH-SC"
    description = "Longhorn StorageClass"

    def __init__(self, kube: KubeClient, settings: Settings) -> None:
        self.kube = kube
        self.settings = settings

    def run(self) -> Outcome:
        name = self.settings.storage_class
        try:
            classes = self.kube.list_storage_classes()
        except CommandError as e:
            return Outcome.fail(str(e))
        sc = classes.get(name)
        if sc is None:
            return Outcome.fail(f"StorageClass {name} not found")
        defaults = classes.defaults()
        if sc.is_default:
            return Outcome.passed(f"{name} ({sc.provisioner or 'unknown provisioner'}) is default")
        current = ", ".join(defaults) if defaults else "none"
        return Outcome.warn(f"{name} is not default (default StorageClass: {current})")
