from __future__ import annotations
from typing import Callable, List, Optional

from ..checks.base import Check
from ..checks.longhorn_checks import PodsCheck, StorageClassCheck
from ..checks.talos_checks import ExtensionsCheck, IscsiadmCheck
from ..checks.volume_checks import CleanupCheck, PodAttachCheck, RwxVolumeCheck, VolumeClaimCheck
from ..config import Settings
from ..errors import ClusterUnreachable, CommandError
from ..kube import KubeClient
from ..models import CheckResult, Summary
from ..runner import ProbeRunner
from ..shell import Shell
from ..talos import TalosClient


class LonghornSuite:
    """
    Longhorn-on-Talos smoke test:
      - Talos extensions and iscsiadm on a node
      - Longhorn pods and StorageClass
      - RWO claim, pod attach, RWX claim
      - cleanup (always)
    """

    def __init__(self, settings: Settings, shell: Optional[Shell] = None) -> None:
        self.settings = settings
        self.shell = shell or Shell(timeout_s=settings.command_timeout_s)
        self.kube = KubeClient(self.shell, settings)
        self.talos = TalosClient(self.shell, settings)

    def preflight(self) -> None:
        try:
            self.kube.cluster_info()
        except CommandError as e:
            raise ClusterUnreachable(f"Not connected to a Kubernetes cluster: {e}") from e

    def checks(self) -> List[Check]:
        s = self.settings
        return [
            ExtensionsCheck(self.talos, s),
            IscsiadmCheck(self.kube, self.talos, s),
            PodsCheck(self.kube, s),
            StorageClassCheck(self.kube, s),
            VolumeClaimCheck(self.kube, s, "VOL-RWO", "ReadWriteOnce", s.pvc_name),
            PodAttachCheck(self.kube, s),
            RwxVolumeCheck(self.kube, s),
        ]

    def teardown(self) -> List[Check]:
        return [CleanupCheck(self.kube, self.settings)]

    def run(self, on_result: Optional[Callable[[CheckResult], None]] = None) -> Summary:
        runner = ProbeRunner(preflight=self.preflight, on_result=on_result)
        return runner.run(self.checks(), teardown=self.teardown())
