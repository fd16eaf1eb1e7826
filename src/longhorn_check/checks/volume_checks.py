from __future__ import annotations
import time
from typing import Callable, Optional

from ..config import Settings
from ..errors import CommandError
from ..kube import KubeClient
from ..manifests import pod_manifest, pvc_manifest
from ..models import Outcome
from ..util import poll_until


class VolumeClaimCheck:
    """Creates a PVC on the Longhorn StorageClass and waits for it to bind."""

    def __init__(
        self,
        kube: KubeClient,
        settings: Settings,
        name: str,
        access_mode: str,
        pvc_name: str,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.kube = kube
        self.settings = settings
        self.name = name
        self.access_mode = access_mode
        self.pvc_name = pvc_name
        self.description = f"{access_mode} volume creation"
        self.clock = clock
        self.sleep = sleep

    def _phase(self) -> Optional[str]:
        return self.kube.pvc_phase(self.pvc_name, self.settings.test_namespace)

    def _bound_message(self) -> str:
        return f"{self.access_mode} volume {self.pvc_name} bound"

    def _unbound_message(self, phase: Optional[str], waited: float) -> str:
        return f"PVC {self.pvc_name} not bound after {waited:.0f}s (phase: {phase or 'unknown'})"

    def run(self) -> Outcome:
        s = self.settings
        manifest = pvc_manifest(self.pvc_name, s.test_namespace, self.access_mode, s.storage_class, s.volume_size)
        try:
            self.kube.apply(manifest)
        except CommandError as e:
            return Outcome.fail(f"could not create PVC {self.pvc_name}: {e}")
        try:
            res = poll_until(
                self._phase,
                lambda phase: phase == "Bound",
                timeout_s=s.bind_timeout_s,
                interval_s=s.poll_interval_s,
                clock=self.clock,
                sleep=self.sleep,
            )
        except CommandError as e:
            return Outcome.fail(str(e))
        if res.ok:
            return Outcome.passed(self._bound_message())
        return Outcome.warn(self._unbound_message(res.value, res.elapsed_s))


class RwxVolumeCheck(VolumeClaimCheck):
    """ReadWriteMany claims go through Longhorn's share-manager (NFS)."""

    def __init__(self, kube: KubeClient, settings: Settings, **kwargs) -> None:
        super().__init__(kube, settings, "VOL-RWX", "ReadWriteMany", settings.rwx_pvc_name, **kwargs)

    def _bound_message(self) -> str:
        return "RWX volume created (share-manager / NFS tools working)"

    def _unbound_message(self, phase: Optional[str], waited: float) -> str:
        return f"RWX not supported or not ready after {waited:.0f}s (phase: {phase or 'unknown'})"

    def run(self) -> Outcome:
        if self.settings.skip_rwx:
            return Outcome.passed("skipped (--skip-rwx)")
        return super().run()


class PodAttachCheck:
    name = "VOL-ATTACH"
    description = "Pod attaches RWO volume"

    def __init__(self, kube: KubeClient, settings: Settings) -> None:
        self.kube = kube
        self.settings = settings

    def run(self) -> Outcome:
        s = self.settings
        manifest = pod_manifest(s.pod_name, s.test_namespace, s.pod_image, s.pvc_name)
        try:
            self.kube.apply(manifest)
        except CommandError as e:
            return Outcome.fail(f"could not create pod {s.pod_name}: {e}")
        try:
            ready = self.kube.wait_for(f"pod/{s.pod_name}", "Ready", s.test_namespace, s.pod_ready_timeout_s)
        except CommandError as e:
            return Outcome.fail(str(e))
        if ready:
            return Outcome.passed(f"pod {s.pod_name} attached to volume {s.pvc_name}")
        return Outcome.warn(f"pod {s.pod_name} not ready after {s.pod_ready_timeout_s:.0f}s")


class CleanupCheck:
    """Removes everything the volume checks created. Absent resources are fine."""

    name = "CLEANUP"
    description = "Clean up test resources"

    def __init__(self, kube: KubeClient, settings: Settings) -> None:
        self.kube = kube
        self.settings = settings

    def run(self) -> Outcome:
        s = self.settings
        try:
            self.kube.delete("pod", [s.pod_name], s.test_namespace)
            self.kube.delete("pvc", [s.pvc_name, s.rwx_pvc_name], s.test_namespace)
        except CommandError as e:
            return Outcome.fail(f"cleanup incomplete: {e}")
        return Outcome.passed("cleanup complete")
