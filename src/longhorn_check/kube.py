from __future__ import annotations
import json
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from .config import Settings
from .errors import CommandError
from .resources import NodeList, PersistentVolumeClaim, PodList, StorageClassList
from .shell import Shell

log = logging.getLogger("longhorn_check.kube")


class KubeClient:
    """Cluster API access through kubectl."""

    def __init__(self, shell: Shell, settings: Settings) -> None:
        self.shell = shell
        self.settings = settings

    def _argv(self, *args: str) -> List[str]:
        argv = [self.settings.kubectl]
        if self.settings.kubeconfig:
            argv += ["--kubeconfig", self.settings.kubeconfig]
        if self.settings.context:
            argv += ["--context", self.settings.context]
        argv += list(args)
        return argv

    def _run(self, *args: str, input: Optional[str] = None, timeout_s: Optional[float] = None) -> str:
        return self.shell.run(
            self._argv(*args),
            input=input,
            timeout_s=timeout_s if timeout_s is not None else self.settings.command_timeout_s,
        )

    def _get_json(self, kind: str, name: Optional[str] = None, namespace: Optional[str] = None) -> str:
        args = ["get", kind]
        if name:
            args.append(name)
        if namespace:
            args += ["-n", namespace]
        args += ["-o", "json"]
        return self._run(*args)

    # ------- reads -------

    def cluster_info(self) -> str:
        return self._run("cluster-info")

    def list_pods(self, namespace: str) -> PodList:
        return PodList.model_validate_json(self._get_json("pods", namespace=namespace))

    def list_nodes(self) -> NodeList:
        return NodeList.model_validate_json(self._get_json("nodes"))

    def list_storage_classes(self) -> StorageClassList:
        return StorageClassList.model_validate_json(self._get_json("storageclass"))

    def pvc_phase(self, name: str, namespace: str) -> Optional[str]:
        """Phase of a claim, or None if it does not exist."""
        try:
            raw = self._get_json("pvc", name=name, namespace=namespace)
        except CommandError as e:
            if e.not_found:
                return None
            raise
        return PersistentVolumeClaim.model_validate_json(raw).status.phase

    # ------- writes -------

    def apply(self, manifest: Dict[str, Any]) -> str:
        meta = manifest.get("metadata", {})
        log.info("applying %s/%s", manifest.get("kind"), meta.get("name"))
        return self._run("apply", "-f", "-", input=json.dumps(manifest))

    def delete(self, kind: str, names: Sequence[str], namespace: str) -> str:
        log.info("deleting %s %s", kind, " ".join(names))
        return self._run("delete", kind, *names, "-n", namespace, "--ignore-not-found=true")

    def wait_for(self, resource: str, condition: str, namespace: str, timeout_s: float) -> bool:
        """Block until the condition holds; False if it did not within timeout_s."""
        try:
            self._run(
                "wait",
                f"--for=condition={condition}",
                resource,
                "-n",
                namespace,
                f"--timeout={math.ceil(timeout_s)}s",
                timeout_s=timeout_s + self.settings.command_timeout_s,
            )
        except CommandError as e:
            if e.returncode is None or "timed out waiting for the condition" not in e.stderr:
                raise
            log.debug("wait for %s on %s not satisfied: %s", condition, resource, e.stderr)
            return False
        return True
