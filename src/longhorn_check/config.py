from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for cluster access and probe behaviour."""

    kubectl: str = "kubectl"
    talosctl: str = "talosctl"
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    talosconfig: Optional[str] = None
    talos_node: Optional[str] = None

    longhorn_namespace: str = "longhorn-system"
    test_namespace: str = "default"
    storage_class: str = "longhorn"
    required_extensions: Tuple[str, ...] = ("iscsi-tools", "util-linux-tools")
    iscsiadm_path: str = "/usr/local/bin/iscsiadm"
    min_running_pods: int = 16

    pvc_name: str = "test-longhorn-pvc"
    rwx_pvc_name: str = "test-longhorn-rwx-pvc"
    pod_name: str = "test-longhorn-pod"
    pod_image: str = "nginx:alpine"
    volume_size: str = "1Gi"
    skip_rwx: bool = False

    command_timeout_s: float = 30.0
    bind_timeout_s: float = 30.0
    pod_ready_timeout_s: float = 60.0
    poll_interval_s: float = 2.0
