from __future__ import annotations
from typing import Any, Dict

MANAGED_BY = {"app.kubernetes.io/managed-by": "longhorn-check"}


def pvc_manifest(name: str, namespace: str, access_mode: str, storage_class: str, size: str) -> Dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {"name": name, "namespace": namespace, "labels": dict(MANAGED_BY)},
        "spec": {
            "accessModes": [access_mode],
            "storageClassName": storage_class,
            "resources": {"requests": {"storage": size}},
        },
    }


def pod_manifest(name: str, namespace: str, image: str, claim_name: str) -> Dict[str, Any]:
    """Single-container pod that mounts the claim at /data."""
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": name, "namespace": namespace, "labels": dict(MANAGED_BY)},
        "spec": {
            "containers": [
                {
                    "name": "test",
                    "image": image,
                    "volumeMounts": [{"name": "test-volume", "mountPath": "/data"}],
                }
            ],
            "volumes": [
                {"name": "test-volume", "persistentVolumeClaim": {"claimName": claim_name}},
            ],
        },
    }
