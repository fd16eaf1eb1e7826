"""Pydantic views of the Kubernetes objects the probe reads back."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CLASS_ANNOTATIONS = (
    "storageclass.kubernetes.io/is-default-class",
    "storageclass.beta.kubernetes.io/is-default-class",
)


class _KubeModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMeta(_KubeModel):
    name: str
    namespace: Optional[str] = None
    annotations: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)


class ContainerStateDetail(_KubeModel):
    reason: Optional[str] = None


class ContainerState(_KubeModel):
    running: Optional[Dict[str, Any]] = None
    waiting: Optional[ContainerStateDetail] = None
    terminated: Optional[ContainerStateDetail] = None


class ContainerStatus(_KubeModel):
    name: str
    ready: bool = False
    state: ContainerState = Field(default_factory=ContainerState)

    @property
    def problem(self) -> Optional[str]:
        """Reason kubectl would show in its STATUS column, if the container is unhealthy."""
        if self.state.waiting is not None:
            return self.state.waiting.reason or "Waiting"
        if self.state.terminated is not None:
            return self.state.terminated.reason or "Terminated"
        return None


class PodStatus(_KubeModel):
    phase: Optional[str] = None
    container_statuses: List[ContainerStatus] = Field(default_factory=list, alias="containerStatuses")


class Pod(_KubeModel):
    metadata: ObjectMeta
    status: PodStatus = Field(default_factory=PodStatus)

    @property
    def running(self) -> bool:
        """Running phase with no container waiting or terminated (e.g. CrashLoopBackOff)."""
        if self.status.phase != "Running":
            return False
        return all(c.problem is None for c in self.status.container_statuses)


class PodList(_KubeModel):
    items: List[Pod] = Field(default_factory=list)


class NodeAddress(_KubeModel):
    type: str
    address: str


class NodeStatus(_KubeModel):
    addresses: List[NodeAddress] = Field(default_factory=list)


class Node(_KubeModel):
    metadata: ObjectMeta
    status: NodeStatus = Field(default_factory=NodeStatus)

    @property
    def internal_ip(self) -> Optional[str]:
        for a in self.status.addresses:
            if a.type == "InternalIP":
                return a.address
        return None


class NodeList(_KubeModel):
    items: List[Node] = Field(default_factory=list)


class StorageClass(_KubeModel):
    metadata: ObjectMeta
    provisioner: Optional[str] = None

    @property
    def is_default(self) -> bool:
        ann = self.metadata.annotations
        return any(ann.get(key) == "true" for key in DEFAULT_CLASS_ANNOTATIONS)


class StorageClassList(_KubeModel):
    items: List[StorageClass] = Field(default_factory=list)

    def get(self, name: str) -> Optional[StorageClass]:
        for sc in self.items:
            if sc.metadata.name == name:
                return sc
        return None

    def defaults(self) -> List[str]:
        return [sc.metadata.name for sc in self.items if sc.is_default]


class PvcStatus(_KubeModel):
    phase: Optional[str] = None


class PersistentVolumeClaim(_KubeModel):
    metadata: ObjectMeta
    status: PvcStatus = Field(default_factory=PvcStatus)
