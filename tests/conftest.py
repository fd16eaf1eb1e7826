from __future__ import annotations
import json
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest
import yaml

from longhorn_check.config import Settings
from longhorn_check.errors import CommandError, ToolNotFound


class FakeShell:
    """Scripted stand-in for Shell: the most recently registered matching prefix wins."""

    def __init__(self, tools: Sequence[str] = ("kubectl", "talosctl")) -> None:
        self.tools = set(tools)
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self.timeouts: List[Optional[float]] = []
        self._handlers: List[tuple] = []

    def on(self, *prefix: str, out: Any = "", error: Optional[Exception] = None) -> "FakeShell":
        self._handlers.append((list(prefix), out, error))
        return self

    def which(self, tool: str) -> Optional[str]:
        return f"/usr/local/bin/{tool}" if tool in self.tools else None

    def run(self, argv: Sequence[str], input: Optional[str] = None, timeout_s: Optional[float] = None) -> str:
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input)
        self.timeouts.append(timeout_s)
        if argv[0] not in self.tools:
            raise ToolNotFound(argv, None)
        for prefix, out, error in reversed(self._handlers):
            if argv[: len(prefix)] == prefix:
                if error is not None:
                    raise error
                return out(argv, input) if callable(out) else out
        raise AssertionError(f"unexpected command: {argv}")


def _pod(name: str, phase: str = "Running") -> Dict[str, Any]:
    return {"metadata": {"name": name, "namespace": "longhorn-system"}, "status": {"phase": phase}}


class FakeCluster(FakeShell):
    """In-memory cluster answering the kubectl and talosctl calls the probe makes."""

    def __init__(self, tools: Sequence[str] = ("kubectl", "talosctl")) -> None:
        super().__init__(tools)
        self.reachable = True
        self.longhorn_pods = [_pod(f"longhorn-manager-{i}") for i in range(18)]
        self.nodes = [
            {
                "metadata": {"name": "talos-cp-1"},
                "status": {"addresses": [{"type": "InternalIP", "address": "10.0.0.2"}, {"type": "Hostname", "address": "talos-cp-1"}]},
            }
        ]
        self.storage_classes = [
            {
                "metadata": {"name": "longhorn", "annotations": {"storageclass.kubernetes.io/is-default-class": "true"}},
                "provisioner": "driver.longhorn.io",
            }
        ]
        self.extensions = ["iscsi-tools", "util-linux-tools"]
        self.files = {"/usr/local/bin/iscsiadm"}
        # phases a new claim reports on successive reads, per access mode
        self.bind_phases: Dict[str, List[str]] = {"ReadWriteOnce": ["Bound"], "ReadWriteMany": ["Bound"]}
        self.pod_ready = True
        self.wait_error: Optional[str] = None
        self.pvcs: Dict[str, List[str]] = {}
        self.pods: Dict[str, Dict[str, Any]] = {}
        self.deleted: List[str] = []

    def run(self, argv: Sequence[str], input: Optional[str] = None, timeout_s: Optional[float] = None) -> str:
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input)
        self.timeouts.append(timeout_s)
        if argv[0] not in self.tools:
            raise ToolNotFound(argv, None)
        if argv[0] == "talosctl":
            return self._talos(argv)
        return self._kubectl(argv, input)

    @staticmethod
    def _strip_flags(argv: List[str], flags: Sequence[str]) -> List[str]:
        args = argv[1:]
        out: List[str] = []
        i = 0
        while i < len(args):
            if args[i] in flags:
                i += 2
                continue
            out.append(args[i])
            i += 1
        return out

    def _kubectl(self, argv: List[str], input: Optional[str]) -> str:
        args = self._strip_flags(argv, ("--kubeconfig", "--context"))
        if args == ["cluster-info"]:
            if not self.reachable:
                raise CommandError(argv, 1, "The connection to the server 127.0.0.1:6443 was refused")
            return "Kubernetes control plane is running at https://127.0.0.1:6443\n"
        if not self.reachable:
            raise CommandError(argv, 1, "The connection to the server 127.0.0.1:6443 was refused")
        verb = args[0]
        if verb == "get":
            return self._get(argv, args[1:])
        if verb == "apply":
            manifest = json.loads(input or "{}")
            name = manifest["metadata"]["name"]
            if manifest["kind"] == "PersistentVolumeClaim":
                if name not in self.pvcs:
                    mode = manifest["spec"]["accessModes"][0]
                    self.pvcs[name] = list(self.bind_phases[mode])
                return f"persistentvolumeclaim/{name} created\n"
            self.pods[name] = manifest
            return f"pod/{name} created\n"
        if verb == "delete":
            kind = args[1]
            names = [a for a in args[2:] if not a.startswith("-")][:-1]
            store = self.pods if kind == "pod" else self.pvcs
            for n in names:
                if store.pop(n, None) is not None:
                    self.deleted.append(f"{kind}/{n}")
            return ""
        if verb == "wait":
            if self.wait_error is not None:
                raise CommandError(argv, 1, self.wait_error)
            if self.pod_ready:
                return "pod/test-longhorn-pod condition met\n"
            raise CommandError(argv, 1, "error: timed out waiting for the condition on pods/test-longhorn-pod")
        raise AssertionError(f"unexpected kubectl call: {argv}")

    def _get(self, argv: List[str], args: List[str]) -> str:
        kind = args[0]
        if kind == "pods":
            return json.dumps({"items": self.longhorn_pods})
        if kind == "nodes":
            return json.dumps({"items": self.nodes})
        if kind == "storageclass":
            return json.dumps({"items": self.storage_classes})
        if kind == "pvc":
            name = args[1]
            if name not in self.pvcs:
                raise CommandError(argv, 1, f'Error from server (NotFound): persistentvolumeclaims "{name}" not found')
            phases = self.pvcs[name]
            phase = phases.pop(0) if len(phases) > 1 else phases[0]
            return json.dumps({"metadata": {"name": name}, "status": {"phase": phase}})
        raise AssertionError(f"unexpected get: {argv}")

    def _talos(self, argv: List[str]) -> str:
        args = self._strip_flags(argv, ("--talosconfig", "-n"))
        if args[:2] == ["get", "extensions"]:
            docs = [
                {
                    "node": "10.0.0.2",
                    "metadata": {"namespace": "runtime", "type": "ExtensionStatuses.runtime.talos.dev", "id": str(i)},
                    "spec": {"image": f"{i}.sqsh", "metadata": {"name": name, "version": "v1.0.0"}},
                }
                for i, name in enumerate(self.extensions)
            ]
            return yaml.safe_dump_all(docs)
        if args[0] == "ls":
            path = args[1]
            if path in self.files:
                return f"NODE       NAME\n10.0.0.2   {path.rsplit('/', 1)[-1]}\n"
            raise CommandError(argv, 1, f"rpc error: code = Unknown desc = lstat {path}: no such file or directory")
        raise AssertionError(f"unexpected talosctl call: {argv}")


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(bind_timeout_s=10.0, pod_ready_timeout_s=5.0, poll_interval_s=2.0)


@pytest.fixture
def fake_shell() -> FakeShell:
    return FakeShell()


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_cluster() -> Callable[..., FakeCluster]:
    return FakeCluster
