from __future__ import annotations
import logging
from pathlib import Path
from typing import List, NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler

from .checks.template_checks import TemplateCheck
from .config import Settings
from .errors import ClusterUnreachable
from .models import Summary
from .reporter import Reporter
from .runner import ProbeRunner
from .shell import Shell
from .suites.longhorn import LonghornSuite
from .templates import discover_templates

FATAL_EXIT_CODE = 3

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _configure_logging(verbose: bool) -> None:
    root = logging.getLogger("longhorn_check")
    root.handlers.clear()
    root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


def _finalize(console: Console, reporter: Reporter, title: str, summary: Summary, fail_on_warn: bool) -> NoReturn:
    code = summary.exit_code(fail_on_warn)
    reporter.table(title, summary)
    reporter.summary(summary)
    ok, warn, fail = summary.counts()
    suffix = " (fail-on-warn)" if fail_on_warn else ""
    console.print(f"[bold]Summary:[/bold] OK {ok} • WARN {warn} • FAIL {fail} → exit {code}{suffix}")
    raise typer.Exit(code=code)


@app.callback()
def main() -> None:
    pass


@app.command("verify")
def verify(
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", envvar="KUBECONFIG"),
    context: str | None = typer.Option(None, "--context", envvar="KUBE_CONTEXT"),
    talosconfig: str | None = typer.Option(None, "--talosconfig", envvar="TALOSCONFIG"),
    talos_node: str | None = typer.Option(None, "--talos-node", envvar="TALOS_NODE", help="Node queried with talosctl (default: first cluster node)."),
    kubectl: str = typer.Option("kubectl", "--kubectl"),
    talosctl: str = typer.Option("talosctl", "--talosctl"),
    namespace: str = typer.Option("longhorn-system", "--namespace", help="Namespace Longhorn is deployed to."),
    test_namespace: str = typer.Option("default", "--test-namespace", help="Namespace for the test PVCs and pod."),
    storage_class: str = typer.Option("longhorn", "--storage-class"),
    extension: List[str] = typer.Option(["iscsi-tools", "util-linux-tools"], "--extension", help="Required Talos extension (repeatable)."),
    min_running_pods: int = typer.Option(16, "--min-running-pods"),
    pod_image: str = typer.Option("nginx:alpine", "--pod-image"),
    volume_size: str = typer.Option("1Gi", "--volume-size"),
    bind_timeout: float = typer.Option(30.0, "--bind-timeout", help="Seconds to wait for a PVC to bind."),
    pod_ready_timeout: float = typer.Option(60.0, "--pod-ready-timeout"),
    poll_interval: float = typer.Option(2.0, "--poll-interval"),
    command_timeout: float = typer.Option(30.0, "--command-timeout"),
    skip_rwx: bool = typer.Option(False, "--skip-rwx", help="Do not test ReadWriteMany volumes."),
    fail_on_warn: bool = typer.Option(False, "--fail-on-warn", help="Return exit code 2 if warnings are present (and no failures)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Smoke-test Longhorn on a Talos cluster."""
    _configure_logging(verbose)
    console = Console()
    reporter = Reporter(console)
    settings = Settings(
        kubectl=kubectl,
        talosctl=talosctl,
        kubeconfig=kubeconfig,
        context=context,
        talosconfig=talosconfig,
        talos_node=talos_node,
        longhorn_namespace=namespace,
        test_namespace=test_namespace,
        storage_class=storage_class,
        required_extensions=tuple(extension),
        min_running_pods=min_running_pods,
        pod_image=pod_image,
        volume_size=volume_size,
        skip_rwx=skip_rwx,
        command_timeout_s=command_timeout,
        bind_timeout_s=bind_timeout,
        pod_ready_timeout_s=pod_ready_timeout,
        poll_interval_s=poll_interval,
    )
    console.print("[bold]=== Longhorn on Talos Verification ===[/bold]")
    suite = LonghornSuite(settings, shell=Shell(timeout_s=command_timeout))
    try:
        summary = suite.run(on_result=reporter.result)
    except ClusterUnreachable as e:
        reporter.fatal(str(e))
        raise typer.Exit(code=FATAL_EXIT_CODE)
    _finalize(console, reporter, "Longhorn on Talos", summary, fail_on_warn)


@app.command("templates")
def templates(
    paths: List[Path] = typer.Argument(..., help="Template files or directories."),
    root: Path | None = typer.Option(None, "--root", help="Extra base directory for resolving @patch references."),
    max_line_length: int = typer.Option(160, "--max-line-length"),
    fail_on_warn: bool = typer.Option(False, "--fail-on-warn", help="Return exit code 2 if warnings are present (and no failures)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Lint cluster-configuration templates and check their patch references."""
    _configure_logging(verbose)
    console = Console()
    reporter = Reporter(console)
    found = discover_templates(paths)
    if not found:
        reporter.fatal("no YAML templates found")
        raise typer.Exit(code=1)
    checks = [TemplateCheck(p, root=root, max_line_length=max_line_length) for p in found]
    summary = ProbeRunner(on_result=reporter.result).run(checks)
    _finalize(console, reporter, "Templates", summary, fail_on_warn)


if __name__ == "__main__":
    app()
