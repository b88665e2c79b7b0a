"""Application bootstrap for rolloutcheck.

Wires configuration, logging, the kubectl executor, the Kubernetes API pod
reader and the status monitor, then runs one status check. Without a usable
cluster configuration pods are not observed and deployments are judged by
`kubectl rollout status` alone. SIGINT/SIGTERM cancel the check;
the monitor turns that into USER_CANCELLED outcomes for every resource still
pending, so an interrupted run still reports and returns a code.
"""

from __future__ import annotations

import asyncio
import signal
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TextIO

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

from rolloutcheck.errors import ClusterConfigError
from rolloutcheck.executor.cluster import create_api_client
from rolloutcheck.executor.kubectl import KubectlExecutor
from rolloutcheck.executor.pods import KubernetesPodReader
from rolloutcheck.models.config import RolloutCheckConfig
from rolloutcheck.models.resources import ResourceType
from rolloutcheck.models.status import StatusCode
from rolloutcheck.observability.logging import get_logger, setup_logging
from rolloutcheck.status.monitor import LoggingObserver, StatusMonitor, final_status_code
from rolloutcheck.status.resource import Resource

STANDALONE_PODS_NAME = "pods"

_TARGET_KINDS = {
    "deployment": ResourceType.DEPLOYMENT,
    "deployments": ResourceType.DEPLOYMENT,
    "deploy": ResourceType.DEPLOYMENT,
    "pod": ResourceType.STANDALONE_PODS,
    "pods": ResourceType.STANDALONE_PODS,
    "po": ResourceType.STANDALONE_PODS,
}


@dataclass(frozen=True)
class Target:
    """A workload named on the command line."""

    resource_type: ResourceType
    name: str


def parse_target(value: str) -> Target:
    """Parse ``deployment/<name>`` or ``pod/<name>``.

    Raises:
        ValueError: if the kind is not supported or the name is missing.
    """
    kind, sep, name = value.partition("/")
    if not sep or not name:
        raise ValueError(f"Invalid target '{value}': expected <kind>/<name>")
    resource_type = _TARGET_KINDS.get(kind.lower())
    if resource_type is None:
        raise ValueError(f"Unsupported kind '{kind}': only deployments and pods are tracked")
    return Target(resource_type=resource_type, name=name)


def build_resources(
    targets: Sequence[Target],
    config: RolloutCheckConfig,
) -> tuple[list[Resource], dict[str, list[str]]]:
    """Create one Resource per deployment and one for all standalone pods.

    Returns the resources and the resource-name -> pod-names map for the probe.
    """
    namespace = config.kubectl.namespace
    deadline = config.status_check.deadline
    resources: list[Resource] = []
    pod_names: list[str] = []
    seen: set[str] = set()

    for target in targets:
        if target.resource_type == ResourceType.STANDALONE_PODS:
            if target.name not in pod_names:
                pod_names.append(target.name)
            continue
        if target.name in seen:
            continue
        seen.add(target.name)
        resources.append(Resource(target.name, ResourceType.DEPLOYMENT, namespace, deadline))

    pods: dict[str, list[str]] = {}
    if pod_names:
        resources.append(Resource(STANDALONE_PODS_NAME, ResourceType.STANDALONE_PODS, namespace, deadline))
        pods[STANDALONE_PODS_NAME] = pod_names
    return resources, pods


async def _open_pod_reader(
    config: RolloutCheckConfig,
    pods: dict[str, list[str]],
) -> tuple[KubernetesPodReader | None, k8s_client.ApiClient | None]:
    """Connect to the cluster API for pod observation, or return (None, None)."""
    log = get_logger("app")
    if not config.status_check.observe_pods:
        return None, None
    try:
        api_client = await create_api_client(config.kubectl.kube_context)
    except ClusterConfigError as exc:
        log.warning("pod observation disabled", error=str(exc))
        return None, None
    probe = KubernetesPodReader(
        k8s_client.CoreV1Api(api_client),
        k8s_client.AppsV1Api(api_client),
        pods,
        log_tail_lines=config.status_check.log_tail_lines,
    )
    return probe, api_client


async def run_status_check(
    config: RolloutCheckConfig,
    targets: Sequence[Target],
    out: TextIO | None = None,
) -> StatusCode:
    """Run a status check for *targets* and return the overall status code."""
    setup_logging(config.log.level, config.log.format)
    log = get_logger("app")

    resources, pods = build_resources(targets, config)
    kube_context = config.kubectl.kube_context
    executor = KubectlExecutor(config.kubectl.binary)
    probe, api_client = await _open_pod_reader(config, pods)
    monitor = StatusMonitor(
        executor,
        config.status_check,
        kube_context=kube_context,
        observers=[LoggingObserver()],
        probe=probe,
        out=out,
    )

    log.info("rolloutcheck starting", resources=[str(r) for r in resources], observe_pods=probe is not None)
    loop = asyncio.get_running_loop()
    check = asyncio.create_task(monitor.check(resources), name="status-check")
    interrupted = False

    def _request_cancel() -> None:
        nonlocal interrupted
        if interrupted:
            return
        interrupted = True
        check.cancel()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_cancel)

    try:
        return await check
    except asyncio.CancelledError:
        if not interrupted:
            raise
        log.warning("rolloutcheck interrupted")
        return final_status_code(resources)
    finally:
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)
        if api_client is not None:
            await api_client.close()
