"""Pod observation through the Kubernetes API.

Turns ``V1Pod`` objects from kubernetes-asyncio into :class:`SubResourceStatus`
snapshots. Container waiting reasons and scheduling conditions are mapped to
status codes so a deployment's report can point at the failing pod, and the
log tail of a crashed container is attached to its snapshot.

A deployment's pods are found through its ``spec.selector``; standalone pods
are read by name.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from kubernetes_asyncio.client.rest import ApiException  # type: ignore[import-untyped]

from rolloutcheck.executor.base import SubResourceProbe
from rolloutcheck.models.resources import PodPhase, ResourceType, SubResourceStatus
from rolloutcheck.models.status import ActionableError, StatusCode
from rolloutcheck.observability.logging import get_logger

if TYPE_CHECKING:
    from rolloutcheck.status.resource import Resource

_logger = get_logger("executor.pods")

DEFAULT_LOG_TAIL_LINES = 20

_WAITING_REASONS: dict[str, StatusCode] = {
    "CrashLoopBackOff": StatusCode.CONTAINER_RESTARTING,
    "ErrImagePull": StatusCode.IMAGE_PULL_ERR,
    "ImagePullBackOff": StatusCode.IMAGE_PULL_ERR,
    "InvalidImageName": StatusCode.IMAGE_PULL_ERR,
    "RunContainerError": StatusCode.RUN_CONTAINER_ERR,
    "CreateContainerError": StatusCode.RUN_CONTAINER_ERR,
    "CreateContainerConfigError": StatusCode.RUN_CONTAINER_ERR,
    "ContainerCreating": StatusCode.CONTAINER_CREATING,
    "PodInitializing": StatusCode.POD_INITIALIZING,
}

# Codes for which the container has run and left output behind.
_LOGGED_CODES = frozenset({StatusCode.CONTAINER_RESTARTING, StatusCode.CONTAINER_TERMINATED})

_SELECTOR_OPERATORS = {
    "In": "{key} in ({values})",
    "NotIn": "{key} notin ({values})",
    "Exists": "{key}",
    "DoesNotExist": "!{key}",
}


def label_selector(selector: Any) -> str:
    """Render a ``V1LabelSelector`` in the ``label_selector`` query syntax."""
    if selector is None:
        return ""
    terms = [f"{k}={v}" for k, v in sorted((selector.match_labels or {}).items())]
    for expr in selector.match_expressions or []:
        template = _SELECTOR_OPERATORS.get(expr.operator)
        if template is None:
            raise ValueError(f"unsupported selector operator {expr.operator!r}")
        terms.append(template.format(key=expr.key, values=",".join(expr.values or [])))
    return ",".join(terms)


def _scheduling_error(status: Any) -> ActionableError | None:
    for cond in status.conditions or []:
        if cond.type != "PodScheduled" or cond.status != "False":
            continue
        message = cond.message or "pod could not be scheduled"
        if cond.reason != "Unschedulable":
            return ActionableError(StatusCode.FAILED_SCHEDULING, message)
        # "0/3 nodes are available: 3 node(s) had taint ..." names node constraints
        if "node(s)" in message:
            return ActionableError(StatusCode.NODE_UNSCHEDULABLE, message)
        return ActionableError(StatusCode.UNKNOWN_UNSCHEDULABLE, message)
    return None


def _container_error(status: Any) -> tuple[ActionableError, str] | None:
    """Return the first container problem and the container it belongs to."""
    containers = [*(status.init_container_statuses or []), *(status.container_statuses or [])]
    for cs in containers:
        state = cs.state
        if state is None:
            continue
        waiting = state.waiting
        if waiting is not None:
            code = _WAITING_REASONS.get(waiting.reason or "")
            if code is not None:
                detail = waiting.message or waiting.reason
                return ActionableError(code, f"container {cs.name} is waiting to start: {detail}"), cs.name
        terminated = state.terminated
        if terminated is not None and terminated.exit_code:
            return (
                ActionableError(
                    StatusCode.CONTAINER_TERMINATED,
                    f"container {cs.name} terminated with exit code {terminated.exit_code}",
                ),
                cs.name,
            )
    return None


def _all_ready(status: Any) -> bool:
    containers = status.container_statuses or []
    return bool(containers) and all(cs.ready for cs in containers)


def classify_pod(pod: Any) -> tuple[ActionableError | None, str | None]:
    """Return the pod's outcome and, if a container caused it, that container's name."""
    status = pod.status
    if status is None:
        return None, None
    phase = status.phase or PodPhase.UNKNOWN.value
    if phase == PodPhase.SUCCEEDED:
        return ActionableError(StatusCode.SUCCESS, ""), None

    scheduling = _scheduling_error(status)
    if scheduling is not None:
        return scheduling, None
    container = _container_error(status)
    if container is not None:
        return container
    if phase == PodPhase.FAILED:
        return ActionableError(StatusCode.UNHEALTHY, status.message or f"pod {pod.metadata.name} failed"), None
    if phase == PodPhase.RUNNING and _all_ready(status):
        return ActionableError(StatusCode.SUCCESS, ""), None
    return None, None


def pod_status_from_pod(pod: Any, logs: Sequence[str] = ()) -> SubResourceStatus:
    """Build a pod snapshot from a ``V1Pod``."""
    error, _ = classify_pod(pod)
    return SubResourceStatus(
        namespace=pod.metadata.namespace or "",
        kind="pod",
        name=pod.metadata.name or "",
        phase=(pod.status.phase if pod.status is not None else None) or PodPhase.UNKNOWN.value,
        error=error,
        logs=tuple(logs),
    )


class KubernetesPodReader(SubResourceProbe):
    """Observes the pods behind each tracked resource.

    Args:
        core:           ``CoreV1Api`` used for pods and pod logs.
        apps:           ``AppsV1Api`` used to read deployment selectors.
        pods:           Standalone resource name -> pod names to observe for it.
        log_tail_lines: Lines of container log to attach to a crashed pod;
                        0 disables log collection.
    """

    def __init__(
        self,
        core: Any,
        apps: Any,
        pods: Mapping[str, Sequence[str]] | None = None,
        log_tail_lines: int = DEFAULT_LOG_TAIL_LINES,
    ) -> None:
        self._core = core
        self._apps = apps
        self._pods = pods or {}
        self._log_tail_lines = log_tail_lines
        self._selectors: dict[tuple[str, str], str] = {}

    async def observe(self, resource: Resource) -> list[SubResourceStatus] | None:
        try:
            if resource.resource_type == ResourceType.DEPLOYMENT:
                pods = await self._deployment_pods(resource)
            else:
                pods = await self._standalone_pods(resource)
            if pods is None:
                return None
            return [await self._snapshot(pod) for pod in pods]
        except ApiException as exc:
            _logger.warning("pod_observe_failed", resource=str(resource), status=exc.status, reason=exc.reason)
            return None
        except Exception as exc:  # noqa: BLE001
            _logger.warning("pod_observe_failed", resource=str(resource), error=str(exc))
            return None

    async def _deployment_pods(self, resource: Resource) -> list[Any]:
        key = (resource.namespace, resource.name)
        selector = self._selectors.get(key)
        if selector is None:
            deployment = await self._apps.read_namespaced_deployment(resource.name, resource.namespace)
            selector = label_selector(deployment.spec.selector)
            self._selectors[key] = selector
        if not selector:
            return []
        pod_list = await self._core.list_namespaced_pod(resource.namespace, label_selector=selector)
        # pods of a replaced ReplicaSet linger while terminating
        return [p for p in pod_list.items if p.metadata.deletion_timestamp is None]

    async def _standalone_pods(self, resource: Resource) -> list[Any] | None:
        names = self._pods.get(resource.name)
        if not names:
            return None
        pods = []
        for name in names:
            try:
                pods.append(await self._core.read_namespaced_pod(name, resource.namespace))
            except ApiException as exc:
                if exc.status != 404:
                    raise
        return pods

    async def _snapshot(self, pod: Any) -> SubResourceStatus:
        error, container = classify_pod(pod)
        logs: list[str] = []
        if error is not None and error.code in _LOGGED_CODES and container and self._log_tail_lines > 0:
            logs = await self._tail_logs(pod, container, previous=error.code == StatusCode.CONTAINER_RESTARTING)
        return pod_status_from_pod(pod, logs)

    async def _tail_logs(self, pod: Any, container: str, previous: bool) -> list[str]:
        try:
            text = await self._core.read_namespaced_pod_log(
                pod.metadata.name,
                pod.metadata.namespace,
                container=container,
                previous=previous,
                tail_lines=self._log_tail_lines,
            )
        except ApiException as exc:
            _logger.debug("pod_log_unavailable", pod=pod.metadata.name, container=container, status=exc.status)
            return []
        return str(text or "").splitlines()
