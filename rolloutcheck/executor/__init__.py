"""Executors that talk to the cluster on behalf of the status core.

Submodules
----------
base    -- RolloutExecutor and SubResourceProbe interfaces.
kubectl -- KubectlExecutor: asyncio subprocess kubectl runner.
cluster -- create_api_client: kubernetes-asyncio client from kubeconfig or in-cluster config.
pods    -- KubernetesPodReader: pod snapshots and log tails from the Kubernetes API.
"""

from rolloutcheck.executor.base import RolloutExecutor, SubResourceProbe
from rolloutcheck.executor.cluster import create_api_client
from rolloutcheck.executor.kubectl import KubectlExecutor
from rolloutcheck.executor.pods import KubernetesPodReader

__all__ = [
    "KubectlExecutor",
    "KubernetesPodReader",
    "RolloutExecutor",
    "SubResourceProbe",
    "create_api_client",
]
