"""kubernetes-asyncio client bootstrap."""

from __future__ import annotations

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]

from rolloutcheck.errors import ClusterConfigError
from rolloutcheck.observability.logging import get_logger

_logger = get_logger("executor.cluster")


async def create_api_client(kube_context: str = "") -> k8s_client.ApiClient:
    """Return an ApiClient from in-cluster config or kubeconfig.

    An explicit *kube_context* always selects kubeconfig, matching what
    ``kubectl --context`` talks to. The caller closes the client.

    Raises:
        ClusterConfigError: if neither source yields a usable configuration.
    """
    configuration = k8s_client.Configuration()
    try:
        if kube_context:
            await k8s_config.load_kube_config(context=kube_context, client_configuration=configuration)
            _logger.debug("k8s client configured from kubeconfig", context=kube_context)
        else:
            try:
                # load_incluster_config() is synchronous in kubernetes-asyncio
                k8s_config.load_incluster_config(client_configuration=configuration)
                _logger.debug("k8s client configured from in-cluster service account")
            except k8s_config.ConfigException:
                await k8s_config.load_kube_config(client_configuration=configuration)
                _logger.debug("k8s client configured from kubeconfig")
    except (k8s_config.ConfigException, OSError) as exc:
        raise ClusterConfigError(f"could not load cluster configuration: {exc}") from exc
    return k8s_client.ApiClient(configuration=configuration)
