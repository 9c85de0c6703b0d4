"""Credential resolution for the Kubernetes API.

Credentials come from a kubeconfig file when one is usable and from the
pod's service account otherwise, so the same code runs from an operator's
workstation and from inside the cluster.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import structlog
from kubernetes import client as k8s_client
from kubernetes.config import load_incluster_config, new_client_from_config

from workload_provisioner.errors import AuthError

log = structlog.get_logger()

CredentialSource = Literal["kubeconfig", "in-cluster"]


@dataclass(frozen=True)
class ClusterCredentials:
    """An authenticated API client and where its credentials came from."""

    api_client: k8s_client.ApiClient
    source: CredentialSource
    host: str


def load_kubeconfig_client(kubeconfig: Path, context: str | None = None) -> k8s_client.ApiClient:
    """Create an isolated API client from a kubeconfig file.

    Uses new_client_from_config so the global SDK configuration is left untouched.
    """
    return new_client_from_config(config_file=str(kubeconfig), context=context, persist_config=False)


def load_in_cluster_client() -> k8s_client.ApiClient:
    """Create an API client from the mounted service-account token and the in-cluster endpoint."""
    configuration = k8s_client.Configuration()
    load_incluster_config(client_configuration=configuration)
    return k8s_client.ApiClient(configuration)


def resolve_credentials(
    kubeconfig: Path,
    *,
    context: str | None = None,
    in_cluster: bool = False,
) -> ClusterCredentials:
    """Resolve cluster credentials, trying the kubeconfig before the in-cluster identity.

    Args:
        kubeconfig: Path to the kubeconfig file to try first.
        context: Kubeconfig context to select. None for the file's current context.
        in_cluster: Skip the kubeconfig probe and use the in-cluster identity directly.

    Returns:
        Credentials from whichever source succeeded first.

    Raises:
        AuthError: If no source yields usable credentials.
    """
    kubeconfig_error: Exception | None = None
    if not in_cluster:
        try:
            api_client = load_kubeconfig_client(kubeconfig, context)
        except Exception as e:
            kubeconfig_error = e
            log.warning("kubeconfig_load_failed", kubeconfig=str(kubeconfig), context=context, error=str(e))
        else:
            return _credentials(api_client, "kubeconfig")

    try:
        api_client = load_in_cluster_client()
    except Exception as e:
        if kubeconfig_error is None:
            msg = f"Error building in-cluster config: {e}"
        else:
            msg = f"Error building config from kubeconfig {kubeconfig} ({kubeconfig_error}) and in-cluster ({e})"
        raise AuthError(msg) from e
    return _credentials(api_client, "in-cluster")


def _credentials(api_client: k8s_client.ApiClient, source: CredentialSource) -> ClusterCredentials:
    host = api_client.configuration.host
    log.info("credentials_resolved", source=source, host=host)
    return ClusterCredentials(api_client=api_client, source=source, host=host)
