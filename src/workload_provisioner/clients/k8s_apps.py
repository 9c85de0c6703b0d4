"""Kubernetes Apps API wrapper — Deployment creation."""

from __future__ import annotations

import asyncio
import json

import structlog
from kubernetes import client as k8s_client
from kubernetes.client.exceptions import ApiException

from workload_provisioner.builder import to_v1_deployment
from workload_provisioner.clients import ClusterCredentials
from workload_provisioner.errors import SubmissionError
from workload_provisioner.models import CreatedWorkload, WorkloadDescriptor

log = structlog.get_logger()


class K8sAppsClient:
    """Wrapper around the Kubernetes Apps V1 API."""

    def __init__(self, credentials: ClusterCredentials) -> None:
        self._credentials = credentials
        self._api: k8s_client.AppsV1Api | None = None

    def _get_api(self) -> k8s_client.AppsV1Api:
        if self._api is None:
            self._api = k8s_client.AppsV1Api(self._credentials.api_client)
        return self._api

    async def create_deployment(self, descriptor: WorkloadDescriptor) -> CreatedWorkload:
        """Submit a descriptor to the cluster. No retry is attempted.

        Returns the created Deployment with its server-generated name.

        Raises:
            SubmissionError: If the API server rejects the object or cannot be reached.
        """
        api = self._get_api()
        body = to_v1_deployment(descriptor)
        try:
            created = await asyncio.to_thread(
                api.create_namespaced_deployment,
                namespace=descriptor.namespace,
                body=body,
            )
        except ApiException as e:
            detail = _api_error_message(e)
            log.error(
                "failed_to_create_deployment",
                host=self._credentials.host,
                namespace=descriptor.namespace,
                name_prefix=descriptor.name_prefix,
                status=e.status,
                error=detail,
            )
            msg = f"Error creating the Deployment: {e.status} {e.reason}: {detail}"
            raise SubmissionError(msg, status=e.status) from e
        except Exception as e:
            log.error(
                "failed_to_create_deployment",
                host=self._credentials.host,
                namespace=descriptor.namespace,
                name_prefix=descriptor.name_prefix,
                error=str(e),
            )
            msg = f"Error creating the Deployment: {e}"
            raise SubmissionError(msg) from e

        return CreatedWorkload(
            name=created.metadata.name,
            namespace=created.metadata.namespace or descriptor.namespace,
            name_prefix=descriptor.name_prefix,
            uid=created.metadata.uid,
        )


def _api_error_message(error: ApiException) -> str:
    """Extract the ``message`` field of a Kubernetes Status body, falling back to the raw body."""
    if not error.body:
        return str(error.reason)
    try:
        status = json.loads(error.body)
    except (ValueError, TypeError):
        return str(error.body)
    if isinstance(status, dict) and status.get("message"):
        return str(status["message"])
    return str(error.body)
