"""Provisioning run: credentials, then descriptor, then submission."""

from __future__ import annotations

import structlog

from workload_provisioner.builder import build_descriptor
from workload_provisioner.clients import resolve_credentials
from workload_provisioner.clients.k8s_apps import K8sAppsClient
from workload_provisioner.config import ProvisionerSettings
from workload_provisioner.models import CreatedWorkload, WorkloadIntent

log = structlog.get_logger()


async def provision(settings: ProvisionerSettings, intent: WorkloadIntent) -> CreatedWorkload:
    """Create one Deployment for ``intent`` on the cluster described by ``settings``.

    Raises:
        AuthError: If no credentials could be resolved. Nothing is submitted.
        SubmissionError: If the create call fails.
    """
    credentials = resolve_credentials(
        settings.kubeconfig,
        context=settings.context,
        in_cluster=settings.in_cluster,
    )
    descriptor = build_descriptor(intent)
    apps_client = K8sAppsClient(credentials)

    log.info("Creating Deployment", name_prefix=descriptor.name_prefix, namespace=descriptor.namespace)
    created = await apps_client.create_deployment(descriptor)
    log.info(
        "deployment_created",
        name=created.name,
        namespace=created.namespace,
        uid=created.uid,
        qos_class=descriptor.qos_class,
    )
    return created
