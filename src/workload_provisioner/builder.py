"""Workload descriptor builder and its rendering into a Kubernetes Deployment."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client

from workload_provisioner.models import (
    ContainerPort,
    ContainerSpec,
    ResourceBound,
    WorkloadDescriptor,
    WorkloadIntent,
)

DEFAULT_NAMESPACE = "default"
REPLICAS = 1

CONTAINER_NAME = "web"
CONTAINER_IMAGE = "nginx:1.12"
HTTP_PORT_NAME = "http"
HTTP_PORT = 80

# Request and limit are equal for every resource so the pods land in the Guaranteed QoS class.
CPU_QUANTITY = "0.5"
MEMORY_QUANTITY = "100Mi"


def name_prefix_for(base_name: str) -> str:
    """Return the ``generateName`` prefix for a workload base name."""
    return f"{base_name}-"


def build_container() -> ContainerSpec:
    """Build the single fixed container every workload runs."""
    return ContainerSpec(
        name=CONTAINER_NAME,
        image=CONTAINER_IMAGE,
        resources={
            "cpu": ResourceBound(request=CPU_QUANTITY, limit=CPU_QUANTITY),
            "memory": ResourceBound(request=MEMORY_QUANTITY, limit=MEMORY_QUANTITY),
        },
        ports=[ContainerPort(name=HTTP_PORT_NAME, container_port=HTTP_PORT, protocol="TCP")],
    )


def build_descriptor(intent: WorkloadIntent) -> WorkloadDescriptor:
    """Map a workload intent onto a complete Deployment descriptor.

    Selector and pod-template labels are both read from one immutable copy
    of ``intent.labels``, so they are always equal.
    """
    return WorkloadDescriptor(
        name_prefix=name_prefix_for(intent.base_name),
        namespace=DEFAULT_NAMESPACE,
        labels=intent.labels,
        container=build_container(),
        replicas=REPLICAS,
    )


def to_v1_deployment(descriptor: WorkloadDescriptor) -> k8s_client.V1Deployment:
    """Render a descriptor into the SDK object accepted by ``create_namespaced_deployment``."""
    container = descriptor.container
    resources = k8s_client.V1ResourceRequirements(
        requests={kind: bound.request for kind, bound in container.resources.items()},
        limits={kind: bound.limit for kind, bound in container.resources.items()},
    )
    ports = [
        k8s_client.V1ContainerPort(name=p.name, container_port=p.container_port, protocol=p.protocol)
        for p in container.ports
    ]
    return k8s_client.V1Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=k8s_client.V1ObjectMeta(generate_name=descriptor.name_prefix, namespace=descriptor.namespace),
        spec=k8s_client.V1DeploymentSpec(
            replicas=descriptor.replicas,
            selector=k8s_client.V1LabelSelector(match_labels=descriptor.selector_labels),
            template=k8s_client.V1PodTemplateSpec(
                metadata=k8s_client.V1ObjectMeta(labels=descriptor.template_labels),
                spec=k8s_client.V1PodSpec(
                    containers=[
                        k8s_client.V1Container(
                            name=container.name,
                            image=container.image,
                            resources=resources,
                            ports=ports,
                        )
                    ]
                ),
            ),
        ),
    )


def render_manifest(descriptor: WorkloadDescriptor) -> dict[str, Any]:
    """Return the Deployment as the API server would receive it (camelCase keys, no nulls)."""
    with k8s_client.ApiClient() as api_client:
        return api_client.sanitize_for_serialization(to_v1_deployment(descriptor))
