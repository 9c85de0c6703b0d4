"""Client-specific test fixtures — credentials and API error responses."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from kubernetes.client.exceptions import ApiException

from workload_provisioner.clients import ClusterCredentials


@pytest.fixture
def credentials() -> ClusterCredentials:
    """Credentials wrapping a mock ApiClient."""
    return ClusterCredentials(api_client=MagicMock(), source="kubeconfig", host="https://127.0.0.1:6443")


@pytest.fixture
def mock_k8s_api_error() -> ApiException:
    """A 422 rejection carrying a Kubernetes Status body."""
    error = ApiException(status=422, reason="Unprocessable Entity")
    error.body = json.dumps(
        {
            "kind": "Status",
            "status": "Failure",
            "message": 'Deployment.apps "screen-recorder-" is invalid: spec.template.metadata.labels: Invalid value',
            "reason": "Invalid",
            "code": 422,
        }
    )
    return error
