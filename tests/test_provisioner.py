"""Tests for the provisioning run: ordering and error propagation."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from structlog.testing import capture_logs

from workload_provisioner.builder import build_descriptor
from workload_provisioner.clients import ClusterCredentials
from workload_provisioner.config import ProvisionerSettings
from workload_provisioner.errors import AuthError, SubmissionError
from workload_provisioner.models import CreatedWorkload, WorkloadIntent
from workload_provisioner.provisioner import provision


@pytest.fixture
def settings(tmp_path: Path) -> ProvisionerSettings:
    return ProvisionerSettings(kubeconfig=tmp_path / "config", context="test-context", in_cluster=False)


def _credentials() -> ClusterCredentials:
    return ClusterCredentials(api_client=MagicMock(), source="kubeconfig", host="https://127.0.0.1:6443")


def _created() -> CreatedWorkload:
    return CreatedWorkload(name="screen-recorder-x7k2p", namespace="default", name_prefix="screen-recorder-")


class TestProvision:
    async def test_happy_path(self, settings: ProvisionerSettings, screen_recorder_intent: WorkloadIntent) -> None:
        creds = _credentials()
        mock_apps = AsyncMock()
        mock_apps.create_deployment.return_value = _created()

        with (
            patch("workload_provisioner.provisioner.resolve_credentials", return_value=creds) as mock_resolve,
            patch("workload_provisioner.provisioner.K8sAppsClient", return_value=mock_apps) as mock_cls,
        ):
            created = await provision(settings, screen_recorder_intent)

        mock_resolve.assert_called_once_with(settings.kubeconfig, context="test-context", in_cluster=False)
        mock_cls.assert_called_once_with(creds)
        mock_apps.create_deployment.assert_awaited_once_with(build_descriptor(screen_recorder_intent))
        assert created.name == "screen-recorder-x7k2p"

    async def test_logs_creating_deployment_before_submit(
        self, settings: ProvisionerSettings, screen_recorder_intent: WorkloadIntent
    ) -> None:
        mock_apps = AsyncMock()
        mock_apps.create_deployment.return_value = _created()

        with (
            patch("workload_provisioner.provisioner.resolve_credentials", return_value=_credentials()),
            patch("workload_provisioner.provisioner.K8sAppsClient", return_value=mock_apps),
            capture_logs() as logs,
        ):
            await provision(settings, screen_recorder_intent)

        events = [entry["event"] for entry in logs]
        assert events.index("Creating Deployment") < events.index("deployment_created")
        created_entry = next(entry for entry in logs if entry["event"] == "deployment_created")
        assert created_entry["qos_class"] == "Guaranteed"

    async def test_auth_failure_stops_before_build(
        self, settings: ProvisionerSettings, screen_recorder_intent: WorkloadIntent
    ) -> None:
        with (
            patch("workload_provisioner.provisioner.resolve_credentials", side_effect=AuthError("no credentials")),
            patch("workload_provisioner.provisioner.build_descriptor") as mock_build,
            patch("workload_provisioner.provisioner.K8sAppsClient") as mock_cls,
            pytest.raises(AuthError),
        ):
            await provision(settings, screen_recorder_intent)

        mock_build.assert_not_called()
        mock_cls.assert_not_called()

    async def test_submission_error_propagates(
        self, settings: ProvisionerSettings, screen_recorder_intent: WorkloadIntent
    ) -> None:
        mock_apps = AsyncMock()
        mock_apps.create_deployment.side_effect = SubmissionError("forbidden", status=403)

        with (
            patch("workload_provisioner.provisioner.resolve_credentials", return_value=_credentials()),
            patch("workload_provisioner.provisioner.K8sAppsClient", return_value=mock_apps),
            pytest.raises(SubmissionError) as exc_info,
        ):
            await provision(settings, screen_recorder_intent)
        assert exc_info.value.status == 403

    async def test_in_cluster_setting_forwarded(self, screen_recorder_intent: WorkloadIntent) -> None:
        settings = ProvisionerSettings(kubeconfig=Path("/nonexistent"), context=None, in_cluster=True)
        mock_apps = AsyncMock()
        mock_apps.create_deployment.return_value = _created()

        with (
            patch("workload_provisioner.provisioner.resolve_credentials", return_value=_credentials()) as mock_resolve,
            patch("workload_provisioner.provisioner.K8sAppsClient", return_value=mock_apps),
        ):
            await provision(settings, screen_recorder_intent)

        mock_resolve.assert_called_once_with(Path("/nonexistent"), context=None, in_cluster=True)
