"""Shared test fixtures for all test modules."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from workload_provisioner.models import WorkloadIntent

KUBECONFIG_TEMPLATE = """\
apiVersion: v1
kind: Config
clusters:
- name: test-cluster
  cluster:
    server: {server}
users:
- name: test-user
  user:
    token: test-token
contexts:
- name: test-context
  context:
    cluster: test-cluster
    user: test-user
current-context: test-context
"""


@pytest.fixture
def screen_recorder_intent() -> WorkloadIntent:
    """The intent the provisioner creates when run without arguments."""
    return WorkloadIntent(base_name="screen-recorder", labels={"app": "screen-recorder"})


@pytest.fixture
def kubeconfig_file(tmp_path: Path) -> Path:
    """Write a minimal token-based kubeconfig and return its path."""
    return write_kubeconfig(tmp_path / "config")


@pytest.fixture
def make_kubeconfig(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing kubeconfig files that point at a given API server."""

    def _make(name: str = "config", server: str = "https://127.0.0.1:6443") -> Path:
        return write_kubeconfig(tmp_path / name, server=server)

    return _make


@pytest.fixture
def no_in_cluster_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure the process does not look like it runs inside a pod."""
    monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
    monkeypatch.delenv("KUBERNETES_SERVICE_PORT", raising=False)


def write_kubeconfig(path: Path, server: str = "https://127.0.0.1:6443") -> Path:
    """Create a kubeconfig file pointing at ``server``."""
    path.write_text(KUBECONFIG_TEMPLATE.format(server=server))
    return path
