"""Provisioner settings, environment variable overrides, and intent file loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from workload_provisioner.models import WorkloadIntent

_TRUTHY = {"1", "true", "yes", "on"}


def default_kubeconfig_path() -> Path:
    """Return the kubeconfig location used when none is given explicitly.

    Honours ``PROVISIONER_KUBECONFIG``, then the first entry of ``KUBECONFIG``,
    and finally falls back to ``~/.kube/config``.
    """
    explicit = os.environ.get("PROVISIONER_KUBECONFIG")
    if explicit:
        return Path(explicit).expanduser()
    kubeconfig_env = os.environ.get("KUBECONFIG", "")
    first = next((p for p in kubeconfig_env.split(os.pathsep) if p), None)
    if first:
        return Path(first).expanduser()
    return Path.home() / ".kube" / "config"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ProvisionerSettings:
    """Cluster access settings with environment variable overrides."""

    kubeconfig: Path = field(default_factory=default_kubeconfig_path)
    context: str | None = field(default_factory=lambda: os.environ.get("PROVISIONER_CONTEXT") or None)
    in_cluster: bool = field(default_factory=lambda: _env_flag("PROVISIONER_IN_CLUSTER"))


def get_settings() -> ProvisionerSettings:
    """Return settings with environment variable overrides applied."""
    return ProvisionerSettings()


def load_intent_file(path: Path) -> WorkloadIntent:
    """Parse a YAML workload intent file.

    The file holds a ``name`` and an optional ``labels`` mapping; without
    labels the workload is selected by ``app: <name>``.

    Args:
        path: Path to the YAML intent file.

    Returns:
        The validated WorkloadIntent.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the path is not a readable file, or the content is malformed
            or fails validation.
    """
    if not path.exists():
        msg = f"Intent file not found: {path}."
        raise FileNotFoundError(msg)
    if not path.is_file():
        msg = f"Intent file {path} is not a regular file."
        raise ValueError(msg)

    try:
        text = path.read_text()
    except OSError as e:
        msg = f"Intent file {path} could not be read: {e}"
        raise ValueError(msg) from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"Intent file {path} is not valid YAML: {e}"
        raise ValueError(msg) from e

    if not isinstance(raw, dict) or "name" not in raw:
        msg = f"Intent file {path} must contain a top-level 'name' key."
        raise ValueError(msg)

    name: Any = raw["name"]
    if not isinstance(name, str):
        msg = f"Intent file {path} has a non-string name {name!r}. Quote it, e.g. name: \"web\"."
        raise ValueError(msg)

    labels_raw: Any = raw.get("labels")
    if labels_raw is None:
        return WorkloadIntent.for_app(name)
    if not isinstance(labels_raw, dict):
        msg = f"Intent file {path} has an invalid 'labels' section; expected a mapping, got {type(labels_raw).__name__}."
        raise ValueError(msg)

    # YAML types unquoted scalars; str() would turn `true` into "True" and `1.10` into "1.1".
    non_strings = [f"{k!r}: {v!r}" for k, v in labels_raw.items() if not isinstance(k, str) or not isinstance(v, str)]
    if non_strings:
        msg = (
            f"Intent file {path} has non-string labels: {', '.join(non_strings)}. "
            'Quote label keys and values, e.g. canary: "true".'
        )
        raise ValueError(msg)

    return WorkloadIntent(base_name=name, labels=labels_raw)
