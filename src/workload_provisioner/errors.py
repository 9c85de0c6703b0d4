"""Errors raised by the provisioning stages."""

from __future__ import annotations


class ProvisionerError(Exception):
    """Base class for fatal provisioning failures.

    Attributes:
        stage: Name of the stage that failed, reported by the CLI on exit.
    """

    stage = "provision"

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class AuthError(ProvisionerError):
    """Raised when neither the kubeconfig nor the in-cluster identity yields credentials."""

    stage = "credentials"


class SubmissionError(ProvisionerError):
    """Raised when the cluster rejects or never receives the create call.

    Attributes:
        status: HTTP status returned by the API server, or None for transport failures.
    """

    stage = "submit"

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status
