"""One-shot provisioner for a single Kubernetes Deployment."""

__version__ = "0.1.0"
