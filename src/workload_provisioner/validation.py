"""Input validation helpers for workload names and labels."""

from __future__ import annotations

import re
from collections.abc import Mapping

# RFC 1123 label: lowercase alphanumeric and hyphens, 1-63 chars, starts/ends with alphanumeric
_DNS_LABEL_RE = re.compile(r"^[a-z0-9]([a-z0-9\-]{0,61}[a-z0-9])?$")

# RFC 1123 subdomain: dot-separated labels, at most 253 chars in total
_DNS_SUBDOMAIN_RE = re.compile(r"^[a-z0-9]([a-z0-9\-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9\-]*[a-z0-9])?)*$")
_DNS_SUBDOMAIN_MAX = 253

# Label name and value: alphanumeric at both ends, '-', '_' and '.' inside, 63 chars max
_LABEL_NAME_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9_.\-]{0,61}[A-Za-z0-9])?$")


def validate_base_name(name: str) -> None:
    """Validate a workload base name against RFC 1123."""
    if not _DNS_LABEL_RE.match(name):
        msg = f"Invalid workload name: {name!r}. Must be a valid RFC 1123 label."
        raise ValueError(msg)


def validate_namespace(namespace: str) -> None:
    """Validate a Kubernetes namespace name against RFC 1123."""
    if not _DNS_LABEL_RE.match(namespace):
        msg = f"Invalid namespace: {namespace!r}. Must be a valid RFC 1123 label."
        raise ValueError(msg)


def validate_label_key(key: str) -> None:
    """Validate a label key of the form ``[prefix/]name``."""
    prefix, sep, name = key.rpartition("/")
    if sep and (
        not prefix or len(prefix) > _DNS_SUBDOMAIN_MAX or not _DNS_SUBDOMAIN_RE.match(prefix)
    ):
        msg = f"Invalid label key prefix in {key!r}. Must be a DNS subdomain of at most 253 characters."
        raise ValueError(msg)
    if not _LABEL_NAME_RE.match(name):
        msg = (
            f"Invalid label key: {key!r}. Name part must be 1-63 alphanumeric characters, "
            "'-', '_' or '.', starting and ending with an alphanumeric character."
        )
        raise ValueError(msg)


def validate_label_value(value: str) -> None:
    """Validate a label value. Empty values are allowed."""
    if value and not _LABEL_NAME_RE.match(value):
        msg = (
            f"Invalid label value: {value!r}. Must be at most 63 alphanumeric characters, "
            "'-', '_' or '.', starting and ending with an alphanumeric character."
        )
        raise ValueError(msg)


def validate_labels(labels: Mapping[str, str]) -> None:
    """Validate a non-empty label mapping usable as a Deployment selector."""
    if not labels:
        msg = "Workload labels must not be empty; they become the Deployment selector."
        raise ValueError(msg)
    for key, value in labels.items():
        validate_label_key(key)
        validate_label_value(value)


def parse_label_assignment(assignment: str) -> tuple[str, str]:
    """Split a ``KEY=VALUE`` command-line label into its validated parts."""
    key, sep, value = assignment.partition("=")
    if not sep:
        msg = f"Invalid label {assignment!r}. Expected KEY=VALUE."
        raise ValueError(msg)
    validate_label_key(key)
    validate_label_value(value)
    return key, value
