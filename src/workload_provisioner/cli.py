"""Command-line entry point and logging setup."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys
from collections.abc import Sequence
from pathlib import Path

import structlog
import yaml

from workload_provisioner.builder import build_descriptor, render_manifest
from workload_provisioner.config import get_settings, load_intent_file
from workload_provisioner.errors import ProvisionerError
from workload_provisioner.models import WorkloadIntent
from workload_provisioner.provisioner import provision
from workload_provisioner.validation import parse_label_assignment

# Configure structlog for JSON output to stderr
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

log = structlog.get_logger()

DEFAULT_WORKLOAD_NAME = "screen-recorder"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workload-provisioner",
        description="Create a single Deployment on a Kubernetes cluster.",
    )
    parser.add_argument("--kubeconfig", type=Path, help="Location of the kubeconfig file (default: ~/.kube/config)")
    parser.add_argument("--context", help="Kubeconfig context to use (default: the current context)")
    parser.add_argument(
        "--in-cluster",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Skip the kubeconfig and authenticate with the pod's service account "
        "(--no-in-cluster overrides PROVISIONER_IN_CLUSTER)",
    )
    parser.add_argument("--name", help=f"Workload base name (default: {DEFAULT_WORKLOAD_NAME})")
    parser.add_argument(
        "--label",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Workload label, repeatable (default: app=<name>)",
    )
    parser.add_argument(
        "--intent-file",
        type=Path,
        help="YAML file with the workload name and labels; excludes --name and --label",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the Deployment manifest instead of creating it")
    return parser


def intent_from_args(args: argparse.Namespace) -> WorkloadIntent:
    """Build the workload intent from an intent file or the --name/--label options."""
    if args.intent_file is not None:
        return load_intent_file(args.intent_file)
    name = args.name if args.name is not None else DEFAULT_WORKLOAD_NAME
    if not args.label:
        return WorkloadIntent.for_app(name)
    labels = dict(parse_label_assignment(a) for a in args.label)
    return WorkloadIntent(base_name=name, labels=labels)


def main(argv: Sequence[str] | None = None) -> int:
    """Run one provisioning pass and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.intent_file is not None and (args.name is not None or args.label):
        parser.error("--intent-file cannot be combined with --name or --label")

    try:
        intent = intent_from_args(args)
    except (ValueError, FileNotFoundError) as e:
        log.error("invalid_workload_intent", error=str(e))
        return EXIT_INVALID_INPUT

    if args.dry_run:
        manifest = render_manifest(build_descriptor(intent))
        sys.stdout.write(yaml.safe_dump(manifest, sort_keys=False))
        return EXIT_OK

    settings = get_settings()
    overrides = {
        key: value
        for key, value in (("kubeconfig", args.kubeconfig), ("context", args.context), ("in_cluster", args.in_cluster))
        if value is not None
    }
    settings = dataclasses.replace(settings, **overrides)

    try:
        created = asyncio.run(provision(settings, intent))
    except ProvisionerError as e:
        log.error("provision_failed", stage=e.stage, error=str(e))
        return EXIT_FAILURE

    sys.stdout.write(f"deployment.apps/{created.name} created\n")
    return EXIT_OK
