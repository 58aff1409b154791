"""kube-wizard command line entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .config import load_config
from .constants import MIN_KUBECTL_MAJOR, MIN_KUBECTL_MINOR
from .errors import KubeWizardError
from .kubectl import KubectlClient
from .log import setup_logging, shutdown_logging

logger = logging.getLogger(__name__)


def _check_kubectl(client: KubectlClient) -> bool:
    """False when kubectl is missing; an old client only warns."""
    if not client.is_installed():
        print(
            f"Error: {client.binary} not found on PATH. "
            "Install kubectl: https://kubernetes.io/docs/tasks/tools/",
            file=sys.stderr,
        )
        logger.error("%s not found on PATH", client.binary)
        return False
    try:
        major, minor = client.client_version()
    except KubeWizardError as exc:
        logger.warning("Could not determine kubectl version: %s", exc)
        return True
    if (major, minor) < (MIN_KUBECTL_MAJOR, MIN_KUBECTL_MINOR):
        print(
            f"Warning: kubectl v{major}.{minor} is older than "
            f"v{MIN_KUBECTL_MAJOR}.{MIN_KUBECTL_MINOR}; some commands may not work.",
            file=sys.stderr,
        )
        logger.warning("kubectl v%d.%d is older than supported", major, minor)
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) or "kube-wizard",
        description="Interactive wizard for building and running kubectl commands",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"Error: failed to load config: {exc}", file=sys.stderr)
        return 1

    try:
        setup_logging(config.log_file, logging.DEBUG if args.debug else logging.INFO)
    except OSError as exc:
        print(f"Warning: failed to set up logging: {exc}", file=sys.stderr)

    try:
        if not _check_kubectl(KubectlClient(config.kubectl)):
            return 1

        from .tui import launch_tui

        return launch_tui(config)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    raise SystemExit(main())
