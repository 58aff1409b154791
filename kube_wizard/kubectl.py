"""Thin subprocess wrapper around the kubectl binary."""

from __future__ import annotations

import json
import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass

from .constants import KUBECTL
from .errors import ClusterContextError, KubectlNotFoundError, KubeWizardError

logger = logging.getLogger(__name__)

_PREFIX = "kubectl "


@dataclass(frozen=True)
class CommandResult:
    """Captured streams of one kubectl invocation."""

    command: str
    output: str = ""
    error: str = ""
    returncode: int = 0


def split_command(command: str) -> list[str]:
    """Strip a leading ``kubectl`` and split the rest into argv.

    Splitting follows POSIX shell quoting so a quoted go-template stays one
    argument. Nothing is ever handed to a shell.
    """
    text = command.strip()
    if text.startswith(_PREFIX):
        text = text[len(_PREFIX):]
    elif text == KUBECTL:
        text = ""
    try:
        return shlex.split(text)
    except ValueError as exc:
        raise KubeWizardError(f"invalid command: {exc}") from exc


class KubectlClient:
    def __init__(self, binary: str = KUBECTL) -> None:
        self.binary = binary

    # ── Process execution ────────────────────────────────────────

    def _run(self, args: list[str]) -> CommandResult:
        cmd = [self.binary, *args]
        logger.info("Running: %s", shlex.join(cmd))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise KubectlNotFoundError(f"{self.binary} not found in PATH") from exc
        if proc.returncode != 0:
            logger.warning("%s exited with %d", shlex.join(cmd), proc.returncode)
        return CommandResult(
            command=" ".join(cmd),
            output=proc.stdout or "",
            error=proc.stderr or "",
            returncode=proc.returncode,
        )

    def _run_checked(self, args: list[str]) -> str:
        result = self._run(args)
        if result.error:
            raise KubeWizardError(f"kubectl error: {result.error.strip()}")
        return result.output

    def execute_raw(self, command: str) -> CommandResult:
        """Run a full ``kubectl ...`` command line and capture both streams.

        Raises ClusterContextError without spawning anything when no context
        resolves.
        """
        self.current_context()
        args = split_command(command)
        if not args:
            raise KubeWizardError("invalid command")
        result = self._run(args)
        return CommandResult(
            command=command,
            output=result.output,
            error=result.error,
            returncode=result.returncode,
        )

    # ── Contexts & namespaces ────────────────────────────────────

    def current_context(self) -> str:
        try:
            result = self._run(["config", "current-context"])
        except KubectlNotFoundError as exc:
            raise ClusterContextError(f"no cluster context configured: {exc}") from exc
        if result.error:
            raise ClusterContextError(f"no cluster context configured: {result.error.strip()}")
        context = result.output.strip()
        if not context:
            raise ClusterContextError("no cluster context configured")
        return context

    def list_contexts(self) -> list[str]:
        return self._run_checked(["config", "get-contexts", "-o", "name"]).split()

    def use_context(self, name: str) -> None:
        self._run_checked(["config", "use-context", name])

    def list_names(self, resource: str) -> list[str]:
        """Names of every object of a kind, via a jsonpath over metadata.name."""
        output = self._run_checked(["get", resource, "-o", "jsonpath={.items[*].metadata.name}"])
        return output.split()

    def list_namespaces(self) -> list[str]:
        return self.list_names("namespaces")

    def secret_keys(self, name: str, namespace: str = "") -> list[str]:
        args = ["get", "secret", name, "-o", "json"]
        if namespace:
            args.extend(["-n", namespace])
        self.current_context()
        output = self._run_checked(args)
        try:
            data = json.loads(output or "{}")
        except json.JSONDecodeError as exc:
            raise KubeWizardError(f"failed to parse secret JSON: {exc}") from exc
        keys = data.get("data") if isinstance(data, dict) else None
        if not isinstance(keys, dict):
            return []
        return sorted(keys)

    def cluster_info(self) -> CommandResult:
        return self.execute_raw("kubectl cluster-info")

    # ── Installation ─────────────────────────────────────────────

    def is_installed(self) -> bool:
        return shutil.which(self.binary) is not None

    def client_version(self) -> tuple[int, int]:
        """(major, minor) of the kubectl client, minor stripped of any '+' suffix."""
        output = self._run_checked(["version", "--client", "-o", "json"])
        try:
            info = json.loads(output)["clientVersion"]
            major = int(info["major"])
            minor_text = str(info["minor"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise KubeWizardError(f"failed to parse kubectl version: {exc}") from exc
        digits = ""
        for char in minor_text:
            if not char.isdigit():
                break
            digits += char
        if not digits:
            raise KubeWizardError(f"invalid minor version: {minor_text}")
        return major, int(digits)
