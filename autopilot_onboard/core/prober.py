"""
Version probes: run `<command> --version` and classify the outcome.
"""

import logging
import re
from typing import List, Union

from ..models.probe import ProbeResult, ProbeStatus
from .command_runner import CommandRunner


class VersionProber:
    """Classifies `--version` probes as found, not found or errored."""

    def __init__(self, runner: CommandRunner, timeout: float = 60.0):
        self.logger = logging.getLogger(__name__)
        self.runner = runner
        self.timeout = timeout

    def probe_version(self, command: Union[str, List[str]], version_pattern: str) -> ProbeResult:
        """
        Probe a command by running it with `--version`.

        Args:
            command: Executable name, or argv prefix for wrapped invocations
                (e.g. ["uvx", "iam-policy-autopilot"])
            version_pattern: Regex whose first group captures the version

        Returns:
            ProbeResult
        """
        args = [command] if isinstance(command, str) else list(command)
        args = args + ["--version"]
        display = " ".join(args)

        if not self.runner.command_exists(args[0]):
            self.logger.debug(f"{args[0]} is not on PATH")
            return ProbeResult(
                command=display,
                status=ProbeStatus.NOT_FOUND,
                error=f"{args[0]}: command not found"
            )

        result = self.runner.run(args, timeout=self.timeout)

        if result.not_found:
            return ProbeResult(
                command=display,
                status=ProbeStatus.NOT_FOUND,
                error=result.error,
                duration_seconds=result.duration_seconds
            )

        if not result.ok:
            return ProbeResult(
                command=display,
                status=ProbeStatus.ERRORED,
                output=result.output or None,
                exit_code=result.returncode,
                error=result.error,
                duration_seconds=result.duration_seconds
            )

        version = self.extract_version(result.output, version_pattern)
        if version is None:
            return ProbeResult(
                command=display,
                status=ProbeStatus.ERRORED,
                output=result.output or None,
                exit_code=result.returncode,
                error="Unexpected version output",
                duration_seconds=result.duration_seconds
            )

        self.logger.debug(f"{display} -> {version}")
        return ProbeResult(
            command=display,
            status=ProbeStatus.FOUND,
            version=version,
            output=result.output,
            exit_code=result.returncode,
            duration_seconds=result.duration_seconds
        )

    @staticmethod
    def extract_version(output: str, version_pattern: str):
        """Return the first version matched by the pattern, or None."""
        match = re.search(version_pattern, output or "")
        if match:
            return match.group(1)
        return None
