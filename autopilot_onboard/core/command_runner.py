"""
Blocking subprocess execution for probes and install steps.

Every process the bootstrap starts goes through `CommandRunner.run`, so
tests can swap the whole environment for a fake runner.
"""

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class CommandResult:
    """Outcome of a single subprocess call."""
    args: List[str]
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    not_found: bool = False
    timed_out: bool = False
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.not_found and not self.timed_out

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


class CommandRunner:
    """Runs commands with captured output and a bounded timeout."""

    def __init__(self, default_timeout: float = 60.0, output_limit: int = 4000):
        """
        Initialize the runner.

        Args:
            default_timeout: Seconds before a call is abandoned
            output_limit: Keep at most this many trailing characters per stream
        """
        self.logger = logging.getLogger(__name__)
        self.default_timeout = default_timeout
        self.output_limit = output_limit

    def command_exists(self, name: str) -> bool:
        """Check whether an executable is resolvable on PATH."""
        return shutil.which(name) is not None

    def elevate(self, args: List[str]) -> List[str]:
        """Prefix a command with non-interactive sudo unless already root."""
        if os.geteuid() == 0:
            return list(args)
        return ["sudo", "-n"] + list(args)

    def run(self, args: List[str], timeout: Optional[float] = None) -> CommandResult:
        """
        Run a command to completion.

        Process failures are returned in the result, never raised.

        Args:
            args: Command and arguments
            timeout: Override the default timeout

        Returns:
            CommandResult
        """
        timeout = timeout or self.default_timeout
        self.logger.debug(f"Running: {' '.join(args)} (timeout {timeout}s)")
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout
            )
        except FileNotFoundError:
            return CommandResult(
                args=list(args),
                not_found=True,
                error=f"{args[0]}: command not found",
                duration_seconds=time.monotonic() - start
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                args=list(args),
                timed_out=True,
                error=f"Timed out after {timeout} seconds",
                duration_seconds=time.monotonic() - start
            )
        except OSError as e:
            return CommandResult(
                args=list(args),
                error=str(e),
                duration_seconds=time.monotonic() - start
            )

        return CommandResult(
            args=list(args),
            returncode=result.returncode,
            stdout=self._tail(result.stdout),
            stderr=self._tail(result.stderr),
            error=None if result.returncode == 0 else f"Exited with code {result.returncode}",
            duration_seconds=time.monotonic() - start
        )

    def _tail(self, text: Optional[str]) -> str:
        if not text:
            return ""
        return text[-self.output_limit:]
