"""
Tool readiness controller: make sure `iam-policy-autopilot` is callable.
"""

import logging
from typing import List, Optional

from config.settings import Settings
from ..models.probe import ProbeResult, ProbeStatus
from ..models.remediation import RemediationStep, StepResult, StepStatus, ErrorKind
from ..models.outcome import ToolStageResult, StageState
from .command_runner import CommandRunner
from .prober import VersionProber
from .remediation import build_runner_install_step, build_remediation_chain


class ToolReadinessController:
    """Decides with the fewest probes whether the primary tool is usable.

    The decision tree is strictly one-directional:

        primary probe -> runner probe -> runner install -> remediation chain

    Any install step is judged by re-probing the primary tool, never by the
    installer's exit code alone. No step is retried within a run.
    """

    def __init__(self,
                 settings: Settings,
                 runner: Optional[CommandRunner] = None,
                 chain: Optional[List[RemediationStep]] = None,
                 dry_run: bool = False):
        """
        Initialize the controller.

        Args:
            settings: Application settings
            runner: Command runner (injectable for tests)
            chain: Override the remediation chain
            dry_run: If True, probe but do not run install steps
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings
        self.runner = runner or CommandRunner(settings.subprocess.timeout_seconds)
        self.prober = VersionProber(self.runner, timeout=settings.subprocess.timeout_seconds)
        self.runner_step = build_runner_install_step(settings)
        self.chain = chain if chain is not None else build_remediation_chain(settings)
        self.dry_run = dry_run

    def probe_primary(self) -> ProbeResult:
        tool = self.settings.primary_tool
        return self.prober.probe_version(tool.command, tool.version_pattern)

    def probe_runner(self) -> ProbeResult:
        tool = self.settings.primary_tool
        return self.prober.probe_version(
            [self.settings.runner.command, tool.package], tool.version_pattern
        )

    def ensure_primary_tool(self) -> ToolStageResult:
        """
        Make the primary tool available, installing it if needed.

        Returns:
            ToolStageResult; `success` is True once the primary probe passes
        """
        result = ToolStageResult(success=False)
        result.enter(StageState.UNCHECKED)
        command = self.settings.primary_tool.command

        probe = self.probe_primary()
        result.probe = probe
        if probe.found:
            self.logger.info(f"{command} {probe.version} is already installed")
            result.success = True
            result.method = "preinstalled"
            result.enter(StageState.PRIMARY_FOUND)
            return result

        if probe.status == ProbeStatus.ERRORED:
            # Present but broken is treated like missing: reinstalling is the remedy.
            self.logger.warning(f"{probe.command} failed ({probe.error}); treating as not installed")
        else:
            self.logger.info(f"{command} not found")

        result.enter(StageState.RUNNER_CHECKING)
        runner_probe = self.probe_runner()
        if runner_probe.found:
            self.logger.info(f"{runner_probe.command} works; installing persistently")
            result.enter(StageState.RUNNER_INSTALLING, self.runner_step.name)
            if self._attempt(self.runner_step, result):
                return result
        else:
            self.logger.info(f"Runner unavailable ({runner_probe.error}); starting remediation")

        for step in self.chain:
            result.enter(StageState.REMEDIATING, step.name)
            if self._attempt(step, result):
                return result

        result.enter(StageState.FAILED)
        self.logger.error(
            f"Could not install {command}; tried: {', '.join(result.steps_attempted) or 'nothing'}"
        )
        return result

    def _attempt(self, step: RemediationStep, result: ToolStageResult) -> bool:
        """Run one install step and re-probe. Returns True if the tool is now usable."""
        missing = [name for name in step.requires if not self.runner.command_exists(name)]
        if missing:
            self.logger.info(f"Skipping {step.name}: {', '.join(missing)} not available")
            result.attempts.append(StepResult(
                step=step.name,
                status=StepStatus.UNAVAILABLE,
                error_kind=ErrorKind.COMMAND_NOT_FOUND,
                error=f"Missing: {', '.join(missing)}"
            ))
            return False

        args = self.runner.elevate(step.command) if step.elevated else list(step.command)
        display = " ".join(args)

        if self.dry_run:
            self.logger.info(f"[dry-run] Would run {step.name}: {display}")
            result.attempts.append(StepResult(
                step=step.name,
                status=StepStatus.SKIPPED,
                command=display
            ))
            return False

        self.logger.info(f"Running {step.name}: {display}")
        timeout = step.timeout_seconds or self.settings.subprocess.install_timeout_seconds
        outcome = self.runner.run(args, timeout=timeout)

        if not outcome.ok:
            self.logger.warning(f"{step.name} failed: {outcome.error}")
            result.attempts.append(StepResult(
                step=step.name,
                status=StepStatus.FAILED,
                error_kind=ErrorKind.COMMAND_NOT_FOUND if outcome.not_found else ErrorKind.INSTALL_FAILED,
                command=display,
                output=outcome.output or None,
                error=outcome.error,
                duration_seconds=outcome.duration_seconds
            ))
            return False

        probe = self.probe_primary()
        result.probe = probe
        if probe.found:
            self.logger.info(f"{step.name} installed {self.settings.primary_tool.command} {probe.version}")
            result.attempts.append(StepResult(
                step=step.name,
                status=StepStatus.SUCCEEDED,
                command=display,
                output=outcome.output or None,
                probe=probe,
                duration_seconds=outcome.duration_seconds
            ))
            result.success = True
            result.method = step.name
            result.enter(StageState.PRIMARY_FOUND, step.name)
            return True

        self.logger.warning(
            f"{step.name} reported success but {probe.command} is still {probe.status.value}"
        )
        result.attempts.append(StepResult(
            step=step.name,
            status=StepStatus.FAILED,
            error_kind=ErrorKind.COMMAND_ERRORED if probe.status == ProbeStatus.ERRORED
            else ErrorKind.INSTALL_FAILED,
            command=display,
            output=outcome.output or None,
            error=f"Installer succeeded but re-probe was {probe.status.value}",
            probe=probe,
            duration_seconds=outcome.duration_seconds
        ))
        return False
