"""
Onboarding controller - tool readiness followed by the credential gate.
"""

from datetime import datetime
from typing import Optional

from config.settings import Settings
from ..models.outcome import OnboardingOutcome, OutcomeStatus, FailureReason
from ..utils.logging import setup_logger
from .command_runner import CommandRunner
from .readiness import ToolReadinessController
from .credentials import CredentialGate


class OnboardingController:
    """Runs one onboarding pass and folds the stages into an outcome."""

    def __init__(self,
                 settings: Settings,
                 runner: Optional[CommandRunner] = None,
                 readiness: Optional[ToolReadinessController] = None,
                 gate: Optional[CredentialGate] = None):
        """
        Initialize the controller.

        Args:
            settings: Application settings
            runner: Command runner shared by both stages
            readiness: Override the tool readiness controller
            gate: Override the credential gate
        """
        self.logger = setup_logger(__name__)
        self.settings = settings
        self.runner = runner or CommandRunner(settings.subprocess.timeout_seconds)
        self.readiness = readiness or ToolReadinessController(
            settings, runner=self.runner, dry_run=settings.dry_run
        )
        self.gate = gate or CredentialGate(settings, runner=self.runner)

    def run(self) -> OnboardingOutcome:
        """
        Run the bootstrap from scratch.

        Returns:
            OnboardingOutcome with status complete, complete_with_credential_warning or failed
        """
        started_at = datetime.utcnow()
        self.logger.info("Starting iam-policy-autopilot onboarding")

        tool_stage = self.readiness.ensure_primary_tool()
        credentials = self.gate.check()

        outcome = OnboardingOutcome(
            status=OutcomeStatus.FAILED,
            started_at=started_at,
            tool_stage=tool_stage,
            credentials=credentials
        )
        if not tool_stage.success:
            outcome.remediation_steps_exhausted = tool_stage.steps_attempted

        if not credentials.cli_present:
            outcome.warnings.append(
                f"{self.settings.credentials.cli_command} is required; install the AWS CLI first"
            )
            self._fail(outcome, FailureReason.PREREQUISITE_MISSING)
        elif not tool_stage.success:
            outcome.warnings.append(
                f"All install methods failed for {self.settings.primary_tool.command}"
            )
            self._fail(outcome, FailureReason.REMEDIATION_EXHAUSTED)
        elif not credentials.credentials_configured:
            outcome.warnings.append(
                f"AWS credentials missing ({', '.join(credentials.missing_fields)}); "
                "run `aws configure` before calling the tool"
            )
            outcome.complete(OutcomeStatus.COMPLETE_WITH_CREDENTIAL_WARNING)
        else:
            outcome.complete(OutcomeStatus.COMPLETE)

        if (outcome.proceed and self.settings.credentials.verify_identity
                and credentials.credentials_configured and not credentials.account_id):
            outcome.warnings.append("Credentials are configured but STS could not confirm the identity")

        self.logger.info(f"Onboarding finished: {outcome.status.value}")
        return outcome

    def _fail(self, outcome: OnboardingOutcome, reason: FailureReason) -> None:
        outcome.documentation_url = self.settings.remediation.documentation_url
        outcome.complete(OutcomeStatus.FAILED, reason)
        self.logger.error(
            f"Onboarding failed ({reason.value}); see {outcome.documentation_url}"
        )
