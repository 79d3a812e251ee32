"""
Tool stage, credential and onboarding outcome models.
"""

from enum import Enum
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
import json

from .probe import ProbeResult
from .remediation import StepResult


class StageState(str, Enum):
    """States of the tool readiness state machine."""
    UNCHECKED = "unchecked"
    PRIMARY_FOUND = "primary_found"
    RUNNER_CHECKING = "runner_checking"
    RUNNER_INSTALLING = "runner_installing"
    REMEDIATING = "remediating"
    FAILED = "failed"


class OutcomeStatus(str, Enum):
    """Final onboarding state handed to the caller."""
    COMPLETE = "complete"
    COMPLETE_WITH_CREDENTIAL_WARNING = "complete_with_credential_warning"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why onboarding failed."""
    REMEDIATION_EXHAUSTED = "remediation_exhausted"
    PREREQUISITE_MISSING = "prerequisite_missing"


class StageTransition(BaseModel):
    """One visited state, with the step that was running in it."""
    state: StageState
    step: Optional[str] = None


class ToolStageResult(BaseModel):
    """Result of making the primary tool available."""
    success: bool = Field(..., description="Whether the primary tool is resolvable")
    state: StageState = Field(default=StageState.UNCHECKED, description="Final state")
    method: Optional[str] = Field(None, description="How the tool became available")
    probe: Optional[ProbeResult] = Field(None, description="Last probe of the primary tool")
    attempts: List[StepResult] = Field(default_factory=list, description="Install steps attempted")
    transitions: List[StageTransition] = Field(default_factory=list)

    def enter(self, state: StageState, step: Optional[str] = None) -> None:
        """Record a transition."""
        self.state = state
        self.transitions.append(StageTransition(state=state, step=step))

    @property
    def steps_attempted(self) -> List[str]:
        return [attempt.step for attempt in self.attempts]


class CredentialStatus(BaseModel):
    """Presence of the AWS CLI and of durable credentials in its config."""
    cli_present: bool = Field(..., description="Whether the AWS CLI is usable")
    cli_version: Optional[str] = Field(None, description="AWS CLI version")
    access_key_present: bool = Field(default=False)
    secret_key_present: bool = Field(default=False)
    profile: Optional[str] = Field(None, description="Profile that was inspected")
    account_id: Optional[str] = Field(None, description="Account id from STS, when verified")
    probe: Optional[ProbeResult] = None

    @property
    def credentials_configured(self) -> bool:
        return self.access_key_present and self.secret_key_present

    @property
    def missing_fields(self) -> List[str]:
        missing = []
        if not self.access_key_present:
            missing.append("access_key")
        if not self.secret_key_present:
            missing.append("secret_key")
        return missing


class OnboardingOutcome(BaseModel):
    """Final result of one onboarding run."""
    status: OutcomeStatus = Field(..., description="Outcome status")
    reason: Optional[FailureReason] = Field(None, description="Failure reason")
    remediation_steps_exhausted: List[str] = Field(default_factory=list)
    tool_stage: Optional[ToolStageResult] = None
    credentials: Optional[CredentialStatus] = None
    warnings: List[str] = Field(default_factory=list)
    documentation_url: Optional[str] = Field(None, description="Where to go next on failure")

    # Timing
    started_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    @property
    def proceed(self) -> bool:
        """Whether the caller may go on to use the tool."""
        return self.status != OutcomeStatus.FAILED

    def complete(self, status: OutcomeStatus,
                 reason: Optional[FailureReason] = None) -> None:
        """Mark the run as finished."""
        self.status = status
        self.reason = reason
        self.completed_at = datetime.utcnow()
        if self.started_at:
            self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    def to_json_envelope(self) -> str:
        """Convert to JSON envelope format."""
        return json.dumps(self.model_dump(mode="json"), indent=2, default=str)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "failed",
                "reason": "remediation_exhausted",
                "remediation_steps_exhausted": ["package_installer", "install_script"],
                "documentation_url": "https://github.com/awslabs/iam-policy-autopilot"
            }
        }
