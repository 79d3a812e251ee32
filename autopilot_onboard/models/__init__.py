"""
Data models for the onboarding bootstrap.
"""

from .probe import ProbeResult, ProbeStatus
from .remediation import RemediationStep, StepResult, StepStatus, ErrorKind
from .outcome import (
    StageState,
    StageTransition,
    ToolStageResult,
    CredentialStatus,
    OnboardingOutcome,
    OutcomeStatus,
    FailureReason,
)

__all__ = [
    "ProbeResult",
    "ProbeStatus",
    "RemediationStep",
    "StepResult",
    "StepStatus",
    "ErrorKind",
    "StageState",
    "StageTransition",
    "ToolStageResult",
    "CredentialStatus",
    "OnboardingOutcome",
    "OutcomeStatus",
    "FailureReason"
]
