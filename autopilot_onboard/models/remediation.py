"""
Remediation step and step result models.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, validator

from .probe import ProbeResult


class StepStatus(str, Enum):
    """Status of an attempted install step."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    UNAVAILABLE = "unavailable"
    SKIPPED = "skipped"


class ErrorKind(str, Enum):
    """Failure taxonomy used when classifying probes and install steps."""
    COMMAND_NOT_FOUND = "command_not_found"
    COMMAND_ERRORED = "command_errored"
    INSTALL_FAILED = "install_failed"
    PREREQUISITE_MISSING = "prerequisite_missing"


class RemediationStep(BaseModel):
    """One named, ordered install action.

    Success is always decided by re-probing the primary tool after the
    command has run. On failure the controller moves on to the next step
    in the chain.
    """
    name: str = Field(..., description="Step name")
    description: str = Field(default="", description="Human readable description")
    command: List[str] = Field(..., description="Command to run (argv)")
    requires: List[str] = Field(
        default_factory=list,
        description="Executables that must be resolvable for this step to run"
    )
    elevated: bool = Field(default=False, description="Run with elevated privileges")
    timeout_seconds: Optional[float] = Field(None, description="Override the default timeout")

    @validator('command')
    def validate_command_not_empty(cls, v):
        if not v:
            raise ValueError("Remediation step command must not be empty")
        return v

    def display(self) -> str:
        return " ".join(self.command)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "package_installer",
                "description": "Install with pip",
                "command": ["pip", "install", "--no-input", "iam-policy-autopilot"],
                "requires": ["pip"],
                "elevated": False
            }
        }


class StepResult(BaseModel):
    """Record of one attempted install step."""
    step: str = Field(..., description="Step name")
    status: StepStatus = Field(..., description="Step status")
    error_kind: Optional[ErrorKind] = Field(None, description="Failure classification")
    command: Optional[str] = Field(None, description="Command that was run")
    output: Optional[str] = Field(None, description="Install command output")
    error: Optional[str] = Field(None, description="Error message if failed")
    probe: Optional[ProbeResult] = Field(None, description="Re-probe of the primary tool")
    duration_seconds: Optional[float] = Field(None, description="Step duration")
