"""
Probe result models.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ProbeStatus(str, Enum):
    """Outcome of a `--version` style probe."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERRORED = "errored"


class ProbeResult(BaseModel):
    """Result of executing a named command with `--version`."""
    command: str = Field(..., description="Command line that was probed")
    status: ProbeStatus = Field(..., description="Probe classification")
    version: Optional[str] = Field(None, description="Version parsed from the output")
    output: Optional[str] = Field(None, description="Captured stdout and stderr")
    exit_code: Optional[int] = Field(None, description="Process exit code, if a process ran")
    error: Optional[str] = Field(None, description="Why the probe did not succeed")
    duration_seconds: Optional[float] = Field(None, description="Probe duration")

    @property
    def found(self) -> bool:
        return self.status == ProbeStatus.FOUND

    class Config:
        json_schema_extra = {
            "example": {
                "command": "iam-policy-autopilot --version",
                "status": "found",
                "version": "0.1.2",
                "output": "iam-policy-autopilot: 0.1.2",
                "exit_code": 0,
                "duration_seconds": 0.04
            }
        }
