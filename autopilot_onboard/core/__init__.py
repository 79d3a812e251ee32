"""
Core modules for the onboarding bootstrap.
"""

from .command_runner import CommandRunner, CommandResult
from .prober import VersionProber
from .readiness import ToolReadinessController
from .credentials import CredentialGate
from .onboarding import OnboardingController

__all__ = [
    "CommandRunner",
    "CommandResult",
    "VersionProber",
    "ToolReadinessController",
    "CredentialGate",
    "OnboardingController"
]
