"""
Install steps for the primary tool, in the order they are tried.
"""

import shlex
from typing import List

from config.settings import Settings
from ..models.remediation import RemediationStep

RUNNER_INSTALL = "runner_install"
PACKAGE_INSTALLER = "package_installer"
INSTALL_SCRIPT = "install_script"


def build_runner_install_step(settings: Settings) -> RemediationStep:
    """Persistent install through the package runner (`uv tool install`)."""
    command = list(settings.runner.install_command) + [settings.primary_tool.package]
    return RemediationStep(
        name=RUNNER_INSTALL,
        description="Persistent install through the package runner",
        command=command,
        requires=[command[0]]
    )


def build_remediation_chain(settings: Settings) -> List[RemediationStep]:
    """
    Build the fallback chain run after the primary and runner probes fail.

    Ordered from least to most invasive: the package installer first, then
    the privileged install script.
    """
    remediation = settings.remediation
    package = settings.primary_tool.package

    installer = list(remediation.installer_command) + [package]
    fetch = " ".join(shlex.quote(part) for part in remediation.fetch_command)
    script = f"{fetch} {shlex.quote(remediation.install_script_url)} | sh"

    return [
        RemediationStep(
            name=PACKAGE_INSTALLER,
            description="Auto-confirmed install through the package installer",
            command=installer,
            requires=[installer[0]]
        ),
        RemediationStep(
            name=INSTALL_SCRIPT,
            description="Download and run the install script with elevated privileges",
            command=["bash", "-o", "pipefail", "-c", script],
            requires=[remediation.fetch_command[0], "bash"],
            elevated=True
        ),
    ]
