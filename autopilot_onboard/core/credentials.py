"""
Credential gate: the AWS CLI must exist and should hold durable credentials.
"""

import json
import logging
import re
from typing import Dict, List, Optional

from config.settings import Settings
from ..models.probe import ProbeResult
from ..models.outcome import CredentialStatus
from .command_runner import CommandRunner
from .prober import VersionProber

NOT_SET = "<not set>"
ROW_PATTERN = re.compile(r"^\s*(\S+)\s+(<not set>|\S+)")


def parse_configure_list(output: str) -> Dict[str, Optional[str]]:
    """
    Parse `aws configure list` output into {row name: value}.

    Rows whose value is `<not set>` map to None. Header and separator rows
    are dropped.
    """
    rows: Dict[str, Optional[str]] = {}
    for line in output.splitlines():
        match = ROW_PATTERN.match(line)
        if not match:
            continue
        name, value = match.group(1), match.group(2)
        if name.lower() == "name" or set(name) == {"-"}:
            continue
        rows[name.lower()] = None if value == NOT_SET else value
    return rows


class CredentialGate:
    """Checks the AWS CLI and its configured credentials. Read-only."""

    def __init__(self, settings: Settings, runner: Optional[CommandRunner] = None):
        self.logger = logging.getLogger(__name__)
        self.settings = settings
        self.config = settings.credentials
        self.runner = runner or CommandRunner(settings.subprocess.timeout_seconds)
        self.prober = VersionProber(self.runner, timeout=settings.subprocess.timeout_seconds)

    def probe_secondary_cli(self) -> ProbeResult:
        return self.prober.probe_version(self.config.cli_command, self.config.version_pattern)

    def read_credential_config(self) -> Dict[str, bool]:
        """
        Read the access-key and secret-key rows from `aws configure list`.

        Returns:
            {"access_key_present": bool, "secret_key_present": bool}
        """
        args = [self.config.cli_command, "configure", "list"] + self._profile_args()
        result = self.runner.run(args, timeout=self.settings.subprocess.timeout_seconds)
        if not result.ok:
            self.logger.warning(f"Could not read AWS CLI configuration: {result.error}")
            return {"access_key_present": False, "secret_key_present": False}

        rows = parse_configure_list(result.stdout)
        return {
            "access_key_present": rows.get("access_key") is not None,
            "secret_key_present": rows.get("secret_key") is not None,
        }

    def verify_identity(self) -> Optional[str]:
        """Return the caller's account id from STS, or None if the call fails."""
        args = [self.config.cli_command, "sts", "get-caller-identity", "--output", "json"]
        args += self._profile_args()
        result = self.runner.run(args, timeout=self.settings.subprocess.timeout_seconds)
        if not result.ok:
            self.logger.warning(f"STS GetCallerIdentity failed: {result.error}")
            return None
        try:
            return json.loads(result.stdout).get("Account")
        except ValueError as e:
            self.logger.warning(f"Unexpected STS response: {e}")
            return None

    def check(self) -> CredentialStatus:
        """Run the full gate."""
        probe = self.probe_secondary_cli()
        status = CredentialStatus(
            cli_present=probe.found,
            cli_version=probe.version,
            profile=self.config.profile,
            probe=probe
        )
        if not probe.found:
            self.logger.error(f"{self.config.cli_command} is not usable: {probe.error}")
            return status

        flags = self.read_credential_config()
        status.access_key_present = flags["access_key_present"]
        status.secret_key_present = flags["secret_key_present"]
        if not status.credentials_configured:
            self.logger.warning(f"AWS credentials not configured: missing {', '.join(status.missing_fields)}")

        if self.config.verify_identity and status.credentials_configured:
            status.account_id = self.verify_identity()
        return status

    def _profile_args(self) -> List[str]:
        if self.config.profile:
            return ["--profile", self.config.profile]
        return []
