"""
Configuration settings for the iam-policy-autopilot onboarding bootstrap.
"""

from typing import Optional, List
from pathlib import Path
from pydantic import BaseModel, Field, validator
from pydantic_settings import BaseSettings

DOCUMENTATION_URL = "https://github.com/awslabs/iam-policy-autopilot"
INSTALL_SCRIPT_URL = "https://github.com/awslabs/iam-policy-autopilot/raw/refs/heads/main/install.sh"


class PrimaryToolConfig(BaseModel):
    """The CLI whose presence the bootstrap guarantees."""
    command: str = Field(default="iam-policy-autopilot", description="Executable name")
    package: str = Field(default="iam-policy-autopilot", description="Package name on the index")
    version_pattern: str = Field(
        default=r"iam-policy-autopilot[:\s]+v?(\d+\.\d+\.\d+[\w.+-]*)",
        description="Regex with one group capturing the version from `--version` output"
    )


class RunnerConfig(BaseModel):
    """Ephemeral package runner used as the first fallback."""
    command: str = Field(default="uvx", description="Runner executable")
    install_command: List[str] = Field(
        default_factory=lambda: ["uv", "tool", "install"],
        description="Persistent install command; the package name is appended"
    )


class RemediationConfig(BaseModel):
    """Fallback install methods, tried in order after the runner."""
    installer_command: List[str] = Field(
        default_factory=lambda: ["pip", "install", "--no-input"],
        description="Auto-confirmed package installer command; the package name is appended"
    )
    install_script_url: str = Field(default=INSTALL_SCRIPT_URL, description="Install script location")
    fetch_command: List[str] = Field(
        default_factory=lambda: ["curl", "-sSfL"],
        description="Command used to download the install script"
    )
    documentation_url: str = Field(default=DOCUMENTATION_URL, description="Setup documentation")

    @validator('install_script_url')
    def validate_secure_transport(cls, v):
        if not v.lower().startswith("https://"):
            raise ValueError(f"Install script must be fetched over https: {v}")
        return v

    @validator('installer_command', 'fetch_command')
    def validate_command_not_empty(cls, v):
        if not v:
            raise ValueError("Command must not be empty")
        return v


class CredentialConfig(BaseModel):
    """AWS CLI credential gate."""
    cli_command: str = Field(default="aws", description="AWS CLI executable")
    version_pattern: str = Field(default=r"aws-cli/(\d+\.\d+\.\d+)", description="AWS CLI version regex")
    profile: Optional[str] = Field(None, description="Profile to inspect (default profile if unset)")
    verify_identity: bool = Field(default=False, description="Call STS GetCallerIdentity")


class SubprocessConfig(BaseModel):
    """Limits applied to every subprocess call."""
    timeout_seconds: float = Field(default=60.0, description="Timeout for probes and config reads")
    install_timeout_seconds: float = Field(default=300.0, description="Timeout for install steps")

    @validator('timeout_seconds', 'install_timeout_seconds')
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format"
    )
    file_path: Optional[Path] = Field(default=Path("logs/onboarding.log"))
    max_file_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, description="Number of log backups to keep")


class Settings(BaseSettings):
    """Main application settings."""
    primary_tool: PrimaryToolConfig = Field(default_factory=PrimaryToolConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    remediation: RemediationConfig = Field(default_factory=RemediationConfig)
    credentials: CredentialConfig = Field(default_factory=CredentialConfig)
    subprocess: SubprocessConfig = Field(default_factory=SubprocessConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Operational settings
    dry_run: bool = Field(default=False, description="Probe only; do not run install steps")

    class Config:
        env_prefix = "ONBOARD_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        extra = "ignore"  # Ignore extra fields from environment
