#!/usr/bin/env python3
"""
Main entry point for the iam-policy-autopilot onboarding bootstrap.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
import json
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from autopilot_onboard.core.onboarding import OnboardingController
from autopilot_onboard.models.outcome import OnboardingOutcome, OutcomeStatus
from autopilot_onboard.utils.logging import setup_root_logger, get_logger
from config.settings import Settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Make sure iam-policy-autopilot and AWS credentials are ready to use"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file (JSON format)"
    )

    parser.add_argument(
        "--profile",
        type=str,
        help="AWS CLI profile to check for credentials"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Timeout in seconds for each probe"
    )

    parser.add_argument(
        "--verify-identity",
        action="store_true",
        help="Confirm credentials with STS GetCallerIdentity"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Probe the environment without running install steps"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the outcome as JSON on stdout"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: from settings, INFO)"
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log file path (default: from settings)"
    )

    return parser.parse_args(argv)


def load_config(args) -> Settings:
    """Load configuration from file, environment and command line."""
    config_data = {}
    if args.config:
        if not args.config.exists():
            raise ValueError(f"Config file not found: {args.config}")
        with open(args.config) as f:
            config_data = json.load(f)

    # Command line overrides
    if args.profile:
        config_data.setdefault("credentials", {})["profile"] = args.profile
    if args.verify_identity:
        config_data.setdefault("credentials", {})["verify_identity"] = True
    if args.timeout:
        config_data.setdefault("subprocess", {})["timeout_seconds"] = args.timeout
    if args.dry_run:
        config_data["dry_run"] = True
    if args.log_level:
        config_data.setdefault("logging", {})["level"] = args.log_level
    if args.log_file:
        config_data.setdefault("logging", {})["file_path"] = str(args.log_file)

    return Settings(**config_data)


def report(outcome: OnboardingOutcome, as_json: bool = False) -> None:
    """Print the outcome for the caller."""
    if as_json:
        print(outcome.to_json_envelope())
        return

    logger = get_logger(__name__)
    tool_stage = outcome.tool_stage
    logger.info("=" * 60)
    logger.info("ONBOARDING SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Status: {outcome.status.value}")
    if tool_stage:
        logger.info(f"Tool ready: {tool_stage.success} (method: {tool_stage.method or 'none'})")
        if tool_stage.probe and tool_stage.probe.version:
            logger.info(f"Tool version: {tool_stage.probe.version}")
    if outcome.credentials:
        logger.info(f"AWS CLI present: {outcome.credentials.cli_present}")
        logger.info(f"Credentials configured: {outcome.credentials.credentials_configured}")
    for warning in outcome.warnings:
        logger.warning(warning)
    logger.info("=" * 60)

    if outcome.status == OutcomeStatus.FAILED:
        print(f"iam-policy-autopilot onboarding failed ({outcome.reason.value}).")
        if outcome.remediation_steps_exhausted:
            print(f"Install methods tried: {', '.join(outcome.remediation_steps_exhausted)}")
        print(f"Do not retry automatically; follow the setup guide: {outcome.documentation_url}")
    elif outcome.status == OutcomeStatus.COMPLETE_WITH_CREDENTIAL_WARNING:
        print("iam-policy-autopilot is ready (warning: AWS credentials are not configured).")
    else:
        print("iam-policy-autopilot is ready.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    try:
        settings = load_config(args)
    except Exception as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILED

    setup_root_logger(
        settings.logging.file_path,
        settings.logging.level,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count
    )
    logger = get_logger(__name__)
    logger.info(f"Arguments: {vars(args)}")

    try:
        outcome = OnboardingController(settings).run()
    except KeyboardInterrupt:
        logger.warning("Interrupted; partially installed tools are left in place")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return EXIT_FAILED

    report(outcome, as_json=args.json)
    return EXIT_OK if outcome.proceed else EXIT_FAILED


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
