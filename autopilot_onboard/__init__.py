"""
Onboarding bootstrap for the iam-policy-autopilot CLI.
"""

__version__ = "0.1.0"
