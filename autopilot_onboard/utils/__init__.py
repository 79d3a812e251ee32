"""
Utility modules for the onboarding bootstrap.
"""

from .logging import setup_logger, setup_root_logger, get_logger

__all__ = ["setup_logger", "setup_root_logger", "get_logger"]
