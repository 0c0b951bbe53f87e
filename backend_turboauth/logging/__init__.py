"""
Structured logging for Backend TurboAuth.

Use get_logger(__name__) in every module; first argument is the event_type.
"""

from backend_turboauth.logging.logger import get_logger

__all__ = ["get_logger"]
