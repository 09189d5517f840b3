"""
Observability module.

Provides structured logging helpers and correlation ID tracking.
"""

from linkdrop.observability.correlation import get_correlation_id, set_correlation_id
from linkdrop.observability.logger import configure_logging

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]
