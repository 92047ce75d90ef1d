"""
Utility modules for the source editor.
"""

from source_editor.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_edit_applied,
    log_session_outcome,
    log_error_with_context,
)
from source_editor.utils.metrics import SessionMetrics

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_edit_applied",
    "log_session_outcome",
    "log_error_with_context",
    "SessionMetrics",
]
