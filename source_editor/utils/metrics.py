"""
Metrics collection for transformation sessions.

Tracks per-session:
- Start/end time and duration
- Number of edits in the batch
- Whether the file changed
- Final status and error message
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from source_editor.utils.logging import get_logger

logger = get_logger(__name__)


class SessionMetrics:
    """
    Collects metrics during one file transformation session.
    """

    def __init__(self, session_id: str, file_path: str):
        """
        Initialize metrics collector.

        Args:
            session_id: Session ID
            file_path: File being transformed
        """
        self.session_id = session_id
        self.file_path = file_path

        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[float] = None

        self.edit_count: int = 0
        self.changed: bool = False

        self.status: str = "pending"
        self.error_message: Optional[str] = None

    def start(self) -> None:
        """Mark session start."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"

    def record_result(self, edit_count: int, changed: bool) -> None:
        """
        Record the outcome of applying the edit batch.

        Args:
            edit_count: Number of edits in the batch
            changed: Whether the resulting text differs from the original
        """
        self.edit_count = edit_count
        self.changed = changed

    def complete(self, status: str = "completed", error_message: Optional[str] = None) -> None:
        """
        Mark session completion.

        Args:
            status: Final status ('completed', 'unchanged', 'failed')
            error_message: Error message if failed
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status
        self.error_message = error_message

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = duration * 1000

        logger.debug(
            f"Session {self.session_id} {self.status}",
            extra={
                "session_id": self.session_id,
                "file_path": self.file_path,
                "status": self.status,
                "duration_ms": self.duration_ms,
                "edit_count": self.edit_count,
                "changed": self.changed,
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert metrics to a dictionary.

        Returns:
            Dictionary of collected metrics
        """
        return {
            "session_id": self.session_id,
            "file_path": self.file_path,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "edit_count": self.edit_count,
            "changed": self.changed,
            "status": self.status,
            "error_message": self.error_message,
        }
