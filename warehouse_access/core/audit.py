"""
Activity Logging Module
=======================

Keeps the activity log of the warehouse system: who logged in, whose
data was changed and what went wrong with the users file.

Features:
- Append-only log entries with a timestamp and a severity level
- Listing all entries or the entries of a single day
- Rendering in the ``[yyyy-MM-dd HH:mm:ss] Level: message`` line format
- A credential store listener that records the store's notifications
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session, sessionmaker

from ..models.database import get_session
from ..models.entities import ActivityLog, LogLevel
from .credential_store import CredentialStoreListener

NO_LOGS_FOUND = "No logs found"
NO_RELEVANT_LOGS_FOUND = "No relevant logs found"


class ActivityLogger:
    """
    Activity log service.

    Provides:
    - Log creation for logins and user management actions
    - Queries for the ViewLogs screen
    """

    def __init__(self, session: Session):
        """
        Initialize activity logger with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def add_new_log(
        self,
        message: str,
        level: LogLevel = LogLevel.INFO,
        username: Optional[str] = None,
        timestamp: Optional[datetime] = None
    ) -> ActivityLog:
        """
        Append an entry to the activity log.

        Args:
            message: What happened
            level: LogLevel.INFO, LogLevel.WARNING or LogLevel.ERROR
            username: User the entry is about, if any
            timestamp: When it happened (defaults to now)

        Returns:
            Created ActivityLog entry
        """
        log_entry = ActivityLog(
            timestamp=timestamp or datetime.now(),
            level=level,
            message=message,
            username=username
        )

        self.session.add(log_entry)
        self.session.flush()
        return log_entry

    def get_all_logs(self) -> List[ActivityLog]:
        """All entries, oldest first."""
        return self.session.query(ActivityLog).order_by(
            ActivityLog.timestamp, ActivityLog.id
        ).all()

    def get_logs_from_date(self, day: date) -> List[ActivityLog]:
        """
        Get the entries of a single calendar day.

        Args:
            day: The day to list; a datetime is reduced to its date

        Returns:
            Entries of that day, oldest first
        """
        if isinstance(day, datetime):
            day = day.date()
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)

        return self.session.query(ActivityLog).filter(
            ActivityLog.timestamp >= start,
            ActivityLog.timestamp < end
        ).order_by(ActivityLog.timestamp, ActivityLog.id).all()

    @staticmethod
    def format_logs(logs: List[ActivityLog], empty_message: str = NO_LOGS_FOUND) -> str:
        """Render entries one per line, or the empty message if there are none."""
        if not logs:
            return empty_message
        return ''.join(f"{log.render()}\n" for log in logs)


class AuditListener(CredentialStoreListener):
    """
    Records credential store notifications in the activity log.

    Every notification is written and committed in its own session, so
    an entry survives even when the operation that triggered it fails.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _log(self, message: str, level: LogLevel = LogLevel.INFO, username: Optional[str] = None):
        with get_session(self.session_factory) as session:
            ActivityLogger(session).add_new_log(message, level=level, username=username)

    def password_verified(self, username: str, success: bool) -> None:
        outcome = "successful" if success else "unsuccessful"
        self._log(f"login of user {username} - {outcome}", username=username)

    def user_data_changed(self, action: str, username: str) -> None:
        self._log(
            f"action was performed on data of a user named {username} - {action}",
            username=username
        )

    def file_error_found(self, problem: str) -> None:
        self._log(f"problem in users file found - {problem}", level=LogLevel.ERROR)
