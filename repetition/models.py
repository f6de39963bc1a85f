from .data.models import DailyActivity, NewQueueLock, SessionCard, StudySession, UserCard

__all__ = ["DailyActivity", "NewQueueLock", "SessionCard", "StudySession", "UserCard"]
