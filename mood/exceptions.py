"""
Custom Exception Classes

Provides specific exception types for the mood insights app.

Insufficient data is never an exception here: the engines answer with an
empty list, a missing pattern or the fallback suggestions instead. Store
failures raise through the StorageError family.
"""


class MoodException(Exception):
    """Base exception for all mood-insights errors"""
    pass


class TriggerNotFoundError(MoodException):
    """Raised when a trigger does not exist for the user"""
    def __init__(self, trigger_id: str):
        self.trigger_id = trigger_id
        super().__init__(f"Trigger '{trigger_id}' not found")


class ValidationError(MoodException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"Validation error for '{field}': {message}")


class StorageError(MoodException):
    """
    Raised when a read or write against a backing store fails.

    Callers own the retry policy; nothing in the app retries on its own.
    """
    store = 'storage'

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{self.store} {operation} failed: {reason}")


class MoodHistoryStoreError(StorageError):
    """Raised when the mood history cannot be read or written"""
    store = 'mood history'


class CorrelationStoreError(StorageError):
    """Raised when the correlation set cannot be read or replaced"""
    store = 'correlation store'


class TriggerStoreError(StorageError):
    """Raised when the trigger log cannot be read or appended to"""
    store = 'trigger store'


class ProfileStoreError(StorageError):
    """Raised when the user's mood profile cannot be read"""
    store = 'profile store'


class NotificationError(MoodException):
    """Raised by a notification dispatcher when delivery fails"""
    def __init__(self, channel: str, reason: str):
        self.channel = channel
        self.reason = reason
        super().__init__(f"Notification via {channel} failed: {reason}")
