class SchedulingError(Exception):
    """Base error: a ``kind`` string plus structured ``context``."""

    kind = "scheduling_error"

    def __init__(self, message=None, **context):
        self.context = context
        self.message = message or self.kind
        super().__init__(self.message)

    def as_dict(self):
        return {
            "error": self.kind,
            "message": self.message,
            "context": {key: _plain(value) for key, value in self.context.items()},
        }


class InvalidRating(SchedulingError):
    kind = "invalid_rating"

    def __init__(self, rating, **context):
        super().__init__(f"rating must be one of 1, 2, 3, 4; got {rating!r}", rating=rating, **context)


class CorruptState(SchedulingError):
    kind = "corrupt_state"


class RecordsNotFound(SchedulingError):
    kind = "records_not_found"


class StoreUnavailable(SchedulingError):
    kind = "store_unavailable"


class ConcurrentUpdate(SchedulingError):
    kind = "concurrent_update"


class SessionNotFound(SchedulingError):
    kind = "session_not_found"


def _plain(value):
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple, set)):
        return [_plain(item) for item in value]
    return str(value)
