import uuid


def as_uuid(value):
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
