# util/errors.py
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class TriggerError(Exception):
    """Base for every trigger store failure."""


class EncodeFailure(TriggerError):
    """A trigger could not be serialized; fatal to that single write."""


class MalformedRecord(TriggerError):
    """A stored set member does not parse into a trigger; skippable."""


DecodeFailure = MalformedRecord


class InvalidKeyFormat(TriggerError):
    def __init__(self, pattern: str, key: str) -> None:
        super().__init__(f"key {key!r} is not a '{pattern}-<unix_seconds>' bucket")
        self.pattern = pattern
        self.key = key


class BackendUnavailable(TriggerError):
    """Redis could not be reached (connection refused, timeout)."""


class BackendError(TriggerError):
    """Redis answered with an error."""


class UnknownAction(TriggerError):
    def __init__(self, name: str) -> None:
        super().__init__(f"no action registered for {name!r}")
        self.name = name
