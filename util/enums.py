# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    BACKEND_UNAVAILABLE = ErrorInfo(
        "Trigger store unavailable", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    BACKEND_ERROR = ErrorInfo("Trigger store error", status.HTTP_502_BAD_GATEWAY)
    POLLER_DISABLED = ErrorInfo("Poller is not running", status.HTTP_404_NOT_FOUND)
