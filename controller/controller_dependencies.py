# controller/controller_dependencies.py
from typing import Optional
from fastapi import Request
from core.poller import Poller
from service.trigger_service import TriggerService
from util.enums import ErrorMessage
from util.errors import AppError, BackendError, BackendUnavailable, TriggerError


def get_trigger_service(request: Request) -> TriggerService:
    return request.app.state.trigger_service


def get_poller(request: Request) -> Optional[Poller]:
    return getattr(request.app.state, "poller", None)


def to_app_error(e: TriggerError) -> AppError:
    """Map store failures onto HTTP statuses; anything else is a bad request."""
    if isinstance(e, BackendUnavailable):
        info = ErrorMessage.BACKEND_UNAVAILABLE.value
    elif isinstance(e, BackendError):
        info = ErrorMessage.BACKEND_ERROR.value
    else:
        return AppError(str(e))
    return AppError(info.message, info.http_status)
