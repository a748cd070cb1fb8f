# routes.py
from fastapi import FastAPI
from controller.trigger_controller import trigger_router


def register_routes(app: FastAPI) -> None:
    """Register controllers here."""
    app.include_router(trigger_router)
