"""
Stand-in notification listener for local runs and tests.

Run with: uvicorn api.listener:app --port 8080
"""
import logging

from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

LEVELS = ("INFO", "WARNING", "ERROR")


class NotificationBody(BaseModel):
    level: str
    employee_abbreviation: str = Field("", alias="employeeAbbreviation")
    message: str = ""


def format_notification(body: NotificationBody) -> str:
    header = body.level.upper()
    if body.employee_abbreviation:
        return f"{header} [{body.employee_abbreviation}]: {body.message}"
    return f"{header}: {body.message}"


def create_listener_app() -> FastAPI:
    listener = FastAPI(title="Notification Listener", version="0.1.0")
    listener.state.received = []

    @listener.post("/api/notify", status_code=201)
    def notify(body: NotificationBody):
        if body.level.upper() not in LEVELS:
            logger.warning("Unexpected message level %s", body.level)
            raise HTTPException(status_code=400, detail="Unknown message type")
        line = format_notification(body)
        listener.state.received.append(line)
        logger.info("%s", line)
        return Response(status_code=201)

    return listener


app = create_listener_app()
