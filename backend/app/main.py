from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.v1.router import router as v1_router
from backend.app.core import config
from backend.app.core.logsetup import configure_logging
from backend.app.db.base import Base
from backend.app.db.models import models_v1  # noqa: F401  (import for side effects)
from backend.app.db.session import engine
from backend.services.errors import ServiceError
from backend.services.mailers import build_email_sender
from backend.services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    Base.metadata.create_all(bind=engine)

    notifier = NotificationDispatcher(
        build_email_sender(),
        max_pending=config.NOTIFY_QUEUE_SIZE,
        workers=config.NOTIFY_WORKERS,
    )
    notifier.start()
    app.state.notifier = notifier
    logger.info("Blood bank API started (db=%s, email=%s)", engine.url.render_as_string(), config.EMAIL_BACKEND)
    try:
        yield
    finally:
        notifier.stop()


app = FastAPI(title="BLOOD BANK API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(v1_router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.http_status, content={"success": False, "error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"Invalid payload: {where} {first.get('msg', '')}".strip() if where else "Invalid payload"
    return JSONResponse(status_code=400, content={"success": False, "error": message})


def run() -> None:
    uvicorn.run("backend.app.main:app", host="0.0.0.0", port=config.PORT)
