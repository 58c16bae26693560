from __future__ import annotations

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from backend.app.db.session import SessionLocal
from backend.services.notifications import NotificationDispatcher
from backend.services.stock import StockReplacementService, StockStore


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_notifier(request: Request) -> NotificationDispatcher | None:
    # créé par le lifespan de l'app
    return getattr(request.app.state, "notifier", None)


def get_stock_service(
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher | None = Depends(get_notifier),
) -> StockReplacementService:
    return StockReplacementService(StockStore(db), notifier)
