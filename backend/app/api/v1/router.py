from fastapi import APIRouter

from backend.app.api.v1.endpoints.health import router as health_router
from backend.app.api.v1.endpoints.stock import router as stock_router
from backend.app.api.v1.endpoints.hospitals import router as hospitals_router
from backend.app.api.v1.endpoints.donors import router as donors_router
from backend.app.api.v1.endpoints.blood_requests import router as requests_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(stock_router, tags=["stock"])
router.include_router(hospitals_router, tags=["hospitals"])
router.include_router(donors_router, tags=["donors"])
router.include_router(requests_router, tags=["requests"])
