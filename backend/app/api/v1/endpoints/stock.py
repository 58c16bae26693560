from __future__ import annotations

from fastapi import APIRouter, Depends

from backend.app.api.deps import get_stock_service
from backend.app.schemas.stock import BloodStockRead, HospitalRead, SaveStockRequest
from backend.services.stock import StockReplacementService

router = APIRouter()


@router.post("/saveStock")
def save_stock(
    payload: SaveStockRequest,
    service: StockReplacementService = Depends(get_stock_service),
):
    """
    Remplace tout le stock de l'hôpital (upsert par nom).
    - 400 si un champ hôpital manque
    - emailSent = notification confirmée, n'influe jamais sur le statut
    """
    result = service.submit_stock(
        payload.hospitalInfo.model_dump() if payload.hospitalInfo else None,
        [bg.model_dump() for bg in payload.bloodGroups] if payload.bloodGroups is not None else None,
    )
    return {"success": True, "hospitalId": result.hospital_id, "emailSent": result.email_sent}


@router.get("/getStock/{hospital_name}")
def get_stock(
    hospital_name: str,
    service: StockReplacementService = Depends(get_stock_service),
):
    snapshot = service.get_stock(hospital_name)
    return {
        "success": True,
        "hospital": HospitalRead.model_validate(snapshot.hospital).model_dump(mode="json"),
        "bloodGroups": [BloodStockRead.model_validate(l).model_dump() for l in snapshot.lines],
    }


@router.get("/hospitals")
def list_hospitals(service: StockReplacementService = Depends(get_stock_service)):
    return {
        "success": True,
        "hospitals": [HospitalRead.model_validate(h).model_dump(mode="json") for h in service.list_hospitals()],
    }
