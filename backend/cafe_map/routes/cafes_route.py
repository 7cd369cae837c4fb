from fastapi import APIRouter, Depends, HTTPException
import logging

from cafe_map.models.cafe_model import (
    CafeFilter, CafesResponse, ElementType, StatusUpdate, StatusRecord, cafe_key
)
from cafe_map.services.Cafe_service import CafeService, OverpassError
from cafe_map.core.storage import get_repository
from cafe_map.core.logger import logs

router = APIRouter(prefix="/cafes", tags=["cafes"])

# --- Dependency Injection ---
async def get_cafe_service(repo = Depends(get_repository)) -> CafeService:
    return CafeService(repo)

# --- Endpoints ---
@router.get("", response_model=CafesResponse)
async def list_cafes(
    status: CafeFilter = CafeFilter.ALL,
    service: CafeService = Depends(get_cafe_service)
):
    """
    Fetches cafes from Overpass and merges the persisted statuses onto them.
    The counter always covers every cafe, whatever the status filter.
    """
    try:
        response = await service.load_cafes()
    except OverpassError as e:
        logs.log(logging.ERROR, f"Error in list_cafes: {str(e)}")
        raise HTTPException(
            status_code=502,
            detail="Failed to load cafes. Check your internet connection."
        )

    if status != CafeFilter.ALL:
        response.cafes = [cafe for cafe in response.cafes if cafe.status.value == status.value]
    return response

@router.get("/statuses", response_model=dict[str, str])
async def list_statuses(service: CafeService = Depends(get_cafe_service)):
    return await service.get_statuses()

@router.put("/{osm_type}/{osm_id}/status", response_model=StatusRecord)
async def update_status(
    osm_type: ElementType,
    osm_id: int,
    update: StatusUpdate,
    service: CafeService = Depends(get_cafe_service)
):
    cafe_id = cafe_key(osm_type, osm_id)
    status = await service.set_status(cafe_id, update.status)
    return StatusRecord(cafe_id=cafe_id, status=status)
