"""
/add_wine and /list_wines endpoints for SaveMyWines.

A device's collection is keyed by its client-generated device id.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ..models import AddWineRequest, AddWineResponse, ErrorResponse, WineRecord
from ..services.wine_repository import WineCollectionRepository

logger = logging.getLogger(__name__)
router = APIRouter()


# Singleton repository instance
_wine_repo: Optional[WineCollectionRepository] = None


def get_wine_repo() -> WineCollectionRepository:
    """Get or create wine collection repository singleton."""
    global _wine_repo
    if _wine_repo is None:
        _wine_repo = WineCollectionRepository()
    return _wine_repo


@router.post(
    "/add_wine",
    response_model=AddWineResponse,
    responses={
        400: {"description": "Not JSON, or missing required fields (plain text)"},
        500: {"model": ErrorResponse},
    },
)
async def add_wine(request: Request, repo: WineCollectionRepository = Depends(get_wine_repo)):
    """
    Add a wine to a device's collection.

    Requires device_id, name and date_purchased.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type:
        return PlainTextResponse("Bad Request: Expected JSON", status_code=400)

    try:
        wine = AddWineRequest.model_validate(await request.json())
    except ValueError as e:
        # JSON syntax, undecodable bytes and pydantic validation errors alike
        logger.info(f"Rejected add_wine payload: {e}")
        return PlainTextResponse("Bad Request: Invalid wine payload", status_code=400)

    if wine.missing_required():
        return PlainTextResponse(
            "Missing required fields: device_id, name, date_purchased", status_code=400
        )

    try:
        wine_id = repo.add_wine(wine)
    except Exception as e:
        logger.error(f"Database insert error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())

    logger.info(f"Wine added: id={wine_id} device={wine.device_id}")
    return AddWineResponse(ok=True, id=wine_id)


@router.get(
    "/list_wines",
    response_model=list[WineRecord],
    responses={
        400: {"description": "Missing device_id (plain text)"},
        500: {"model": ErrorResponse},
    },
)
async def list_wines(
    device_id: Optional[str] = Query(None, description="Client device identifier"),
    repo: WineCollectionRepository = Depends(get_wine_repo),
):
    """List a device's wines, newest first."""
    if not device_id:
        return PlainTextResponse("Missing device_id parameter", status_code=400)

    try:
        return repo.list_wines(device_id)
    except Exception as e:
        logger.error(f"Database query error: {e}", exc_info=True)
        return JSONResponse(status_code=500, content=ErrorResponse(error=str(e)).model_dump())
