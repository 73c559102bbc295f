"""
Asset Registry router.

GET  /api/activos   — asset names in insertion order
POST /api/activos   — register an asset
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketsim.db.base import get_db
from marketsim.schemas.asset import AssetCreateRequest
from marketsim.schemas.common import ErrorResponse, OkResponse
from marketsim.services.assets import add_asset, list_assets

router = APIRouter(prefix="/api/activos", tags=["activos"])


@router.get(
    "",
    response_model=list[str],
    summary="List asset names",
    responses={500: {"model": ErrorResponse, "description": "Storage error"}},
)
def get_activos(db: Session = Depends(get_db)):
    return list_assets(db)


@router.post(
    "",
    response_model=OkResponse,
    summary="Register an asset",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or empty `nombre`."},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
def create_activo(payload: AssetCreateRequest, db: Session = Depends(get_db)):
    """Duplicate names are accepted and listed twice."""
    add_asset(db, payload.nombre)
    return OkResponse()
