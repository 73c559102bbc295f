"""
Behavior Catalog router.

GET  /api/comportamientos   — {evento: {asset: Effect}}
POST /api/comportamientos   — add (or replace) one event's effects
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marketsim.db.base import get_db
from marketsim.schemas.behavior import BehaviorCreateRequest
from marketsim.schemas.common import ErrorResponse, OkResponse
from marketsim.services.catalog import add_behavior, list_behaviors

router = APIRouter(prefix="/api/comportamientos", tags=["comportamientos"])


@router.get(
    "",
    response_model=dict[str, dict[str, Any]],
    summary="List the behavior catalog",
    responses={500: {"model": ErrorResponse, "description": "Storage error"}},
)
def get_comportamientos(db: Session = Depends(get_db)):
    """
    Every event with its effects tree:

    ```
    {"Halving": {"Bitcoin (BTC)": {"primaryDirection": null,
                                   "Up": {"Aave (AAVE)": "Up"}, "Down": {}}}}
    ```
    """
    return list_behaviors(db)


@router.post(
    "",
    response_model=OkResponse,
    summary="Add an event to the catalog",
    responses={
        400: {"model": ErrorResponse, "description": "Missing `evento`/`datos` or malformed effects tree."},
        500: {"model": ErrorResponse, "description": "Storage error"},
    },
)
def create_comportamiento(payload: BehaviorCreateRequest, db: Session = Depends(get_db)):
    """An existing event name is overwritten: the catalog holds one entry per event."""
    add_behavior(db, payload.evento, payload.datos)
    return OkResponse()
