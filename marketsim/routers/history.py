"""
History router.

GET  /api/historial             — {hora: {activo: cambio}}, optional ?fecha= prefix filter
GET  /api/historial/horas       — the 48 half-hour bucket labels of a day
GET  /api/historial/tabla       — HTML grid for a day
POST /api/historial/registro    — upsert a batch (alias: POST /api/registro)
"""
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from marketsim.db.base import get_db
from marketsim.schemas.common import ErrorResponse
from marketsim.schemas.history import AppliedChange, RegistroRequest, RegistroResponse
from marketsim.services.assets import list_assets
from marketsim.services.catalog import load_catalog
from marketsim.services.grid import filter_by_date, generate_buckets, grid_to_html, render_grid
from marketsim.services.history import apply_batch, get_history
from marketsim.services.impacts import build_batch, resolve_impacts

router = APIRouter(prefix="/api/historial", tags=["historial"])

# Older clients post to /api/registro
legacy_router = APIRouter(prefix="/api", tags=["historial"])


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=dict[str, dict[str, str]],
    summary="Full history table",
    responses={500: {"model": ErrorResponse, "description": "Storage error"}},
)
def get_historial(
    fecha: Optional[str] = Query(
        default=None,
        description="Keep only buckets whose label starts with this prefix (e.g. a YYYY-MM-DD date).",
        examples=["2024-08-29"],
    ),
    db: Session = Depends(get_db),
):
    return filter_by_date(get_history(db), fecha)


@router.get(
    "/horas",
    response_model=list[str],
    summary="Half-hour bucket labels of a day",
)
def get_horas(
    fecha: Optional[date] = Query(default=None, description="ISO date. Defaults to today."),
):
    return generate_buckets(fecha)


@router.get(
    "/tabla",
    response_class=HTMLResponse,
    summary="History grid for a day as an HTML table",
    responses={500: {"model": ErrorResponse, "description": "Storage error"}},
)
def get_tabla(
    fecha: Optional[date] = Query(default=None, description="ISO date. Defaults to today."),
    db: Session = Depends(get_db),
):
    buckets = generate_buckets(fecha)
    day_prefix = buckets[0][:10]
    table = filter_by_date(get_history(db), day_prefix)
    grid = render_grid(list_assets(db), buckets, table)
    return HTMLResponse(grid_to_html(grid))


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def _registrar(payload: RegistroRequest, db: Session) -> RegistroResponse:
    if payload.cambios is not None:
        batch = dict(payload.cambios)
    else:
        impactos = payload.impactos
        if impactos is None and payload.evento:
            impactos = resolve_impacts(
                load_catalog(db), payload.evento, payload.activo, payload.cambio
            )
        batch = build_batch(payload.activo, payload.cambio, impactos)

    result = apply_batch(db, payload.hora, batch)
    return RegistroResponse(
        aplicados=[AppliedChange(**asdict(pair)) for pair in result.applied],
        historial=result.history,
    )


_REGISTRO_DOC = dict(
    response_model=RegistroResponse,
    summary="Record a batch of direction changes",
    responses={
        400: {"model": ErrorResponse, "description": "Missing `hora`, neither `cambios` nor `activo`+`cambio`, or both shapes mixed."},
        500: {"model": ErrorResponse, "description": "Storage error; pairs written before the failure stay applied."},
    },
)


@router.post("/registro", **_REGISTRO_DOC)
def registrar_cambio(payload: RegistroRequest, db: Session = Depends(get_db)):
    """
    Upsert every (hora, activo) pair of the batch, last write wins.

    Accepts `{hora, cambios}` or `{hora, activo, cambio, impactos?, evento?}`.
    With `evento` and no `impactos`, impacts are resolved from the catalog
    using only the branch that matches `cambio`.

    Returns the delta written (`aplicados`) and the table re-read afterwards.
    """
    return _registrar(payload, db)


@legacy_router.post("/registro", **_REGISTRO_DOC)
def registrar_cambio_legacy(payload: RegistroRequest, db: Session = Depends(get_db)):
    return _registrar(payload, db)
