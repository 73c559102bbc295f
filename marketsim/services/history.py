"""
History Store: sparse (hora, activo) → cambio matrix.

Public API
----------
get_history(db)                    → {hora: {activo: cambio}}   (full regroup on every read)
apply_batch(db, hora, cambios)     → BatchResult                 (one upsert per pair)

Each pair is committed on its own, so a batch of N changes is N independent
point writes. If pair k fails, pairs 0..k-1 stay applied and StorageError is
raised. Concurrent batches on the same pair resolve last-write-wins.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from marketsim.core.errors import ValidationError
from marketsim.models.history import Direction, HistoryRecord
from marketsim.services.storage import storage_guard

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class AppliedPair:
    hora: str
    activo: str
    cambio: str
    anterior: Optional[str] = None


@dataclass
class BatchResult:
    """The delta written by one batch plus the table re-read right after it."""
    applied: list[AppliedPair] = field(default_factory=list)
    history: dict[str, dict[str, str]] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _validate_batch(hora: Any, cambios: Any) -> tuple[str, dict[str, Direction]]:
    if not isinstance(hora, str) or not hora.strip():
        raise ValidationError("Faltan campos hora o cambios", field="hora")
    if not isinstance(cambios, Mapping):
        raise ValidationError("Faltan campos hora o cambios", field="cambios")

    normalized: dict[str, Direction] = {}
    for activo, cambio in cambios.items():
        if not isinstance(activo, str) or not activo.strip():
            raise ValidationError("Asset names in cambios must be non-empty", field="cambios")
        try:
            normalized[activo] = Direction(cambio)
        except ValueError:
            raise ValidationError(
                f"Invalid direction {cambio!r} for {activo!r}",
                field=f"cambios.{activo}",
            ) from None
    return hora.strip(), normalized


def _find(db: Session, hora: str, activo: str) -> Optional[HistoryRecord]:
    return (
        db.query(HistoryRecord)
        .filter(HistoryRecord.hora == hora, HistoryRecord.activo == activo)
        .first()
    )


def _upsert_one(db: Session, hora: str, activo: str, direction: Direction) -> Optional[str]:
    """Insert or overwrite one pair and commit. Returns the previous direction."""
    record = _find(db, hora, activo)
    if record is not None:
        anterior = record.cambio
        record.cambio = direction.value
        db.commit()
        return anterior

    db.add(HistoryRecord(hora=hora, activo=activo, cambio=direction.value))
    try:
        db.commit()
        return None
    except IntegrityError:
        # A concurrent request inserted the same pair first; overwrite it.
        db.rollback()
        record = _find(db, hora, activo)
        if record is None:
            raise
        anterior = record.cambio
        record.cambio = direction.value
        db.commit()
        return anterior


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def get_history(db: Session) -> dict[str, dict[str, str]]:
    with storage_guard(db, "get_history"):
        rows = (
            db.query(HistoryRecord.hora, HistoryRecord.activo, HistoryRecord.cambio)
            .order_by(HistoryRecord.id.asc())
            .all()
        )

    table: dict[str, dict[str, str]] = {}
    for hora, activo, cambio in rows:
        table.setdefault(hora, {})[activo] = cambio
    return table


def apply_batch(db: Session, hora: Any, cambios: Any) -> BatchResult:
    hora, normalized = _validate_batch(hora, cambios)
    result = BatchResult()

    for activo, direction in normalized.items():
        with storage_guard(db, "apply_batch"):
            anterior = _upsert_one(db, hora, activo, direction)
        result.applied.append(
            AppliedPair(hora=hora, activo=activo, cambio=direction.value, anterior=anterior)
        )

    if result.applied:
        logger.info(
            "History batch at %s: %s",
            hora,
            ", ".join(f"{p.activo}={p.cambio}" for p in result.applied),
        )

    result.history = get_history(db)
    return result
