"""
Asset Registry: add and list named tradable items.

No duplicate check: adding the same name twice stores two rows and the
listing shows it twice.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from marketsim.core.errors import ValidationError
from marketsim.models.asset import Asset
from marketsim.services.storage import storage_guard

logger = logging.getLogger(__name__)


def list_assets(db: Session) -> list[str]:
    """Asset names in insertion order."""
    with storage_guard(db, "list_assets"):
        rows = db.query(Asset.nombre).order_by(Asset.id.asc()).all()
    return [nombre for (nombre,) in rows]


def add_asset(db: Session, nombre: str | None) -> Asset:
    name = nombre.strip() if isinstance(nombre, str) else ""
    if not name:
        raise ValidationError("Falta el nombre", field="nombre")

    with storage_guard(db, "add_asset"):
        asset = Asset(nombre=name)
        db.add(asset)
        db.commit()
        db.refresh(asset)

    logger.info("Asset registered: %s", name)
    return asset
