"""
Behavior Catalog: event → primary asset → Effect.

Public API
----------
list_behaviors(db)                → {evento: effects tree as JSON}
load_catalog(db)                  → {evento: {asset: Effect}}   (typed, for resolution)
add_behavior(db, evento, datos)   → Behavior                    (replaces an existing evento)
"""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import pydantic
from sqlalchemy.orm import Session

from marketsim.core.errors import ValidationError
from marketsim.models.behavior import Behavior
from marketsim.schemas.behavior import Effect, dump_effects
from marketsim.services.storage import storage_guard

logger = logging.getLogger(__name__)


def _parse_effects(raw: str | None) -> dict[str, Any]:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (ValueError, TypeError):
        logger.warning("Discarding undecodable effects tree")
        return {}


def _validate_effects(datos: Mapping[str, Any]) -> dict[str, Effect]:
    effects: dict[str, Effect] = {}
    for asset, effect in datos.items():
        if not isinstance(asset, str) or not asset.strip():
            raise ValidationError("Asset names in datos must be non-empty", field="datos")
        if isinstance(effect, Effect):
            effects[asset] = effect
            continue
        try:
            effects[asset] = Effect.model_validate(effect)
        except pydantic.ValidationError as exc:
            raise ValidationError(
                f"Malformed effects for {asset!r}: {exc.errors()[0]['msg']}",
                field=f"datos.{asset}",
            ) from exc
    return effects


def list_behaviors(db: Session) -> dict[str, dict[str, Any]]:
    with storage_guard(db, "list_behaviors"):
        rows = db.query(Behavior).order_by(Behavior.id.asc()).all()
    return {row.evento: _parse_effects(row.datos) for row in rows}


def load_catalog(db: Session) -> dict[str, dict[str, Effect]]:
    """Catalog as typed Effects. Entries that no longer validate are skipped."""
    catalog: dict[str, dict[str, Effect]] = {}
    for evento, tree in list_behaviors(db).items():
        try:
            catalog[evento] = _validate_effects(tree)
        except ValidationError:
            logger.warning("Skipping malformed catalog entry %r", evento)
    return catalog


def add_behavior(db: Session, evento: str | None, datos: Mapping[str, Any] | None) -> Behavior:
    """
    Store the effects of `evento`. One entry per event name: adding an
    existing name overwrites its effects.
    """
    name = evento.strip() if isinstance(evento, str) else ""
    if not name or not datos:
        raise ValidationError("Faltan campos", field="evento" if not name else "datos")
    if not isinstance(datos, Mapping):
        raise ValidationError("datos must be an object", field="datos")

    payload = json.dumps(dump_effects(_validate_effects(datos)))

    with storage_guard(db, "add_behavior"):
        behavior = db.query(Behavior).filter(Behavior.evento == name).first()
        if behavior is None:
            behavior = Behavior(evento=name, datos=payload)
            db.add(behavior)
            action = "created"
        else:
            behavior.datos = payload
            action = "replaced"
        db.commit()
        db.refresh(behavior)

    logger.info("Behavior %s: %s (%d primary assets)", action, name, len(datos))
    return behavior
