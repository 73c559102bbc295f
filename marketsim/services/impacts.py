"""
Impact resolution: which secondary assets move when a primary asset moves
under an event.

Only the branch matching the chosen direction is applied: an asset going Up
triggers its Up consequences, never its Down ones. Unknown events, assets or
empty branches resolve to no impacts, so the batch carries only the primary
change.
"""
from __future__ import annotations

from typing import Mapping, Optional

from marketsim.models.history import Direction
from marketsim.schemas.behavior import Effect


def resolve_impacts(
    catalog: Mapping[str, Mapping[str, Effect]],
    evento: Optional[str],
    activo: str,
    cambio: Direction | str,
) -> dict[str, Direction]:
    if not evento:
        return {}
    effect = catalog.get(evento, {}).get(activo)
    if effect is None:
        return {}
    return dict(effect.branch(Direction(cambio)))


def build_batch(
    activo: str,
    cambio: Direction | str,
    impactos: Optional[Mapping[str, Direction | str]] = None,
) -> dict[str, Direction]:
    """Union of the impacts with the primary change; the primary change wins."""
    batch = {name: Direction(direction) for name, direction in (impactos or {}).items()}
    batch[activo] = Direction(cambio)
    return batch
