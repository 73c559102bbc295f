"""
Behavior catalog schemas.

POST /api/comportamientos  → BehaviorCreateRequest {evento, datos}
GET  /api/comportamientos  → {evento: {asset: Effect}}

The effects tree used to be stored opaquely; it is now validated here so a
malformed tree is rejected with 400 instead of silently breaking the
impact lookup later. The original Spanish keys ("tipoPrincipal", "Sube",
"Baja") are accepted on input and normalized to "primaryDirection", "Up",
"Down".
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from marketsim.models.history import Direction
from marketsim.schemas.common import strip_required


class Effect(BaseModel):
    """Consequences of one primary asset moving under an event."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    primary_direction: Optional[Direction] = Field(
        default=None,
        validation_alias=AliasChoices("primaryDirection", "tipoPrincipal", "primary_direction"),
        serialization_alias="primaryDirection",
        description="Direction shown next to the primary asset in listings.",
    )
    up: dict[str, Direction] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("Up", "Sube", "up"),
        serialization_alias="Up",
        description="Impacts applied when the primary asset goes up.",
    )
    down: dict[str, Direction] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("Down", "Baja", "down"),
        serialization_alias="Down",
        description="Impacts applied when the primary asset goes down.",
    )

    def branch(self, direction: Direction) -> dict[str, Direction]:
        return self.up if direction == Direction.up else self.down


class BehaviorCreateRequest(BaseModel):
    evento: Annotated[str, Field(
        min_length=1,
        max_length=128,
        description="Event name, e.g. 'Halving'.",
        examples=["Halving"],
    )]
    datos: Annotated[dict[str, Effect], Field(
        min_length=1,
        description="Effects keyed by primary asset name.",
    )]

    @field_validator("evento", mode="before")
    @classmethod
    def strip_evento(cls, v):
        return strip_required(v)


def dump_effects(effects: dict[str, Effect]) -> dict:
    """Canonical JSON-ready form of an effects tree."""
    return {
        asset: effect.model_dump(mode="json", by_alias=True)
        for asset, effect in effects.items()
    }
