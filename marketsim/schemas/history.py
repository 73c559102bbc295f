"""
History schemas.

POST /api/historial/registro (alias POST /api/registro) accepts two shapes:

  {hora, cambios}                              batch already resolved by the client
  {hora, activo, cambio, impactos?, evento?}   primary change plus its impacts;
                                               with `evento` and no `impactos`
                                               the server resolves them from
                                               the catalog
"""
from __future__ import annotations

from typing import Annotated, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from marketsim.models.history import Direction
from marketsim.schemas.common import strip_required


class RegistroRequest(BaseModel):
    hora: Annotated[str, Field(
        min_length=1,
        max_length=64,
        description="Bucket label, normally 'YYYY-MM-DDTHH:mm' on a 30-minute grid.",
        examples=["2024-08-29T14:00"],
    )]
    cambios: Optional[dict[str, Direction]] = Field(
        default=None,
        description="Asset → direction for every pair to upsert.",
        examples=[{"Bitcoin (BTC)": "Up", "Ethereum (ETH)": "Down"}],
    )
    activo: Optional[str] = Field(default=None, description="Primary asset.")
    cambio: Optional[Direction] = Field(default=None, description="Primary direction.")
    impactos: Optional[dict[str, Direction]] = Field(
        default=None,
        description="Pre-resolved impacts of the primary change.",
    )
    evento: Optional[str] = Field(
        default=None,
        description="Event name; used to resolve impacts server-side when `impactos` is omitted.",
    )

    @field_validator("hora", mode="before")
    @classmethod
    def strip_hora(cls, v):
        return strip_required(v)

    @model_validator(mode="after")
    def check_shape(self) -> "RegistroRequest":
        if self.cambios is not None:
            mixed = [
                name for name in ("activo", "cambio", "impactos", "evento")
                if getattr(self, name) is not None
            ]
            if mixed:
                raise ValueError(
                    f"`cambios` cannot be combined with {', '.join(mixed)}; send one shape or the other"
                )
        elif not self.activo or self.cambio is None:
            raise ValueError("either `cambios` or both `activo` and `cambio` are required")
        return self


class AppliedChange(BaseModel):
    hora: str
    activo: str
    cambio: str
    anterior: Optional[str] = Field(
        default=None,
        description="Direction stored before this write, null if the pair was new.",
    )


class RegistroResponse(BaseModel):
    ok: bool = True
    aplicados: list[AppliedChange] = Field(description="Delta written by this request.")
    historial: dict[str, dict[str, str]] = Field(description="Full table re-read after the write.")
