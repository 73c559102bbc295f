from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from marketsim.schemas.common import strip_required


class AssetCreateRequest(BaseModel):
    nombre: Annotated[str, Field(
        min_length=1,
        description="Display name of the asset.",
        examples=["Bitcoin (BTC)"],
    )]

    @field_validator("nombre", mode="before")
    @classmethod
    def strip_nombre(cls, v):
        return strip_required(v)
