"""
Behavior — one catalog entry per event name.

datos: JSON-encoded effects tree stored as Text, already validated against
marketsim.schemas.behavior.Effect before it is written:

  {
    "Bitcoin (BTC)": {
      "primaryDirection": "Up" | "Down" | null,
      "Up":   {"Ethereum (ETH)": "Up", ...},
      "Down": {"Ethereum (ETH)": "Down", ...}
    }
  }
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from marketsim.db.base import Base


class Behavior(Base):
    __tablename__ = "comportamientos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    evento: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    datos: Mapped[str] = mapped_column(
        Text, nullable=False,
        comment="JSON-encoded effects tree keyed by primary asset",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
