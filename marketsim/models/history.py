"""
HistoryRecord — one direction per (hora, activo).

hora is a free-form bucket label, normally "YYYY-MM-DDTHH:mm" on a 30-minute
grid. The store does not enforce that format; irregular labels simply become
extra sparse columns. The unique constraint makes last-write-wins upserts
the only way a pair changes.
"""
from datetime import datetime
import enum

from sqlalchemy import Integer, String, Text, DateTime, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from marketsim.db.base import Base


class Direction(str, enum.Enum):
    up = "Up"
    down = "Down"

    @classmethod
    def _missing_(cls, value):
        # Spanish labels used by the original UI and seed data
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("up", "sube"):
                return cls.up
            if key in ("down", "baja"):
                return cls.down
        return None


class HistoryRecord(Base):
    __tablename__ = "historial"
    __table_args__ = (
        UniqueConstraint("hora", "activo", name="uq_historial_hora_activo"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    hora: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    activo: Mapped[str] = mapped_column(Text, nullable=False)
    cambio: Mapped[str] = mapped_column(String(8), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
