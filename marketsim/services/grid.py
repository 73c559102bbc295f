"""
History grid: a pure projection of (assets, bucket labels, history table).

One row per asset, one column per half-hour bucket. Each cell holds the
direction recorded at (bucket, asset) or None for "no change". Nothing here
touches the database or a template engine; `grid_to_html` turns the grid
into the table markup the simulator pages embed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from html import escape
from typing import Mapping, Optional, Sequence

from marketsim.models.history import Direction

BUCKET_MINUTES = 30
BUCKETS_PER_DAY = 24 * 60 // BUCKET_MINUTES
BUCKET_FORMAT = "%Y-%m-%dT%H:%M"

_GLYPHS = {
    Direction.up: "<span class='text-success'>&#9650;</span>",
    Direction.down: "<span class='text-danger'>&#9660;</span>",
}
_TABLE_CLASS = "table table-striped table-bordered table-hover table-sm"
_HEAD_CLASS = "py-1 px-2 fs-6 text-nowrap"
_CELL_CLASS = "py-1 px-2 fs-6 text-nowrap text-center align-middle"


# ---------------------------------------------------------------------------
# Grid types
# ---------------------------------------------------------------------------

@dataclass
class GridRow:
    asset: str
    cells: list[Optional[Direction]] = field(default_factory=list)


@dataclass
class Grid:
    buckets: list[str]
    rows: list[GridRow]

    @property
    def columns(self) -> list[str]:
        """Column headers: the HH:mm part of each bucket label."""
        return [b[11:16] for b in self.buckets]


# ---------------------------------------------------------------------------
# Buckets and filtering
# ---------------------------------------------------------------------------

def generate_buckets(day: Optional[date] = None) -> list[str]:
    """The 48 half-hour labels of `day` (today when omitted), from midnight."""
    start = datetime.combine(day or date.today(), datetime.min.time())
    return [
        (start + timedelta(minutes=i * BUCKET_MINUTES)).strftime(BUCKET_FORMAT)
        for i in range(BUCKETS_PER_DAY)
    ]


def filter_by_date(
    table: Mapping[str, Mapping[str, str]],
    fecha: Optional[str],
) -> dict[str, dict[str, str]]:
    """Keep the buckets whose label starts with `fecha`. No filter when empty."""
    if not fecha:
        return {hora: dict(cells) for hora, cells in table.items()}
    return {hora: dict(cells) for hora, cells in table.items() if hora.startswith(fecha)}


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------

def _cell(value: Optional[str]) -> Optional[Direction]:
    if not value:
        return None
    try:
        return Direction(value)
    except ValueError:
        return None


def render_grid(
    assets: Sequence[str],
    bucket_labels: Sequence[str],
    table: Mapping[str, Mapping[str, str]],
) -> Grid:
    rows = [
        GridRow(
            asset=asset,
            cells=[_cell(table.get(bucket, {}).get(asset)) for bucket in bucket_labels],
        )
        for asset in assets
    ]
    return Grid(buckets=list(bucket_labels), rows=rows)


def grid_to_html(grid: Grid) -> str:
    head = "".join(
        f"<th class='{_HEAD_CLASS}'>{escape(col)}</th>" for col in grid.columns
    )
    body = []
    for row in grid.rows:
        cells = "".join(
            f"<td class='{_CELL_CLASS}'>{_GLYPHS.get(cell, '') if cell else ''}</td>"
            for cell in row.cells
        )
        body.append(f"<tr><td class='{_HEAD_CLASS}'>{escape(row.asset)}</td>{cells}</tr>")

    return (
        f"<table class='{_TABLE_CLASS}'>"
        f"<thead><tr><th class='{_HEAD_CLASS}'>Activo / Hora</th>{head}</tr></thead>"
        f"<tbody>{''.join(body)}</tbody>"
        "</table>"
    )
