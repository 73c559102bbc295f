"""
History grid projection, bucket generation and date filtering.
"""
from datetime import date

from marketsim.models.history import Direction
from marketsim.services.grid import (
    BUCKETS_PER_DAY,
    filter_by_date,
    generate_buckets,
    grid_to_html,
    render_grid,
)

DAY = date(2024, 8, 29)


class TestBuckets:
    def test_48_half_hour_slots(self):
        buckets = generate_buckets(DAY)
        assert len(buckets) == BUCKETS_PER_DAY == 48
        assert buckets[:3] == ["2024-08-29T00:00", "2024-08-29T00:30", "2024-08-29T01:00"]
        assert buckets[-1] == "2024-08-29T23:30"

    def test_defaults_to_today(self):
        assert generate_buckets()[0] == f"{date.today().isoformat()}T00:00"


class TestFilterByDate:
    TABLE = {
        "2024-08-29T14:00": {"A": "Up"},
        "2024-08-30T00:00": {"B": "Down"},
    }

    def test_prefix_match(self):
        assert filter_by_date(self.TABLE, "2024-08-29") == {"2024-08-29T14:00": {"A": "Up"}}

    def test_no_filter(self):
        assert filter_by_date(self.TABLE, None) == self.TABLE
        assert filter_by_date(self.TABLE, "") == self.TABLE

    def test_no_match(self):
        assert filter_by_date(self.TABLE, "2023") == {}


class TestRenderGrid:
    def test_cells(self):
        buckets = ["2024-08-29T14:00", "2024-08-29T14:30"]
        table = {"2024-08-29T14:00": {"A": "Up", "B": "Down"}}
        grid = render_grid(["A", "B", "C"], buckets, table)

        assert grid.columns == ["14:00", "14:30"]
        assert [row.asset for row in grid.rows] == ["A", "B", "C"]
        assert grid.rows[0].cells == [Direction.up, None]
        assert grid.rows[1].cells == [Direction.down, None]
        assert grid.rows[2].cells == [None, None]

    def test_assets_absent_from_registry_not_rendered(self):
        grid = render_grid(["A"], ["T"], {"T": {"Ghost": "Up"}})
        assert [row.asset for row in grid.rows] == ["A"]
        assert grid.rows[0].cells == [None]

    def test_buckets_outside_labels_ignored(self):
        grid = render_grid(["A"], ["2024-08-29T00:00"], {"irregular": {"A": "Up"}})
        assert grid.rows[0].cells == [None]

    def test_unknown_direction_is_blank(self):
        grid = render_grid(["A"], ["T"], {"T": {"A": "Sideways"}})
        assert grid.rows[0].cells == [None]


class TestGridHtml:
    def test_glyphs_and_headers(self):
        grid = render_grid(["A", "B"], ["2024-08-29T14:00"], {"2024-08-29T14:00": {"A": "Up", "B": "Down"}})
        html = grid_to_html(grid)
        assert html.startswith("<table")
        assert "Activo / Hora" in html
        assert "<th class='py-1 px-2 fs-6 text-nowrap'>14:00</th>" in html
        assert "text-success'>&#9650;" in html
        assert "text-danger'>&#9660;" in html

    def test_asset_names_escaped(self):
        html = grid_to_html(render_grid(["<b>X</b>"], [], {}))
        assert "&lt;b&gt;X&lt;/b&gt;" in html
        assert "<b>X</b>" not in html


class TestTablaEndpoint:
    def test_html_grid_for_day(self, client):
        client.post("/api/activos", json={"nombre": "Bitcoin"})
        client.post("/api/historial/registro", json={"hora": "2024-08-29T14:00", "cambios": {"Bitcoin": "Up"}})
        client.post("/api/historial/registro", json={"hora": "2024-08-30T14:00", "cambios": {"Bitcoin": "Down"}})

        r = client.get("/api/historial/tabla", params={"fecha": "2024-08-29"})
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/html")
        assert "Bitcoin" in r.text
        assert "&#9650;" in r.text
        assert "&#9660;" not in r.text
