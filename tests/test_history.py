"""
History Store: upsert semantics, batches, read-after-write and
partial failure.
"""
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from marketsim.core.errors import StorageError, ValidationError
from marketsim.models.history import HistoryRecord
from marketsim.services import history as history_service
from marketsim.services.history import apply_batch, get_history

T = "2024-08-29T14:00"


class TestUpsert:
    def test_write_then_read(self, db):
        apply_batch(db, T, {"Bitcoin": "Up"})
        assert get_history(db) == {T: {"Bitcoin": "Up"}}

    def test_same_pair_twice_is_one_record(self, db):
        apply_batch(db, T, {"Bitcoin": "Up"})
        apply_batch(db, T, {"Bitcoin": "Up"})
        assert db.query(HistoryRecord).count() == 1
        assert get_history(db)[T] == {"Bitcoin": "Up"}

    def test_last_write_wins(self, db):
        apply_batch(db, T, {"Bitcoin": "Up"})
        result = apply_batch(db, T, {"Bitcoin": "Down"})
        assert result.applied[0].anterior == "Up"
        assert result.applied[0].cambio == "Down"
        assert get_history(db)[T]["Bitcoin"] == "Down"
        assert db.query(HistoryRecord).count() == 1

    def test_spanish_directions_normalized(self, db):
        apply_batch(db, T, {"Bitcoin": "Sube", "Ethereum": "Baja"})
        assert get_history(db)[T] == {"Bitcoin": "Up", "Ethereum": "Down"}

    def test_long_asset_names(self, db):
        name = "Wrapped " + "X" * 300
        apply_batch(db, T, {name: "Up"})
        assert get_history(db)[T] == {name: "Up"}

    def test_buckets_are_free_form(self, db):
        apply_batch(db, "not-a-bucket", {"Bitcoin": "Up"})
        assert "not-a-bucket" in get_history(db)


class TestBatch:
    def test_batch_sets_every_pair(self, db):
        result = apply_batch(db, T, {"A": "Up", "B": "Down"})
        assert result.history[T]["A"] == "Up"
        assert result.history[T]["B"] == "Down"
        assert {p.activo for p in result.applied} == {"A", "B"}
        assert all(p.anterior is None for p in result.applied)

    def test_order_independent(self, db):
        apply_batch(db, T, {"B": "Down", "A": "Up"})
        assert get_history(db)[T] == {"A": "Up", "B": "Down"}

    def test_read_after_write_reflects_batch(self, db):
        apply_batch(db, "2024-08-29T13:30", {"C": "Up"})
        result = apply_batch(db, T, {"A": "Up", "B": "Down"})
        assert result.history == get_history(db)
        assert result.history["2024-08-29T13:30"] == {"C": "Up"}

    def test_empty_batch_writes_nothing(self, db):
        result = apply_batch(db, T, {})
        assert result.applied == []
        assert result.history == {}

    def test_grouped_by_bucket(self, db):
        apply_batch(db, "2024-08-29T14:00", {"A": "Up"})
        apply_batch(db, "2024-08-30T00:00", {"A": "Down"})
        table = get_history(db)
        assert table == {"2024-08-29T14:00": {"A": "Up"}, "2024-08-30T00:00": {"A": "Down"}}


class TestBatchValidation:
    @pytest.mark.parametrize("hora", [None, "", "  ", 1400])
    def test_bad_bucket(self, db, hora):
        with pytest.raises(ValidationError):
            apply_batch(db, hora, {"A": "Up"})

    @pytest.mark.parametrize("cambios", [None, "Up", ["A", "Up"]])
    def test_bad_changes(self, db, cambios):
        with pytest.raises(ValidationError):
            apply_batch(db, T, cambios)

    def test_bad_direction_writes_nothing(self, db):
        with pytest.raises(ValidationError):
            apply_batch(db, T, {"A": "Up", "B": "Sideways"})
        assert get_history(db) == {}


class TestPartialFailure:
    def test_earlier_pairs_stay_applied(self, db, monkeypatch):
        original = history_service._upsert_one
        calls = []

        def flaky(db_, hora, activo, direction):
            calls.append(activo)
            if len(calls) == 2:
                raise OperationalError("UPDATE historial", {}, Exception("disk I/O error"))
            return original(db_, hora, activo, direction)

        monkeypatch.setattr(history_service, "_upsert_one", flaky)

        with pytest.raises(StorageError) as info:
            apply_batch(db, T, {"A": "Up", "B": "Down", "C": "Up"})
        assert info.value.http_status == 500
        assert get_history(db) == {T: {"A": "Up"}}


    def test_concurrent_insert_becomes_overwrite(self, db, monkeypatch):
        original = history_service._find
        lookups = []

        def racing_find(db_, hora, activo):
            lookups.append(activo)
            if len(lookups) == 1:
                # Another writer lands the same pair between lookup and insert
                with Session(bind=db.get_bind()) as other:
                    other.add(HistoryRecord(hora=hora, activo=activo, cambio="Up"))
                    other.commit()
                return None
            return original(db_, hora, activo)

        monkeypatch.setattr(history_service, "_find", racing_find)

        result = apply_batch(db, T, {"A": "Down"})
        assert result.applied[0].anterior == "Up"
        assert result.applied[0].cambio == "Down"
        assert db.query(HistoryRecord).filter(HistoryRecord.activo == "A").count() == 1
        assert get_history(db) == {T: {"A": "Down"}}


class TestHistoryEndpoints:
    def test_get_empty(self, client):
        r = client.get("/api/historial")
        assert r.status_code == 200
        assert r.json() == {}

    def test_date_filter(self, client):
        client.post("/api/historial/registro", json={"hora": "2024-08-29T14:00", "cambios": {"A": "Up"}})
        client.post("/api/historial/registro", json={"hora": "2024-08-30T00:00", "cambios": {"A": "Down"}})
        r = client.get("/api/historial", params={"fecha": "2024-08-29"})
        assert r.json() == {"2024-08-29T14:00": {"A": "Up"}}

    def test_horas(self, client):
        r = client.get("/api/historial/horas", params={"fecha": "2024-08-29"})
        assert r.status_code == 200
        horas = r.json()
        assert len(horas) == 48
        assert horas[0] == "2024-08-29T00:00"
        assert horas[-1] == "2024-08-29T23:30"

    def test_horas_bad_date_is_400(self, client):
        r = client.get("/api/historial/horas", params={"fecha": "29/08/2024"})
        assert r.status_code == 400

    def test_storage_error_is_500(self, client, monkeypatch):
        def broken(db_, hora, activo, direction):
            raise OperationalError("INSERT INTO historial", {}, Exception("database is locked"))

        monkeypatch.setattr(history_service, "_upsert_one", broken)
        r = client.post("/api/historial/registro", json={"hora": T, "cambios": {"A": "Up"}})
        assert r.status_code == 500
        body = r.json()
        assert body["code"] == "STORAGE_ERROR"
        assert "database is locked" in body["error"]
