"""
tests/test_api.py
REST endpoints through FastAPI's TestClient, backed by the sample rate tables.
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))

from api.app import create_app
from api.routes import get_engine
from calculation_engine.currency import reset_currency_normalizer


@pytest.fixture
def client(engine, currency):
    app = create_app()
    app.dependency_overrides[get_engine] = lambda: engine
    reset_currency_normalizer(currency)
    with TestClient(app) as c:
        yield c


class TestModuleEndpoints:

    def test_cargo(self, client):
        resp = client.post("/api/v1/cargo", json={"cargo": "Coal", "weight": 10000, "trade_type": "Foreign"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["charges"] == {"wharfage": 500000.0, "demurrage": 0.0}
        assert body["subtotal"] == 500000.0
        assert body["taxes"] == 90000.0
        assert body["total"] == 590000.0
        assert body["guardrail_report"]["passed"] is True
        assert "guardrails" not in body["metadata"]

    def test_amounts_rounded_to_paise_in_response(self, client):
        resp = client.post("/api/v1/cargo", json={"cargo": "Coal", "weight": 0.3702, "trade_type": "Foreign"})
        body = resp.json()
        assert body["subtotal"] == 18.51
        assert body["taxes"] == 3.33
        assert body["total"] == 21.84
        assert body["guardrail_report"]["passed"] is True

    def test_vessel(self, client):
        resp = client.post("/api/v1/vessel", json={
            "gross_tonnage": 30000, "loa": 190, "draft": 11.5, "beam": 32,
            "cargo": "Coal", "quantity": 20000, "trade_type": "international",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["logistics"]["eligible_berths"][0]["dock"] == "Eastern Dock"
        assert set(body["charges"]) == {"port_dues", "pilotage", "berth_hire"}
        assert body["metadata"]["exchange_rate_source"] == "table"

    def test_rail(self, client):
        resp = client.post("/api/v1/rail", json={
            "cargo_type": "Coal", "wagon_type": "BOXN", "num_wagons": 58,
            "operation_hours": 40, "cargo_weight": 3800,
        })
        assert resp.status_code == 200
        assert resp.json()["charges"]["demurrage"] == 17400.0

    def test_storage(self, client):
        resp = client.post("/api/v1/storage", json={
            "cargo": "Coal", "weight": 5000, "area_type": "Covered", "days": 20,
        })
        assert resp.status_code == 200
        assert resp.json()["charges"]["storage"] == 48000.0

    def test_stevedore(self, client):
        resp = client.post("/api/v1/stevedore", json={
            "cargo": "Coal", "weight": 10000, "labour_line": "1",
        })
        assert resp.status_code == 200
        assert resp.json()["logistics"]["gangs_required"] == 25


class TestErrors:

    def test_malformed_body(self, client):
        resp = client.post("/api/v1/cargo", json={"cargo": "Coal", "weight": "heavy"})
        assert resp.status_code == 422
        errors = resp.json()["errors"]
        assert any(e.startswith("weight") for e in errors)

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_number(self, client, value):
        resp = client.post("/api/v1/cargo", json={"cargo": "Coal", "weight": value})
        assert resp.status_code == 422
        assert any(e.startswith("weight") for e in resp.json()["errors"])

    def test_non_finite_wagon_count(self, client):
        resp = client.post("/api/v1/rail", json={"cargo_type": "Coal", "wagon_type": "BOXN", "num_wagons": "nan"})
        assert resp.status_code == 422

    def test_guardrail_rejection(self, client):
        resp = client.post("/api/v1/vessel", json={"loa": 190, "draft": 11, "beam": 32})
        assert resp.status_code == 422
        assert "gross_tonnage must be > 0" in resp.json()["errors"]

    def test_unknown_wagon(self, client):
        resp = client.post("/api/v1/rail", json={"cargo_type": "Coal", "wagon_type": "BCN", "num_wagons": 5})
        assert resp.status_code == 422
        assert "BCN" in resp.json()["errors"][0]


class TestInfoEndpoints:

    def test_health(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["currency"] == {"inr_per_usd": 83.2, "source": "table"}
        assert body["knowledge_base"]["tables_loaded"] == 20
        assert body["knowledge_base"]["rows"]["VM_berth_master"] == 5

    def test_tables(self, client):
        body = client.get("/api/v1/tables").json()
        assert body["tables"]["RM_Haulage"] == "memory"
        assert body["rows"]["LM_RoyaltyMaster"] == 3
