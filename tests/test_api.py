import pytest
from fastapi.testclient import TestClient

from freelance_rates.api.main import create_app
from freelance_rates.config.settings import Settings
from freelance_rates.services.exchange_rates import ExchangeRateProvider


class StaticRates(ExchangeRateProvider):
    """Rate provider with a fixed table and no network access."""

    def __init__(self, rates):
        super().__init__(api_key=None, base_url="http://unused")
        self._rates = rates
        self._fetched = True


PAYLOAD = {
    "name": "Website",
    "experience_level": "mid",
    "fixed_costs": 1000,
    "weekly_hours": 40,
    "profit_margin": 30,
    "vacation_weeks": 4,
    "tax_rate": 20,
    "currency": "USD",
}


@pytest.fixture
def client(tmp_path, history):
    settings = Settings(project_root=tmp_path, data_dir=tmp_path / "data")
    app = create_app(settings=settings, history=history, rates=StaticRates({"USD": 1.0, "EUR": 0.5}))
    return TestClient(app)


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "online"


def test_calculate_records_history(client, history):
    r = client.post("/calculate", json=PAYLOAD)
    assert r.status_code == 200

    calc = r.json()["calculation"]
    assert calc["id"] == "1"
    assert calc["hourlyRate"] == pytest.approx(15.234375)
    assert calc["monthlyRate"] == pytest.approx(2437.5)
    assert "projectRate" not in calc
    assert len(history) == 1


def test_calculate_with_project(client):
    r = client.post("/calculate", json={**PAYLOAD, "project_duration": 10, "risk_factor": 15})
    assert r.status_code == 200
    # complexity defaults to medium
    assert r.json()["calculation"]["projectRate"] == pytest.approx(1681.875)


@pytest.mark.parametrize("overrides", [
    {"tax_rate": 100},
    {"weekly_hours": 0},
    {"vacation_weeks": 52},
    {"experience_level": "guru"},
    {"project_duration": 0},
])
def test_calculate_rejects_bad_input(client, history, overrides):
    r = client.post("/calculate", json={**PAYLOAD, **overrides})
    assert r.status_code in (400, 422)
    assert len(history) == 0


def test_calculate_returns_warnings(client):
    r = client.post("/calculate", json={**PAYLOAD, "weekly_hours": 80})
    assert r.status_code == 200
    assert r.json()["warnings"]


def test_preview_does_not_touch_history(client, history):
    r = client.post("/preview", json=PAYLOAD)
    assert r.status_code == 200

    body = r.json()
    assert body["result"]["dailyRate"] == pytest.approx(121.875)
    assert body["trace"][0]["step"] == "Working Weeks"
    assert len(history) == 0


def test_history_endpoints(client):
    for name in ("first", "second", "third"):
        client.post("/calculate", json={**PAYLOAD, "name": name})

    listed = client.get("/history").json()["calculations"]
    assert [c["name"] for c in listed] == ["third", "second", "first"]

    latest = client.get("/history/latest").json()
    assert latest["name"] == "third"

    single = client.get("/history/2").json()
    assert single["name"] == "second"
    assert single["exportName"] == "second-2"

    r = client.delete("/history/2")
    assert r.json() == {"success": True, "count": 2}
    assert client.get("/history/2").status_code == 404

    # deleting again is not an error
    r = client.delete("/history/2")
    assert r.status_code == 200
    assert r.json()["count"] == 2

    r = client.delete("/history")
    assert r.json()["count"] == 0
    assert client.get("/history").json() == {"calculations": []}


def test_latest_on_empty_history(client):
    assert client.get("/history/latest").status_code == 404


def test_history_capped_at_ten(client):
    for i in range(11):
        client.post("/calculate", json={**PAYLOAD, "name": f"calc-{i}"})

    listed = client.get("/history").json()["calculations"]
    assert len(listed) == 10
    assert "calc-0" not in {c["name"] for c in listed}


def test_export_csv(client):
    client.post("/calculate", json=PAYLOAD)

    r = client.get("/history/export")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert 'filename="Website-1.csv"' in r.headers["content-disposition"]
    assert r.text.splitlines()[0].startswith("id,date,name")


def test_export_xlsx_empty_history(client):
    r = client.get("/history/export", params={"format": "xlsx"})
    assert r.status_code == 200
    assert 'filename="history.xlsx"' in r.headers["content-disposition"]
    assert r.content[:2] == b"PK"


def test_export_non_ascii_name(client):
    client.post("/calculate", json={**PAYLOAD, "name": "Presupuesto € \"final\""})

    r = client.get("/history/export")
    assert r.status_code == 200
    disposition = r.headers["content-disposition"]
    assert 'filename="Presupuesto _ _final_-1.csv"' in disposition
    assert "filename*=UTF-8''Presupuesto%20%E2%82%AC%20%22final%22-1.csv" in disposition


def test_currencies_and_convert(client):
    body = client.get("/currencies").json()
    assert body["base"] == "USD"
    assert body["currencies"] == ["EUR", "USD"]
    assert body["live"] is True

    r = client.get("/convert", params={"amount": 10, "from_currency": "usd", "to_currency": "eur"})
    assert r.json()["converted"] == pytest.approx(5)

    r = client.get("/convert", params={"amount": 10, "from_currency": "USD", "to_currency": "XYZ"})
    assert r.json()["converted"] == pytest.approx(10)
