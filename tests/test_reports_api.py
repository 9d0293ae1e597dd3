"""Reporting API flow tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from orderboard.core.config import settings
from orderboard.db import session as db_session
from orderboard.db.base import Base
from orderboard.main import app
from orderboard.models.order import Order, OrderItem
from orderboard.models.site import Site

ACME_ID = "65f0c0ffee0123456789abcd"


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _seed_acme(testing_session_local) -> None:
    with testing_session_local() as session:
        site = Site(id=ACME_ID, slug="acme", name="Acme Curry House")
        session.add(site)
        session.flush()
        orders = [
            Order(
                site_id=site.id,
                order_number="A-1001",
                created_at=_utc(2024, 3, 6, 19, 0),
                status="new",
                total_cents=1000,
                user_email="a@example.com",
                items=[OrderItem(name="Naan", quantity=2, price_cents=250)],
            ),
            Order(
                site_id=site.id,
                order_number="A-1002",
                created_at=_utc(2024, 3, 7, 3, 0),
                status="confirmed",
                total_cents=500,
                tax_cents=25,
                user_email="a@example.com",
                dropoff_name="Riley",
                dropoff_phone=" ",
                payment_method="CARD",
                notes="  ring twice ",
                items=[OrderItem(name="Chai", quantity=None), OrderItem(name="", quantity=1)],
            ),
            Order(
                site_id=site.id,
                order_number="A-1003",
                created_at=_utc(2024, 3, 8, 16, 0),
                status="fulfilled",
                total_cents=2000,
                dropoff_phone="+15875550101",
                items=[OrderItem(name="Naan", quantity=1)],
            ),
            Order(
                site_id=site.id,
                order_number="A-1004",
                created_at=_utc(2024, 3, 8, 17, 0),
                status="Awaiting_Payment",
                total_cents=9900,
                user_email="pending@example.com",
                items=[OrderItem(name="Thali", quantity=1)],
            ),
        ]
        session.add_all(orders)
        session.add(Site(slug="quiet", name=None))
        session.commit()


@pytest.fixture
def client(tmp_path: Path, monkeypatch):
    engine = _build_test_engine(tmp_path / "test_reports.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "seed_demo_data", False)
    monkeypatch.setattr(settings, "report_timezone", "America/Edmonton")

    _seed_acme(testing_session_local)
    with TestClient(app) as test_client:
        yield test_client


def _dashboard(client: TestClient, **params: str):
    return client.get("/api/v1/dashboard", params=params)


def test_dashboard_custom_week_matches_expected_series(client: TestClient) -> None:
    response = _dashboard(client, site="acme", mode="custom", start="2024-03-06", end="2024-03-12")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["site"] == {"id": ACME_ID, "slug": "acme", "name": "Acme Curry House"}
    assert payload["mode"] == "custom"
    assert payload["tz"] == "America/Edmonton"
    assert payload["labels"] == ["Mar 06", "Mar 07", "Mar 08", "Mar 09", "Mar 10", "Mar 11", "Mar 12"]
    assert payload["orders"] == [2, 0, 1, 0, 0, 0, 0]
    assert payload["revenue"] == [15.0, 0.0, 20.0, 0.0, 0.0, 0.0, 0.0]
    assert payload["customers"] == [1, 0, 1, 0, 0, 0, 0]
    assert payload["totals"] == {"orders": 3, "revenue": 35.0, "customersUnique": 2, "menuUnique": 2}


def test_dashboard_window_is_reported_in_utc(client: TestClient) -> None:
    response = _dashboard(client, site="acme", mode="custom", start="2024-03-09", end="2024-03-11")

    window = response.json()["window"]
    start = datetime.fromisoformat(window["start"].replace("Z", "+00:00"))
    end = datetime.fromisoformat(window["end"].replace("Z", "+00:00"))
    assert start == _utc(2024, 3, 9, 7, 0)
    assert end == _utc(2024, 3, 12, 6, 0)


def test_dashboard_resolves_site_by_id(client: TestClient) -> None:
    response = _dashboard(client, site=ACME_ID.upper(), mode="custom", start="2024-03-06", end="2024-03-06")

    assert response.status_code == 200
    assert response.json()["site"]["slug"] == "acme"


def test_dashboard_site_without_name_uses_slug(client: TestClient) -> None:
    response = _dashboard(client, site="quiet", mode="custom", start="2024-03-06", end="2024-03-07")

    payload = response.json()
    assert payload["site"]["name"] == "quiet"
    assert payload["orders"] == [0, 0]
    assert payload["totals"]["customersUnique"] == 0


@pytest.mark.parametrize("mode,expected_days", [("week", 7), ("month", 30)])
def test_dashboard_trailing_modes_series_lengths(client: TestClient, mode: str, expected_days: int) -> None:
    response = _dashboard(client, site="acme", mode=mode, tz="UTC")

    payload = response.json()
    assert response.status_code == 200
    assert payload["tz"] == "UTC"
    for key in ("labels", "orders", "revenue", "customers"):
        assert len(payload[key]) == expected_days


def test_dashboard_custom_range_is_clamped(client: TestClient) -> None:
    response = _dashboard(client, site="acme", mode="custom", start="2024-01-01", end="2024-12-31")

    assert response.status_code == 200
    assert len(response.json()["labels"]) == 62


@pytest.mark.parametrize(
    "params,message_fragment",
    [
        ({"mode": "week"}, "`site` is required"),
        ({"site": "   ", "mode": "week"}, "`site` is required"),
        ({"site": "acme"}, "`mode` must be one of"),
        ({"site": "acme", "mode": "year"}, "`mode` must be one of"),
        ({"site": "acme", "mode": "custom", "start": "2024-03-01"}, "are required for custom mode"),
        ({"site": "acme", "mode": "custom", "start": "03/01/2024", "end": "2024-03-02"}, "are required for custom mode"),
        ({"site": "acme", "mode": "custom", "start": "2024-03-05", "end": "2024-03-01"}, "`end`"),
        ({"site": "acme", "mode": "week", "tz": "Not/AZone"}, "Unknown timezone"),
        ({"site": "acme", "mode": "week", "tz": "America"}, "Unknown timezone"),
        ({"site": "acme", "mode": "week", "tz": "Etc"}, "Unknown timezone"),
    ],
)
def test_dashboard_rejects_invalid_parameters(client: TestClient, params: dict[str, str], message_fragment: str) -> None:
    response = _dashboard(client, **params)

    assert response.status_code == 400
    payload = response.json()
    assert payload["ok"] is False
    assert message_fragment in payload["error"]


def test_dashboard_unknown_site_is_not_found(client: TestClient) -> None:
    for identifier in ("nowhere", "ffffffffffffffffffffffff"):
        response = _dashboard(client, site=identifier, mode="week")

        assert response.status_code == 404
        assert response.json() == {"ok": False, "error": "Site not found"}


def test_dashboard_invalid_params_are_rejected_before_site_lookup(client: TestClient) -> None:
    response = _dashboard(client, site="nowhere", mode="custom")

    assert response.status_code == 400


def test_dashboard_unexpected_error_returns_generic_envelope(client: TestClient, monkeypatch) -> None:
    def _explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("orderboard.services.report_service.aggregate_orders", _explode)
    with TestClient(app, raise_server_exceptions=False) as failing_client:
        response = failing_client.get("/api/v1/dashboard", params={"site": "acme", "mode": "week"})

    assert response.status_code == 500
    assert response.json() == {"ok": False, "error": "Failed to build report"}


def test_dashboard_csv_export(client: TestClient) -> None:
    response = client.get(
        "/api/v1/dashboard/export.csv",
        params={"site": "acme", "mode": "custom", "start": "2024-03-06", "end": "2024-03-08"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="orders_acme_custom_2024-03-06.csv"' in response.headers["content-disposition"]
    lines = response.text.strip().splitlines()
    assert lines[0] == "day,orders,revenue,customers"
    assert lines[1] == "Mar 06,2,15.00,1"
    assert lines[2] == "Mar 07,0,0.00,0"
    assert lines[-1] == "total,3,35.00,2"


def test_dashboard_pdf_export(client: TestClient) -> None:
    pytest.importorskip("reportlab")
    response = client.get(
        "/api/v1/dashboard/export.pdf",
        params={"site": "acme", "mode": "custom", "start": "2024-03-06", "end": "2024-03-08"},
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_orders_range_lists_window_orders_newest_first(client: TestClient) -> None:
    response = client.get(
        "/api/v1/orders/range",
        params={"site": "acme", "mode": "custom", "start": "2024-03-06", "end": "2024-03-12"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 3
    assert [order["order_number"] for order in payload["orders"]] == ["A-1003", "A-1002", "A-1001"]
    assert payload["orders"][0]["customer"] == "+15875550101"
    assert payload["orders"][1]["customer"] == "a@example.com"
    assert payload["orders"][2]["items"] == [{"name": "Naan", "quantity": 2, "price_cents": 250, "size": None}]


def test_orders_range_validates_like_dashboard(client: TestClient) -> None:
    response = client.get("/api/v1/orders/range", params={"site": "acme", "mode": "decade"})

    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_orders_day_includes_lookahead_and_all_statuses(client: TestClient) -> None:
    response = client.get(
        "/api/v1/orders/day",
        params={"site": "acme", "date": "2024-03-07", "extraDays": "1"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["date"] == "2024-03-07"
    assert [order["order_number"] for order in payload["orders"]] == ["A-1004", "A-1003"]
    window = payload["window"]
    assert datetime.fromisoformat(window["start"].replace("Z", "+00:00")) == _utc(2024, 3, 7, 7, 0)
    assert datetime.fromisoformat(window["end"].replace("Z", "+00:00")) == _utc(2024, 3, 8, 7, 0)


def test_orders_day_without_lookahead(client: TestClient) -> None:
    response = client.get(
        "/api/v1/orders/day",
        params={"site": "acme", "date": "2024-03-06", "extraDays": "0"},
    )

    assert [order["order_number"] for order in response.json()["orders"]] == ["A-1002", "A-1001"]


def test_orders_day_unparsable_lookahead_uses_default(client: TestClient) -> None:
    response = client.get(
        "/api/v1/orders/day",
        params={"site": "acme", "date": "2024-03-06", "extraDays": "soon"},
    )

    assert response.status_code == 200
    assert response.json()["count"] == 4


def test_orders_day_requires_valid_date(client: TestClient) -> None:
    response = client.get("/api/v1/orders/day", params={"site": "acme", "date": "yesterday"})

    assert response.status_code == 400
    assert response.json()["ok"] is False


def test_order_print_by_id_and_order_number(client: TestClient) -> None:
    by_number = client.get("/api/v1/orders/A-1002/print")
    assert by_number.status_code == 200
    order = by_number.json()["order"]

    by_id = client.get(f"/api/v1/orders/{order['id']}/print")
    assert by_id.json()["order"] == order

    assert order["status"] == "paid"
    assert order["customer_name"] == "Riley"
    assert order["phone"] == ""
    assert order["email"] == "a@example.com"
    assert order["note"] == "ring twice"
    assert order["payment_method"] == "card"
    assert order["fulfillment_type"] == "delivery"
    assert order["total_amount"] == "$5.00"
    assert order["tax_amount"] == "$0.25"
    assert order["tip_amount"] == "$0.00"
    assert order["site"]["slug"] == "acme"
    assert order["items"] == [
        {"name": "Chai", "quantity": 1, "price_cents": None, "size": None},
        {"name": "Item", "quantity": 1, "price_cents": None, "size": None},
    ]


def test_order_print_unknown_order(client: TestClient) -> None:
    response = client.get("/api/v1/orders/999999/print")

    assert response.status_code == 404
    assert response.json() == {"ok": False, "error": "Order not found"}


def test_order_ticket_pdf(client: TestClient) -> None:
    pytest.importorskip("reportlab")
    response = client.get("/api/v1/orders/A-1001/print.pdf")

    assert response.status_code == 200
    assert 'filename="order_A-1001.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_orders_day_rejects_timezone_directory_name(client: TestClient) -> None:
    response = client.get("/api/v1/orders/day", params={"site": "acme", "date": "2024-03-06", "tz": "America"})

    assert response.status_code == 400
    assert response.json() == {"ok": False, "error": "Unknown timezone: America"}
