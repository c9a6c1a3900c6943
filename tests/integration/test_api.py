"""Integration tests for API endpoints"""

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from moneymap.infrastructure.database.repositories import SIPPlanRepository


@pytest.fixture
def active_plan(client: TestClient, user_id: str) -> dict:
    response = client.post(
        "/v1/sip/plans",
        json={
            "user_id": user_id,
            "fund_name": "Tata Small Cap Fund Direct Growth",
            "amount_cents": 500000,
            "start_date": "2024-01-01",
        },
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_request_id_is_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_metrics_endpoint(client: TestClient, user_id: str):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-06"})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "moneymap_reconciler_inserts_total" in response.text


def test_reconcile_endpoint_inserts_rows(client: TestClient, user_id: str, active_plan: dict):
    """Day 26: one EPF contribution and one SIP investment"""
    response = client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-26"})

    assert response.status_code == 200
    data = response.json()
    assert data["epf_added"] is True
    assert data["investments_added"] is True
    assert data["inserted_epf"][0]["date"] == "2024-03-05"
    assert data["inserted_epf"][0]["amount_cents"] == 360000
    inv = data["inserted_investments"][0]
    assert inv["sip_plan_id"] == active_plan["id"]
    assert inv["type"] == "SIP"
    assert inv["amount_cents"] == 500000
    assert inv["date"] == "2024-03-25"
    assert data["last_reconciled_month"] == "2024-03-01"


def test_reconcile_endpoint_with_session_marker(client: TestClient, user_id: str, active_plan: dict):
    response = client.post(
        "/v1/reconcile",
        json={"user_id": user_id, "today": "2024-03-26", "last_reconciled_month": "2024-03-01"},
    )

    data = response.json()
    assert data["epf_added"] is False
    assert data["investments_added"] is False
    assert client.get(f"/v1/investments?user_id={user_id}").json() == []


def test_reconcile_endpoint_idempotent(client: TestClient, user_id: str, active_plan: dict):
    client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-26"})
    second = client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-28"})

    assert second.json()["epf_added"] is False
    assert second.json()["investments_added"] is False
    assert len(client.get(f"/v1/epf?user_id={user_id}").json()) == 1
    assert len(client.get(f"/v1/investments?user_id={user_id}").json()) == 1


def test_skip_endpoint_preempts_sip(client: TestClient, user_id: str, active_plan: dict):
    skip = client.post("/v1/sip/skip", json={"user_id": user_id, "today": "2024-03-10"})
    assert skip.status_code == 200
    assert skip.json()["skipped"][0]["amount_cents"] == 0
    assert skip.json()["skipped"][0]["notes"] == "skipped"

    response = client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-26"})

    assert response.json()["investments_added"] is False


def test_change_sip_amount(client: TestClient, user_id: str, active_plan: dict):
    response = client.post(
        f"/v1/sip/plans/{active_plan['id']}/amount",
        json={"user_id": user_id, "amount_cents": 750000, "today": "2024-03-19"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["closed"]["end_date"] == "2024-03-19"
    assert data["created"]["start_date"] == "2024-04-01"
    assert data["created"]["amount_cents"] == 750000

    plans = client.get(f"/v1/sip/plans?user_id={user_id}&today=2024-04-10").json()
    assert len(plans["plans"]) == 2
    assert plans["monthly_commitment_cents"] == 750000


def test_change_amount_of_closed_plan_conflicts(client: TestClient, user_id: str, active_plan: dict):
    url = f"/v1/sip/plans/{active_plan['id']}/amount"
    client.post(url, json={"user_id": user_id, "amount_cents": 750000, "today": "2024-03-19"})

    response = client.post(url, json={"user_id": user_id, "amount_cents": 800000, "today": "2024-03-20"})

    assert response.status_code == 409


def test_change_amount_unknown_plan(client: TestClient, user_id: str):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.post(
        f"/v1/sip/plans/{fake_uuid}/amount",
        json={"user_id": user_id, "amount_cents": 750000},
    )
    assert response.status_code == 404


def test_change_amount_invalid_id(client: TestClient, user_id: str):
    response = client.post("/v1/sip/plans/not-a-uuid/amount", json={"user_id": user_id, "amount_cents": 1})
    assert response.status_code == 400


def test_plans_are_user_scoped(client: TestClient, active_plan: dict):
    response = client.post(
        f"/v1/sip/plans/{active_plan['id']}/amount",
        json={"user_id": "someone_else", "amount_cents": 750000},
    )
    assert response.status_code == 404


def test_profile_amount_drives_epf(client: TestClient, user_id: str):
    response = client.put("/v1/profile", json={"user_id": user_id, "full_name": "Jayveer", "epf_monthly_cents": 420000})
    assert response.status_code == 200
    assert response.json()["effective_epf_monthly_cents"] == 420000

    result = client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-06"}).json()

    assert result["inserted_epf"][0]["amount_cents"] == 420000


def test_profile_not_found(client: TestClient):
    assert client.get("/v1/profile?user_id=nobody").status_code == 404


def test_bank_accounts_crud(client: TestClient, user_id: str):
    created = client.post(
        "/v1/banks",
        json={"user_id": user_id, "bank_name": "HDFC", "account_type": "Savings", "balance_cents": 2500000},
    ).json()
    client.post(
        "/v1/banks",
        json={"user_id": user_id, "bank_name": "Axis", "account_type": "Current", "balance_cents": 500000},
    )

    updated = client.put(
        f"/v1/banks/{created['id']}",
        json={"user_id": user_id, "bank_name": "HDFC", "account_type": "Savings", "balance_cents": 3000000},
    )
    assert updated.status_code == 200

    banks = client.get(f"/v1/banks?user_id={user_id}").json()
    assert [a["bank_name"] for a in banks["accounts"]] == ["Axis", "HDFC"]
    assert banks["total_balance_cents"] == 3500000

    assert client.delete(f"/v1/banks/{created['id']}?user_id={user_id}").status_code == 204
    assert client.get(f"/v1/banks?user_id={user_id}").json()["total_balance_cents"] == 500000


def test_expense_validation_and_delete(client: TestClient, user_id: str):
    bad = client.post(
        "/v1/expenses",
        json={"user_id": user_id, "date": "2024-03-02", "amount_cents": 100, "category": "NOT_A_CATEGORY"},
    )
    assert bad.status_code == 422

    created = client.post(
        "/v1/expenses",
        json={"user_id": user_id, "date": "2024-03-02", "amount_cents": 150000, "category": "BILLS"},
    ).json()
    assert created["dr_cr"] == "DR"

    assert client.delete(f"/v1/expenses/{created['id']}?user_id={user_id}").status_code == 204
    assert client.delete(f"/v1/expenses/{created['id']}?user_id={user_id}").status_code == 404


def test_overview_report(client: TestClient, user_id: str, active_plan: dict):
    client.post("/v1/salaries", json={"user_id": user_id, "amount_cents": 10000000, "start_date": "2024-01-01"})
    client.post(
        "/v1/expenses",
        json={"user_id": user_id, "date": "2024-03-02", "amount_cents": 2000000, "category": "BILLS"},
    )
    client.post(
        "/v1/banks",
        json={"user_id": user_id, "bank_name": "HDFC", "account_type": "Savings", "balance_cents": 1000000},
    )
    client.post("/v1/reconcile", json={"user_id": user_id, "today": "2024-03-26"})

    response = client.get(f"/v1/reports/overview?user_id={user_id}&today=2024-03-28")

    assert response.status_code == 200
    data = response.json()
    assert data["total_assets_cents"] == 360000 + 500000 + 1000000
    assert data["monthly_change_cents"] == 860000
    assert data["monthly_income_cents"] == 10000000
    assert data["monthly_expenses_cents"] == 2000000
    assert data["savings_rate"] == 80.0
    assert data["monthly_sip_cents"] == 500000
    assert data["expense_breakdown"] == [{"category": "BILLS", "amount_cents": 2000000}]
    assert len(data["net_worth_history"]) == 12
    assert data["net_worth_history"][-1]["amount_cents"] == 860000


def test_monthly_report_range(client: TestClient, user_id: str):
    response = client.get(f"/v1/reports/monthly?user_id={user_id}&range=3months&today=2024-03-28")

    assert response.status_code == 200
    assert [m["period"] for m in response.json()["months"]] == ["2023-12", "2024-01", "2024-02", "2024-03"]


def test_monthly_report_unknown_range(client: TestClient, user_id: str):
    response = client.get(f"/v1/reports/monthly?user_id={user_id}&range=forever")
    assert response.status_code == 422


def test_yearly_report(client: TestClient, user_id: str):
    client.post(
        "/v1/expenses",
        json={"user_id": user_id, "date": "2023-05-02", "amount_cents": 100000, "category": "TRAVEL"},
    )
    client.post(
        "/v1/expenses",
        json={"user_id": user_id, "date": "2024-02-02", "amount_cents": 150000, "category": "TRAVEL"},
    )

    response = client.get(f"/v1/reports/yearly?user_id={user_id}&today=2024-03-28")

    data = response.json()
    assert [y["period"] for y in data["years"]] == ["2023", "2024"]
    assert data["year"] == "2024"
    assert data["comparison_year"] == "2023"
    expenses = next(c for c in data["comparison"] if c["metric"] == "expenses")
    assert expenses["change"] == 50000
    assert expenses["change_pct"] == 50.0


def test_change_amount_write_failure_rolls_back(client: TestClient, user_id: str, active_plan: dict):
    with patch.object(SIPPlanRepository, "create", side_effect=SQLAlchemyError("insert failed")):
        response = client.post(
            f"/v1/sip/plans/{active_plan['id']}/amount",
            json={"user_id": user_id, "amount_cents": 750000, "today": "2024-03-19"},
        )

    assert response.status_code == 500
    plans = client.get(f"/v1/sip/plans?user_id={user_id}&today=2024-03-20").json()["plans"]
    assert len(plans) == 1
    assert plans[0]["end_date"] is None
