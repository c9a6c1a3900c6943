"""
E2E tests walking user personas through whole months of dashboard sessions.

User personas:
- steady_saver: one SIP, opens the dashboard several times a month
- plan_changer: raises a SIP amount mid-month, expects the new amount next month
- skipper: skips March's SIP, then opens the dashboard after the 25th
- two_tabs: second tab in the same month must not double insert
"""

from fastapi.testclient import TestClient


def _open_dashboard(client: TestClient, user_id: str, today: str, marker: str | None = None) -> dict:
    body = {"user_id": user_id, "today": today}
    if marker:
        body["last_reconciled_month"] = marker
    response = client.post("/v1/reconcile", json=body)
    assert response.status_code == 200
    return response.json()


def _create_plan(client: TestClient, user_id: str, amount_cents: int, start_date: str) -> dict:
    return client.post(
        "/v1/sip/plans",
        json={
            "user_id": user_id,
            "fund_name": "Nippon India Large Cap Fund Direct Growth",
            "amount_cents": amount_cents,
            "start_date": start_date,
        },
    ).json()


def test_steady_saver_month(client: TestClient):
    """
    steady_saver: sessions on the 3rd, 6th and 26th
    Expected: nothing, then EPF, then SIP; one row each
    """
    user = "steady_saver"
    _create_plan(client, user, 500000, "2024-01-01")

    early = _open_dashboard(client, user, "2024-03-03")
    assert early["epf_added"] is False and early["investments_added"] is False

    after_fifth = _open_dashboard(client, user, "2024-03-06")
    assert after_fifth["epf_added"] is True
    assert after_fifth["investments_added"] is False

    after_25th = _open_dashboard(client, user, "2024-03-26")
    assert after_25th["epf_added"] is False
    assert after_25th["investments_added"] is True

    assert len(client.get(f"/v1/epf?user_id={user}").json()) == 1
    assert len(client.get(f"/v1/investments?user_id={user}").json()) == 1

    next_month = _open_dashboard(client, user, "2024-04-26", marker="2024-03-01")
    assert next_month["epf_added"] is True
    assert next_month["investments_added"] is True
    assert next_month["last_reconciled_month"] == "2024-04-01"


def test_plan_changer_new_amount_next_month(client: TestClient):
    """
    plan_changer: raises the SIP on March 19th
    Expected: March invests the old amount, April the new one
    """
    user = "plan_changer"
    plan = _create_plan(client, user, 500000, "2024-01-01")

    client.post(
        f"/v1/sip/plans/{plan['id']}/amount",
        json={"user_id": user, "amount_cents": 800000, "today": "2024-03-19"},
    )

    march = _open_dashboard(client, user, "2024-03-26")
    april = _open_dashboard(client, user, "2024-04-27")

    assert [i["amount_cents"] for i in march["inserted_investments"]] == [500000]
    assert [i["amount_cents"] for i in april["inserted_investments"]] == [800000]


def test_skipper_month(client: TestClient):
    """
    skipper: skips March's SIP on the 10th
    Expected: no SIP investment for March, normal SIP in April
    """
    user = "skipper"
    _create_plan(client, user, 500000, "2024-01-01")

    client.post("/v1/sip/skip", json={"user_id": user, "today": "2024-03-10"})
    march = _open_dashboard(client, user, "2024-03-26")
    april = _open_dashboard(client, user, "2024-04-25")

    assert march["investments_added"] is False
    assert april["investments_added"] is True

    investments = client.get(f"/v1/investments?user_id={user}").json()
    assert sorted(i["amount_cents"] for i in investments) == [0, 500000]


def test_two_tabs_same_month(client: TestClient):
    """
    two_tabs: two sessions open on the same day, each with a fresh marker
    Expected: one EPF and one SIP row in total
    """
    user = "two_tabs"
    _create_plan(client, user, 300000, "2024-02-01")

    first = _open_dashboard(client, user, "2024-03-27")
    second = _open_dashboard(client, user, "2024-03-27")

    assert first["epf_added"] is True
    assert second["epf_added"] is False
    assert second["investments_added"] is False
    assert len(client.get(f"/v1/epf?user_id={user}").json()) == 1
