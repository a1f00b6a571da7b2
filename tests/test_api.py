"""
HTTP API tests.

Covers:
- Cookie authentication and role checks (401/403)
- Domain error mapping (404/409/422)
- Admin agent and sale flows
- Agent panel
"""

import pytest

from src.auth.jwt import COOKIE_NAME, ROLE_AGENT, create_access_token


AGENT_PAYLOAD = {
    "name": "Rita Agent",
    "email": "rita@example.com",
    "password": "secret123",
    "agent_commission_percentage": 70,
    "organization_commission_percentage": 30,
}


def agent_cookie(agent_id: int) -> str:
    return create_access_token(str(agent_id), ROLE_AGENT)


async def _create_agent(client, **overrides):
    payload = {**AGENT_PAYLOAD, **overrides}
    response = await client.post("/admin/agents", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def _record_sale(client, agent_id, amount, **overrides):
    payload = {
        "agent_id": agent_id,
        "customer_name": "Sam Buyer",
        "product_name": "4 Harbour View",
        "amount": amount,
        **overrides,
    }
    return await client.post("/admin/sales", json=payload)


# ── Auth ──────────────────────────────────────────────────


class TestAuth:
    async def test_health_is_public(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_admin_routes_need_login(self, client):
        response = await client.get("/admin/agents")
        assert response.status_code == 401

    async def test_invalid_token(self, client):
        client.cookies.set(COOKIE_NAME, "not-a-jwt")
        response = await client.get("/admin/agents")
        assert response.status_code == 401

    async def test_agent_cannot_use_admin_routes(self, admin_client):
        agent = await _create_agent(admin_client)
        admin_client.cookies.set(COOKIE_NAME, agent_cookie(agent["id"]))
        response = await admin_client.get("/admin/agents")
        assert response.status_code == 403

    async def test_admin_cannot_use_panel(self, admin_client):
        response = await admin_client.get("/panel/me")
        assert response.status_code == 403

    async def test_admin_login(self, client):
        response = await client.post(
            "/api/auth/admin/login",
            json={"username": "admin", "password": "admin"},
        )
        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        assert COOKIE_NAME in response.headers.get("set-cookie", "")

    async def test_admin_login_wrong_password(self, client):
        response = await client.post(
            "/api/auth/admin/login",
            json={"username": "admin", "password": "wrong"},
        )
        assert response.status_code == 401

    async def test_agent_login(self, admin_client):
        await _create_agent(admin_client)
        admin_client.cookies.clear()

        response = await admin_client.post(
            "/api/auth/login",
            json={"email": "rita@example.com", "password": "secret123"},
        )
        assert response.status_code == 200
        assert response.json()["role"] == "agent"

    async def test_agent_login_wrong_password(self, admin_client):
        await _create_agent(admin_client)
        response = await admin_client.post(
            "/api/auth/login",
            json={"email": "rita@example.com", "password": "nope"},
        )
        assert response.status_code == 401

    async def test_token_of_deleted_agent(self, admin_client):
        agent = await _create_agent(admin_client)
        await admin_client.delete(f"/admin/agents/{agent['id']}")

        admin_client.cookies.set(COOKIE_NAME, agent_cookie(agent["id"]))
        response = await admin_client.get("/panel/me")
        assert response.status_code == 401


# ── Admin: agents ─────────────────────────────────────────


class TestAdminAgents:
    async def test_create_and_get(self, admin_client):
        agent = await _create_agent(admin_client)
        assert agent["level"] == "L1"
        assert agent["total_sales"] == 0
        assert agent["agent_commission_percentage"] == 70
        assert "password_hash" not in agent

        response = await admin_client.get(f"/admin/agents/{agent['id']}")
        assert response.status_code == 200
        assert response.json()["email"] == "rita@example.com"

    async def test_bad_split_is_422(self, admin_client):
        response = await admin_client.post(
            "/admin/agents",
            json={**AGENT_PAYLOAD, "organization_commission_percentage": 50},
        )
        assert response.status_code == 422
        assert "100" in response.json()["detail"]

    async def test_duplicate_email_is_409(self, admin_client):
        await _create_agent(admin_client)
        response = await admin_client.post("/admin/agents", json=AGENT_PAYLOAD)
        assert response.status_code == 409

    async def test_unknown_agent_is_404(self, admin_client):
        response = await admin_client.get("/admin/agents/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Agent 999 not found"

    async def test_update_split_pair(self, admin_client):
        agent = await _create_agent(admin_client)
        response = await admin_client.put(
            f"/admin/agents/{agent['id']}",
            json={"agent_commission_percentage": 55, "organization_commission_percentage": 45},
        )
        assert response.status_code == 200
        assert response.json()["organization_commission_percentage"] == 45

    async def test_update_pair_not_summing_is_422(self, admin_client):
        agent = await _create_agent(admin_client)
        response = await admin_client.put(
            f"/admin/agents/{agent['id']}",
            json={"agent_commission_percentage": 55, "organization_commission_percentage": 55},
        )
        assert response.status_code == 422

    async def test_demotion_is_422(self, admin_client):
        agent = await _create_agent(admin_client, level="L2")
        response = await admin_client.put(f"/admin/agents/{agent['id']}", json={"level": "L1"})
        assert response.status_code == 422

    async def test_delete(self, admin_client):
        agent = await _create_agent(admin_client)
        response = await admin_client.delete(f"/admin/agents/{agent['id']}")
        assert response.status_code in (200, 204)

        response = await admin_client.get(f"/admin/agents/{agent['id']}")
        assert response.status_code == 404

    async def test_consistency(self, admin_client):
        agent = await _create_agent(admin_client)
        await _record_sale(admin_client, agent["id"], 1000)

        response = await admin_client.get(f"/admin/agents/{agent['id']}/consistency")
        assert response.status_code == 200
        body = response.json()
        assert body["consistent"] is True
        assert body["ledger_total"] == 1000


# ── Admin: sales ──────────────────────────────────────────


class TestAdminSales:
    async def test_full_flow(self, admin_client):
        agent = await _create_agent(admin_client)

        response = await _record_sale(admin_client, agent["id"], 100000)
        assert response.status_code == 201, response.text
        first = response.json()
        assert first["agent_commission_amount"] == 70000
        assert first["organization_commission_amount"] == 30000
        assert first["agent_email"] == "rita@example.com"

        second = (await _record_sale(admin_client, agent["id"], 450000)).json()
        current = (await admin_client.get(f"/admin/agents/{agent['id']}")).json()
        assert current["total_sales"] == 550000
        assert current["level"] == "L2"

        response = await admin_client.put(f"/admin/sales/{first['id']}", json={"amount": 50000})
        assert response.status_code == 200
        assert response.json()["agent_commission_amount"] == 35000

        response = await admin_client.delete(f"/admin/sales/{second['id']}")
        assert response.status_code in (200, 204)

        current = (await admin_client.get(f"/admin/agents/{agent['id']}")).json()
        assert current["total_sales"] == 50000
        assert current["level"] == "L2"

    async def test_unknown_agent_is_404(self, admin_client):
        response = await _record_sale(admin_client, 999, 1000)
        assert response.status_code == 404

        listing = await admin_client.get("/admin/sales")
        assert listing.json() == []

    async def test_missing_agent_id_is_422(self, admin_client):
        response = await _record_sale(admin_client, None, 1000)
        assert response.status_code == 422

    async def test_negative_amount_is_422(self, admin_client):
        agent = await _create_agent(admin_client)
        response = await _record_sale(admin_client, agent["id"], -1)
        assert response.status_code == 422

    async def test_edit_clears_notes_with_null(self, admin_client):
        agent = await _create_agent(admin_client)
        sale = (
            await _record_sale(admin_client, agent["id"], 1000, notes="call back", description="corner lot")
        ).json()

        response = await admin_client.put(f"/admin/sales/{sale['id']}", json={"notes": None})
        assert response.status_code == 200
        body = response.json()
        assert body["notes"] is None
        assert body["description"] == "corner lot"
        assert body["amount"] == 1000

    async def test_edit_null_amount_is_422(self, admin_client):
        agent = await _create_agent(admin_client)
        sale = (await _record_sale(admin_client, agent["id"], 1000)).json()

        response = await admin_client.put(f"/admin/sales/{sale['id']}", json={"amount": None})
        assert response.status_code == 422

    async def test_split_with_three_decimals_is_422(self, admin_client):
        response = await admin_client.post(
            "/admin/agents",
            json={
                **AGENT_PAYLOAD,
                "agent_commission_percentage": "10.005",
                "organization_commission_percentage": "89.995",
            },
        )
        assert response.status_code == 422

    async def test_unknown_sale_is_404(self, admin_client):
        response = await admin_client.get("/admin/sales/999")
        assert response.status_code == 404

    async def test_orphaned_sale_is_listed(self, admin_client):
        agent = await _create_agent(admin_client)
        await _record_sale(admin_client, agent["id"], 1000)
        await admin_client.delete(f"/admin/agents/{agent['id']}")

        sales = (await admin_client.get("/admin/sales")).json()
        assert len(sales) == 1
        assert sales[0]["agent_name"] == "Rita Agent"
        assert sales[0]["agent_email"] is None

    async def test_filter_and_summary(self, admin_client):
        rita = await _create_agent(admin_client)
        other = await _create_agent(
            admin_client,
            email="other@example.com",
            agent_commission_percentage=50,
            organization_commission_percentage=50,
        )
        await _record_sale(admin_client, rita["id"], 1000, status="completed")
        await _record_sale(admin_client, other["id"], 2000)

        by_agent = (await admin_client.get("/admin/sales", params={"agent_id": rita["id"]})).json()
        assert len(by_agent) == 1

        pending = (await admin_client.get("/admin/sales", params={"status": "pending"})).json()
        assert [s["agent_id"] for s in pending] == [other["id"]]

        summary = (await admin_client.get("/admin/sales/summary")).json()
        assert summary["count"] == 2
        assert summary["revenue"] == 3000
        assert summary["agent_earnings"] == 1700
        assert summary["organization_earnings"] == 1300


# ── Agent panel ───────────────────────────────────────────


class TestPanel:
    async def test_profile_and_own_sales(self, admin_client):
        agent = await _create_agent(admin_client)
        await _record_sale(admin_client, agent["id"], 120000)

        admin_client.cookies.set(COOKIE_NAME, agent_cookie(agent["id"]))

        profile = (await admin_client.get("/panel/me")).json()
        assert profile["total_sales"] == 120000
        assert profile["remaining_to_promotion"] == 380000

        sales = (await admin_client.get("/panel/sales")).json()
        assert len(sales) == 1

        summary = (await admin_client.get("/panel/sales/summary")).json()
        assert summary["agent_earnings"] == 84000

    async def test_agent_records_for_self(self, admin_client):
        agent = await _create_agent(admin_client)
        other = await _create_agent(admin_client, email="other@example.com")

        admin_client.cookies.set(COOKIE_NAME, agent_cookie(agent["id"]))
        response = await admin_client.post(
            "/panel/sales",
            json={
                "agent_id": other["id"],
                "customer_name": "Walk-in",
                "product_name": "Studio flat",
                "amount": 1000,
            },
        )
        assert response.status_code == 201
        assert response.json()["agent_id"] == agent["id"]

    async def test_change_password(self, admin_client):
        agent = await _create_agent(admin_client)
        admin_client.cookies.set(COOKIE_NAME, agent_cookie(agent["id"]))

        response = await admin_client.post(
            "/panel/me/password",
            json={"current_password": "wrong", "new_password": "another123"},
        )
        assert response.status_code == 400

        response = await admin_client.post(
            "/panel/me/password",
            json={"current_password": "secret123", "new_password": "another123"},
        )
        assert response.status_code == 200

        admin_client.cookies.clear()
        response = await admin_client.post(
            "/api/auth/login",
            json={"email": "rita@example.com", "password": "another123"},
        )
        assert response.status_code == 200


@pytest.mark.parametrize("path", ["/panel/me", "/panel/sales", "/panel/sales/summary"])
async def test_panel_requires_login(client, path):
    response = await client.get(path)
    assert response.status_code == 401
