"""End-to-end ledger flow through the HTTP API.

Register -> deliver -> assign -> edit -> install -> adjust -> remove, checking
stock figures and the transaction log after each step.
"""

import pytest

TYPE_SIGN = {"RESERVED": 1, "UNRESERVED": -1, "OUT": -1}


async def stock_of(client, material_id: str) -> dict:
    response = await client.get(f"/api/stock/{material_id}")
    assert response.status_code == 200
    return response.json()


async def assert_log_matches(client, material_id: str) -> None:
    """Stock figures agree with the transaction log."""
    stock = await stock_of(client, material_id)
    log = (await client.get(f"/api/stock/{material_id}/transactions")).json()

    reserved = sum(TYPE_SIGN.get(t["type"], 0) * t["quantity"] for t in log)
    assert reserved == pytest.approx(stock["reserved_stock"])
    assert stock["available_stock"] == pytest.approx(
        stock["current_stock"] - stock["reserved_stock"]
    )
    assert stock["total_value"] == pytest.approx(stock["current_stock"] * stock["unit_cost"])


class TestLedgerFlow:
    async def test_full_material_lifecycle(self, api_client):
        client = api_client

        created = await client.post(
            "/api/catalog",
            json={"name": "Steel Beam IPE200", "cost_per_unit": 2.0, "minimum_stock": 10},
        )
        assert created.status_code == 201
        material_id = created.json()["material"]["id"]
        assert (await stock_of(client, material_id))["status"] == "low"

        delivery = await client.post(
            "/api/dispatch/deliveries",
            json={
                "dispatch_id": "DSP-100",
                "lines": [{"material_ref": "steel beam ipe200", "delivered_quantity": 50,
                           "unit_cost": 2.0}],
            },
        )
        assert delivery.json()["received_count"] == 1
        stock = await stock_of(client, material_id)
        assert stock["current_stock"] == 50
        assert stock["total_value"] == 100.0
        assert stock["status"] == "normal"

        first = await client.post(
            "/api/assignments",
            json={"project_id": "PRJ-A", "material_id": material_id, "quantity": 20},
        )
        assert first.status_code == 201
        first_id = first.json()["id"]

        rejected = await client.post(
            "/api/assignments",
            json={"project_id": "PRJ-B", "material_id": material_id, "quantity": 40},
        )
        assert rejected.status_code == 409
        assert (await stock_of(client, material_id))["available_stock"] == 30

        second = await client.post(
            "/api/assignments",
            json={"project_id": "PRJ-B", "material_id": material_id, "quantity": 25},
        )
        second_id = second.json()["id"]
        edit = await client.patch(f"/api/assignments/{second_id}", json={"quantity": 35})
        assert edit.status_code == 409
        await assert_log_matches(client, material_id)

        installed = await client.post(f"/api/assignments/{first_id}/install")
        assert installed.json()["consumed"] == 20
        stock = await stock_of(client, material_id)
        assert stock["current_stock"] == 30
        assert stock["reserved_stock"] == 25
        assert stock["total_value"] == 60.0

        adjusted = await client.post(
            f"/api/stock/{material_id}/adjust", json={"new_current_stock": 24}
        )
        assert adjusted.status_code == 409
        adjusted = await client.post(
            f"/api/stock/{material_id}/adjust", json={"new_current_stock": 28}
        )
        assert adjusted.json()["transaction"]["quantity"] == -2
        await assert_log_matches(client, material_id)

        in_use = await client.delete(f"/api/catalog/{material_id}")
        assert in_use.status_code == 409

        await client.post(f"/api/assignments/{second_id}/unreserve")
        await assert_log_matches(client, material_id)

        removed = await client.delete(f"/api/catalog/{material_id}")
        assert removed.status_code == 200
        assert removed.json()["deleted_assignments"] == 2

        history = (await client.get(f"/api/stock/{material_id}/history")).json()
        actions = [e["action"] for e in history["entries"]]
        assert actions == ["IN", "RESERVED", "RESERVED", "OUT", "ADJUSTED", "UNRESERVED"]
