"""HTTP surface: envelopes, status codes, filters and pagination."""

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy import select

from core.auth import current_organization_id
from core.errors import AppError
from db.users import User

TODAY = date.today()


async def _create_inbound(client, warehouse_id, items):
    resp = await client.post(
        "/warehouse/inbound-orders",
        json={"warehouse_id": str(warehouse_id), "items": items},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestHealth:
    async def test_health(self, client):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestWarehouses:
    async def test_create_and_list(self, client):
        resp = await client.post("/warehouse/warehouses", json={"name": "  North Hub ", "temperature_controlled": True})
        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 201
        assert body["data"]["name"] == "North Hub"
        wid = body["data"]["id"]

        resp = await client.get("/warehouse/warehouses")
        data = resp.json()["data"]
        assert [w["id"] for w in data["items"]] == [wid]
        assert data["pagination"] == {"total": 1, "page": 1, "limit": 20, "totalPages": 1}

    async def test_blank_name_is_rejected(self, client):
        resp = await client.post("/warehouse/warehouses", json={"name": "   "})
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 400
        assert body["data"] is None

    async def test_locations(self, client, warehouse_id):
        resp = await client.post(
            f"/warehouse/warehouses/{warehouse_id}/locations",
            json={"location_code": "A-1-1", "rack_number": 1, "shelf_number": 1},
        )
        assert resp.status_code == 201
        resp = await client.get(f"/warehouse/warehouses/{warehouse_id}/locations")
        assert [loc["location_code"] for loc in resp.json()["data"]] == ["A-1-1"]

    async def test_foreign_warehouse_is_404(self, client, other_warehouse):
        resp = await client.get(f"/warehouse/warehouses/{other_warehouse.id}")
        assert resp.status_code == 404
        assert resp.json() == {"code": 404, "data": None, "message": "Warehouse not found"}


class TestInboundFlow:
    async def test_create_get_and_confirm(self, client, warehouse_id):
        items = [
            {"product_name": "Apple", "quantity": 50, "unit": "kg", "batch_id": "B1",
             "expiration_date": (TODAY + timedelta(days=2)).isoformat()},
        ]
        order = await _create_inbound(client, warehouse_id, items)
        assert order["status"] == "draft"
        assert order["inbound_number"].startswith("IB-")
        assert order["warehouse_name"] == "Main Cold Store"

        resp = await client.get(f"/warehouse/inbound-orders/{order['id']}")
        assert resp.json()["data"]["id"] == order["id"]

        resp = await client.post(f"/warehouse/inbound-orders/{order['id']}/confirm", json={"items": items})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["code"] == 200
        assert body["message"] == "Inbound order confirmed"
        assert body["data"]["status"] == "confirmed"
        assert body["data"]["confirmed_at"] is not None

        resp = await client.get("/warehouse/inventory-alerts")
        alerts = resp.json()["data"]["items"]
        assert len(alerts) == 1
        assert alerts[0]["alert_level"] == "critical"
        assert alerts[0]["warehouse_name"] == "Main Cold Store"

    async def test_second_confirmation_is_409(self, client, warehouse_id):
        items = [{"product_name": "Apple", "quantity": 5, "unit": "kg"}]
        order = await _create_inbound(client, warehouse_id, items)
        await client.post(f"/warehouse/inbound-orders/{order['id']}/confirm", json={"items": items})

        resp = await client.post(f"/warehouse/inbound-orders/{order['id']}/confirm", json={"items": items})

        assert resp.status_code == 409
        assert resp.json()["data"] is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"items": []},
            {"items": [{"product_name": "Apple", "quantity": 0, "unit": "kg"}]},
            {"items": [{"product_name": "", "quantity": 1, "unit": "kg"}]},
            {},
        ],
    )
    async def test_invalid_confirm_payload_is_400(self, client, warehouse_id, payload):
        order = await _create_inbound(client, warehouse_id, [{"product_name": "Apple", "quantity": 5, "unit": "kg"}])

        resp = await client.post(f"/warehouse/inbound-orders/{order['id']}/confirm", json=payload)

        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 400
        assert body["data"] is None
        assert body["message"]

    @pytest.mark.parametrize("raw_quantity", ["1e400", "-1e400", "NaN", "Infinity"])
    async def test_non_finite_quantity_is_400(self, client, warehouse_id, stock_rows, raw_quantity):
        order = await _create_inbound(client, warehouse_id, [{"product_name": "Apple", "quantity": 5, "unit": "kg"}])
        body = '{"items": [{"product_name": "Apple", "quantity": ' + raw_quantity + ', "unit": "kg"}]}'

        resp = await client.post(
            f"/warehouse/inbound-orders/{order['id']}/confirm",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json()["code"] == 400
        assert await stock_rows() == []
        resp = await client.get(f"/warehouse/inbound-orders/{order['id']}")
        assert resp.json()["data"]["status"] == "draft"

    async def test_non_finite_quantity_cannot_be_ordered(self, client, warehouse_id):
        resp = await client.post(
            "/warehouse/outbound-orders",
            content='{"warehouse_id": "' + str(warehouse_id) + '", "items": [{"product_name": "Apple", "requested_quantity": 1e400, "unit": "kg"}]}',
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400

    async def test_unknown_order_is_404(self, client):
        resp = await client.post(
            f"/warehouse/inbound-orders/{uuid.uuid4()}/confirm",
            json={"items": [{"product_name": "Apple", "quantity": 5, "unit": "kg"}]},
        )
        assert resp.status_code == 404
        assert resp.json()["message"] == "Inbound order not found"


class TestOutboundFlow:
    async def test_insufficient_inventory_is_409_naming_the_product(self, client, warehouse_id, add_stock):
        await add_stock("Banana", 10)
        resp = await client.post(
            "/warehouse/outbound-orders",
            json={
                "warehouse_id": str(warehouse_id),
                "items": [{"product_name": "Banana", "requested_quantity": 15, "unit": "kg"}],
            },
        )
        order = resp.json()["data"]

        resp = await client.post(
            f"/warehouse/outbound-orders/{order['id']}/confirm",
            json={"items": [{"product_name": "Banana", "requested_quantity": 15}]},
        )

        assert resp.status_code == 409
        body = resp.json()
        assert body["code"] == 409
        assert body["data"] is None
        assert "Insufficient inventory for Banana" in body["message"]

        resp = await client.get(f"/warehouse/outbound-orders/{order['id']}")
        assert resp.json()["data"]["status"] == "draft"

    async def test_confirm_records_actual_quantity(self, client, warehouse_id, add_stock):
        await add_stock("Apple", 100)
        resp = await client.post(
            "/warehouse/outbound-orders",
            json={
                "warehouse_id": str(warehouse_id),
                "items": [{"product_name": "Apple", "requested_quantity": 50, "unit": "kg"}],
            },
        )
        order = resp.json()["data"]
        assert order["outbound_number"].startswith("OB-")

        resp = await client.post(
            f"/warehouse/outbound-orders/{order['id']}/confirm",
            json={"items": [{"product_name": "Apple", "requested_quantity": 50, "actual_quantity": 45}]},
        )

        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert data["status"] == "confirmed"
        assert data["items"][0]["actual_quantity"] == 45.0

        resp = await client.get("/warehouse/inventory", params={"product_name": "apple"})
        assert resp.json()["data"]["items"][0]["quantity"] == 55.0

        resp = await client.get("/warehouse/inventory-logs", params={"reference_order_id": order["id"]})
        logs = resp.json()["data"]["items"]
        assert [entry["change_quantity"] for entry in logs] == [-45.0]

        resp = await client.get("/warehouse/outbound-orders", params={"status": "confirmed"})
        assert resp.json()["data"]["pagination"]["total"] == 1


class TestInventoryQuery:
    async def test_filters_and_pagination(self, client, add_stock):
        for i in range(5):
            await add_stock("Apple", 10 + i, batch_id=f"A{i}", expiration_date=TODAY + timedelta(days=10 + i))
        await add_stock("Banana", 3, batch_id="B0")

        resp = await client.get("/warehouse/inventory", params={"product_name": "APP", "limit": 2, "page": 3})
        data = resp.json()["data"]
        assert data["pagination"] == {"total": 5, "page": 3, "limit": 2, "totalPages": 3}
        assert len(data["items"]) == 1

        resp = await client.get("/warehouse/inventory", params={"batch_id": "B0"})
        assert [r["product_name"] for r in resp.json()["data"]["items"]] == ["Banana"]

        resp = await client.get(
            "/warehouse/inventory",
            params={
                "expiration_date_from": (TODAY + timedelta(days=11)).isoformat(),
                "expiration_date_to": (TODAY + timedelta(days=12)).isoformat(),
            },
        )
        assert sorted(r["batch_id"] for r in resp.json()["data"]["items"]) == ["A1", "A2"]

    async def test_other_organizations_stock_is_invisible(self, client, add_stock, other_warehouse):
        await add_stock("Apple", 10, for_warehouse=other_warehouse.id)

        resp = await client.get("/warehouse/inventory")

        assert resp.json()["data"]["pagination"]["total"] == 0

    @pytest.mark.parametrize(
        "params",
        [
            {"limit": 101},
            {"page": 0},
            {"status": "spoiled"},
            {"expiration_date_from": "2024-06-10", "expiration_date_to": "2024-06-01"},
        ],
    )
    async def test_bad_filters_are_400(self, client, params):
        resp = await client.get("/warehouse/inventory", params=params)
        assert resp.status_code == 400
        assert resp.json()["code"] == 400


class TestAlertResolution:
    async def test_resolve_via_api(self, client, warehouse_id, add_stock):
        await add_stock("Kiwi", 4, expiration_date=TODAY + timedelta(days=1))
        resp = await client.post(
            "/warehouse/inbound-orders",
            json={"warehouse_id": str(warehouse_id), "items": [{"product_name": "Kiwi", "quantity": 1, "unit": "kg"}]},
        )
        order = resp.json()["data"]
        await client.post(
            f"/warehouse/inbound-orders/{order['id']}/confirm",
            json={"items": [{"product_name": "Kiwi", "quantity": 1, "unit": "kg"}]},
        )

        resp = await client.get("/warehouse/inventory-alerts", params={"is_resolved": "false"})
        [alert] = resp.json()["data"]["items"]

        resp = await client.post(f"/warehouse/inventory-alerts/{alert['id']}/resolve")
        assert resp.status_code == 200
        assert resp.json()["data"]["is_resolved"] is True

        resp = await client.get("/warehouse/inventory-alerts", params={"is_resolved": "false"})
        assert resp.json()["data"]["items"] == []


class TestOrganizationScope:
    async def test_user_without_organization_is_rejected(self):
        with pytest.raises(AppError) as exc:
            await current_organization_id(User(email="loner@example.com", hashed_password="x"))
        assert exc.value.status_code == 403


class TestRegistration:
    async def test_new_user_gets_a_fresh_organization(self, client, db_session, test_user, other_user):
        taken = {test_user.organization_id, other_user.organization_id}

        resp = await client.post(
            "/auth/register",
            json={
                "email": "newcomer@example.com",
                "password": "a-long-password",
                "organization_id": str(other_user.organization_id),
            },
        )

        assert resp.status_code == 201, resp.text
        assigned = resp.json()["organization_id"]
        assert assigned is not None
        assert uuid.UUID(assigned) not in taken

        res = await db_session.execute(select(User.organization_id).where(User.email == "newcomer@example.com"))
        assert res.scalar_one() == uuid.UUID(assigned)
