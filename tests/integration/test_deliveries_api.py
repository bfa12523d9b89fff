import re

import pytest
from httpx import AsyncClient
from fastapi import status

HASH_PATTERN = re.compile(r"^0x[0-9a-f]{64}$")

DELIVERY_DATA = {
    "recipient": "John Doe",
    "origin": "New York, NY, USA",
    "destination": "Los Angeles, CA, USA",
    "weight": "2.5 kg",
    "dimensions": "30x20x15 cm",
    "description": "Electronics",
}


async def create_delivery(client: AsyncClient, headers: dict) -> dict:
    response = await client.post("/api/v1/deliveries/", json=DELIVERY_DATA, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


@pytest.mark.asyncio
class TestDeliveriesAPI:
    """Test delivery endpoints"""

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["chain_provider"] == "mock"
        assert data["components"]["chain_connected"] is False
        assert "X-Process-Time" in response.headers

    async def test_create_requires_login(self, client: AsyncClient):
        response = await client.post("/api/v1/deliveries/", json=DELIVERY_DATA)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_create_delivery(self, client: AsyncClient, auth_headers: dict):
        data = await create_delivery(client, auth_headers)

        assert data["on_chain"] is False
        assert HASH_PATTERN.match(data["transaction_hash"])
        delivery = data["delivery"]
        assert delivery["status"] == "Pending"
        assert delivery["progress_percent"] == 0
        assert len(delivery["location_history"]) == 1
        assert delivery["current_location"]["address"] == "New York, NY, USA"
        assert delivery["package_details"]["dimensions"] == "30x20x15 cm"

    async def test_create_missing_weight(self, client: AsyncClient, auth_headers: dict):
        payload = {**DELIVERY_DATA, "weight": ""}
        response = await client.post("/api/v1/deliveries/", json=payload, headers=auth_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"] == "Please enter package weight"

    async def test_track_by_number_is_case_insensitive(self, client: AsyncClient, auth_headers: dict):
        created = await create_delivery(client, auth_headers)
        tracking_number = created["delivery"]["tracking_number"]

        response = await client.get(f"/api/v1/deliveries/track/{tracking_number.lower()}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == created["delivery"]["id"]

    async def test_track_unknown_number(self, client: AsyncClient):
        response = await client.get("/api/v1/deliveries/track/TRK0000000000")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_get_unknown_delivery(self, client: AsyncClient):
        response = await client.get("/api/v1/deliveries/999")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_update_status(self, client: AsyncClient, auth_headers: dict):
        delivery_id = (await create_delivery(client, auth_headers))["delivery"]["id"]

        response = await client.patch(
            f"/api/v1/deliveries/{delivery_id}/status",
            json={"status": "In Transit"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_204_NO_CONTENT

        delivery = (await client.get(f"/api/v1/deliveries/{delivery_id}")).json()
        assert delivery["status"] == "In Transit"
        assert delivery["status_rank"] == 1

        timeline = (await client.get(f"/api/v1/deliveries/{delivery_id}/timeline")).json()
        assert [step["current"] for step in timeline] == [False, True, False]

    async def test_update_status_invalid(self, client: AsyncClient, auth_headers: dict):
        delivery_id = (await create_delivery(client, auth_headers))["delivery"]["id"]

        response = await client.patch(
            f"/api/v1/deliveries/{delivery_id}/status",
            json={"status": "Lost"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    async def test_update_status_requires_login(self, client: AsyncClient, auth_headers: dict):
        delivery_id = (await create_delivery(client, auth_headers))["delivery"]["id"]

        response = await client.patch(
            f"/api/v1/deliveries/{delivery_id}/status",
            json={"status": "Delivered"},
            headers={"Authorization": "Bearer expired-or-forged"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_update_status_unknown_delivery(self, client: AsyncClient, auth_headers: dict):
        response = await client.patch(
            "/api/v1/deliveries/999/status",
            json={"status": "Delivered"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_add_location(self, client: AsyncClient, auth_headers: dict):
        delivery_id = (await create_delivery(client, auth_headers))["delivery"]["id"]

        response = await client.post(
            f"/api/v1/deliveries/{delivery_id}/locations",
            json={"address": "Denver, CO, USA", "latitude": 39.7392, "longitude": "bad"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_204_NO_CONTENT

        delivery = (await client.get(f"/api/v1/deliveries/{delivery_id}")).json()
        assert len(delivery["location_history"]) == 2
        assert delivery["current_location"]["address"] == "Denver, CO, USA"
        assert delivery["current_location"]["longitude"] == 0.0

    async def test_add_location_with_structured_coordinates(self, client: AsyncClient, auth_headers: dict):
        delivery_id = (await create_delivery(client, auth_headers))["delivery"]["id"]

        response = await client.post(
            f"/api/v1/deliveries/{delivery_id}/locations",
            json={"address": "Denver, CO, USA", "latitude": {"deg": 39}, "longitude": [1]},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_204_NO_CONTENT

        current = (await client.get(f"/api/v1/deliveries/{delivery_id}")).json()["current_location"]
        assert current["address"] == "Denver, CO, USA"
        assert current["latitude"] == 0.0
        assert current["longitude"] == 0.0

    async def test_recent_deliveries(self, client: AsyncClient, auth_headers: dict):
        first = await create_delivery(client, auth_headers)
        second = await create_delivery(client, auth_headers)

        response = await client.get("/api/v1/deliveries/recent", params={"limit": 5})

        assert response.status_code == status.HTTP_200_OK
        assert [d["id"] for d in response.json()] == [second["delivery"]["id"], first["delivery"]["id"]]

    async def test_seeded_lowercase_lookup(self, client: AsyncClient, seeded):
        response = await client.get("/api/v1/deliveries/track/trk1001234567")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["tracking_number"] == "TRK1001234567"


@pytest.mark.asyncio
class TestTransactionsAPI:
    """Test the transaction log endpoint"""

    async def test_list_and_filter(self, client: AsyncClient, auth_headers: dict):
        created = await create_delivery(client, auth_headers)
        delivery_id = created["delivery"]["id"]
        await client.patch(
            f"/api/v1/deliveries/{delivery_id}/status",
            json={"status": "Delivered"},
            headers=auth_headers,
        )

        everything = (await client.get("/api/v1/transactions/")).json()
        assert [t["type"] for t in everything] == ["status_update", "create"]

        creates = (await client.get("/api/v1/transactions/", params={"type": "create"})).json()
        assert len(creates) == 1
        assert creates[0]["transaction_hash"] == created["transaction_hash"]
        assert creates[0]["tracking_number"] == created["delivery"]["tracking_number"]

        confirmed = (await client.get("/api/v1/transactions/", params={"status": "confirmed"})).json()
        assert len(confirmed) == 2

        searched = (await client.get(
            "/api/v1/transactions/",
            params={"search": created["delivery"]["tracking_number"].lower()},
        )).json()
        assert len(searched) == 2

    async def test_invalid_type_filter(self, client: AsyncClient):
        response = await client.get("/api/v1/transactions/", params={"type": "transfer"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
class TestChainAPI:
    """Test chain identity endpoints"""

    async def test_identity_starts_disconnected(self, client: AsyncClient):
        response = await client.get("/api/v1/chain/identity")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["provider"] == "mock"
        assert data["connected"] is False
        assert data["address"] is None

    async def test_connect_requires_login(self, client: AsyncClient):
        response = await client.post("/api/v1/chain/connect")
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    async def test_connected_mutations_are_on_chain(self, client: AsyncClient, auth_headers: dict):
        connected = (await client.post("/api/v1/chain/connect", headers=auth_headers)).json()
        assert connected["connected"] is True

        created = await create_delivery(client, auth_headers)
        assert created["on_chain"] is True
        assert created["delivery"]["sender"] == connected["address"]
        assert created["delivery"]["block_number"] is not None

        disconnected = (await client.post("/api/v1/chain/disconnect", headers=auth_headers)).json()
        assert disconnected["connected"] is False

        created = await create_delivery(client, auth_headers)
        assert created["on_chain"] is False
        assert created["delivery"]["sender"] == "demo-address"
