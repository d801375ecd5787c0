"""
Item API tests - catalog entries and character-owned instances.
"""

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_and_get_item(client: AsyncClient):
    response = await client.post("/api/v1/items", json={"name": "Iron Sword"})
    assert response.status_code == 201
    item = response.json()
    assert item["name"] == "Iron Sword"
    uuid.UUID(item["id"])

    response = await client.get(f"/api/v1/items/{item['id']}")
    assert response.status_code == 200
    assert response.json() == item


@pytest.mark.asyncio
async def test_list_items_empty(client: AsyncClient):
    response = await client.get("/api/v1/items")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_create_item_empty_and_duplicate_name(client: AsyncClient, market):
    await market.item("Shield")

    empty = await client.post("/api/v1/items", json={"name": ""})
    duplicate = await client.post("/api/v1/items", json={"name": "Shield"})

    assert empty.status_code == 422
    assert empty.json()["error"]["code"] == "empty_name"
    assert duplicate.status_code == 409


@pytest.mark.asyncio
async def test_get_unknown_item(client: AsyncClient):
    response = await client.get(f"/api/v1/items/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "item_not_found"


@pytest.mark.asyncio
async def test_malformed_item_id(client: AsyncClient):
    response = await client.get("/api/v1/items/not-a-uuid")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_acquire_and_list_instances(client: AsyncClient, market):
    await market.character("alice")
    item = await market.item("Bow")

    response = await client.post("/api/v1/characters/alice/items", json={"item_id": str(item.id)})
    assert response.status_code == 201
    instance = response.json()
    assert instance["item_name"] == "Bow"
    assert instance["owner_name"] == "alice"
    assert instance["item_id"] == str(item.id)

    listed = await client.get("/api/v1/characters/alice/items")
    assert [i["id"] for i in listed.json()] == [instance["id"]]

    single = await client.get(f"/api/v1/characters/alice/items/{instance['id']}")
    assert single.status_code == 200


@pytest.mark.asyncio
async def test_acquire_unknown_item(client: AsyncClient, market):
    await market.character("alice")

    response = await client.post("/api/v1/characters/alice/items", json={"item_id": str(uuid.uuid4())})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "item_not_found"


@pytest.mark.asyncio
async def test_instance_hidden_under_other_character(client: AsyncClient, market):
    await market.character("alice")
    await market.character("bob")
    instance = await market.instance("alice", await market.item("Bow"))

    response = await client.get(f"/api/v1/characters/bob/items/{instance.id}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "item_instance_not_found"


@pytest.mark.asyncio
async def test_instance_of_unknown_character(client: AsyncClient, market):
    response = await client.get(f"/api/v1/characters/ghost/items/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "character_not_found"


@pytest.mark.asyncio
async def test_delete_instance(client: AsyncClient, market):
    await market.character("alice")
    instance = await market.instance("alice", await market.item("Bow"))

    response = await client.delete(f"/api/v1/characters/alice/items/{instance.id}")

    assert response.status_code == 200
    assert (await client.get("/api/v1/characters/alice/items")).json() == []


@pytest.mark.asyncio
async def test_item_auctions_filtered_by_status(client: AsyncClient, market):
    auction = await market.listing("alice", gold=0, price=7)

    response = await client.get(f"/api/v1/items/{auction.auctioned_item_id}/auctions", params={"status": "active"})
    assert [a["id"] for a in response.json()] == [str(auction.id)]

    response = await client.get(f"/api/v1/items/{auction.auctioned_item_id}/auctions", params={"status": "sold"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_delete_item(client: AsyncClient, market):
    item = await market.item("Bow")

    response = await client.delete(f"/api/v1/items/{item.id}")

    assert response.status_code == 200
    assert (await client.get(f"/api/v1/items/{item.id}")).status_code == 404
