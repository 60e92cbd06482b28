"""
Tests for club notice endpoints.
"""

import pytest
from httpx import AsyncClient


async def post_message(client: AsyncClient, headers: dict, **body) -> dict:
    payload = {"title": "Notice", "content": "Arena news", **body}
    response = await client.post("/api/v1/messages/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_messages_ordered_by_priority(client: AsyncClient, member_headers, admin_headers):
    for priority in ["low", "high", "medium"]:
        await post_message(client, admin_headers, title=priority, priority=priority)

    response = await client.get("/api/v1/messages/", headers=member_headers)

    assert response.status_code == 200
    assert [m["priority"] for m in response.json()] == ["high", "medium", "low"]


@pytest.mark.asyncio
async def test_members_cannot_post(client: AsyncClient, member_headers):
    response = await client.post(
        "/api/v1/messages/", json={"title": "Hi", "content": "Hello"}, headers=member_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_messages_require_token(client: AsyncClient):
    response = await client.get("/api/v1/messages/")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_deactivated_message_hidden_from_members(client: AsyncClient, member_headers, admin_headers):
    message = await post_message(client, admin_headers, priority="high")

    response = await client.patch(
        f"/api/v1/messages/{message['id']}", json={"is_active": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert response.json()["title"] == "Notice"

    member_view = await client.get(
        "/api/v1/messages/", params={"include_inactive": True}, headers=member_headers
    )
    admin_view = await client.get(
        "/api/v1/messages/", params={"include_inactive": True}, headers=admin_headers
    )
    assert member_view.json() == []
    assert [m["id"] for m in admin_view.json()] == [message["id"]]


@pytest.mark.asyncio
async def test_delete_message(client: AsyncClient, admin_headers):
    message = await post_message(client, admin_headers)

    first = await client.delete(f"/api/v1/messages/{message['id']}", headers=admin_headers)
    second = await client.delete(f"/api/v1/messages/{message['id']}", headers=admin_headers)

    assert first.status_code == 204
    assert second.status_code == 404


@pytest.mark.asyncio
async def test_update_unknown_message(client: AsyncClient, admin_headers):
    response = await client.patch(
        "/api/v1/messages/message_missing", json={"title": "New"}, headers=admin_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_empty_title_rejected(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/messages/", json={"title": "", "content": "x"}, headers=admin_headers
    )
    assert response.status_code == 422
