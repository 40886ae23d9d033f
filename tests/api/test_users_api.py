"""API tests for the user directory and admin role management."""

import pytest


@pytest.mark.asyncio
async def test_search_users(authenticated_client, test_user_2):
    response = await authenticated_client.get("/api/users", params={"search": "bob"})

    assert response.status_code == 200
    assert [u["email"] for u in response.json()["data"]["users"]] == ["bob@example.com"]


@pytest.mark.asyncio
async def test_get_user(authenticated_client, test_user_2):
    response = await authenticated_client.get(f"/api/users/{test_user_2.id}")

    assert response.json()["data"]["name"] == "Bob Outsider"


@pytest.mark.asyncio
async def test_admin_list_requires_admin(client, auth_headers, test_user, admin_user):
    denied = await client.get("/api/users/admin/all", headers=auth_headers(test_user))
    assert denied.status_code == 403
    assert denied.json()["message"] == "Access denied. Required role: admin"

    allowed = await client.get("/api/users/admin/all", headers=auth_headers(admin_user))
    assert allowed.status_code == 200
    assert len(allowed.json()["data"]["users"]) == 2


@pytest.mark.asyncio
async def test_admin_changes_role(client, auth_headers, test_user, admin_user):
    response = await client.put(
        f"/api/users/{test_user.id}/role", json={"role": "admin"}, headers=auth_headers(admin_user)
    )

    assert response.status_code == 200
    assert response.json()["data"]["role"] == "admin"


@pytest.mark.asyncio
async def test_admin_cannot_demote_self(client, auth_headers, admin_user):
    response = await client.put(
        f"/api/users/{admin_user.id}/role", json={"role": "user"}, headers=auth_headers(admin_user)
    )

    assert response.status_code == 400
    assert response.json()["message"] == "You cannot remove your own admin role"

    me = await client.get("/api/auth/me", headers=auth_headers(admin_user))
    assert me.json()["data"]["role"] == "admin"


@pytest.mark.asyncio
async def test_invalid_role(client, auth_headers, test_user, admin_user):
    response = await client.put(
        f"/api/users/{test_user.id}/role", json={"role": "superuser"}, headers=auth_headers(admin_user)
    )

    assert response.status_code == 400
    assert response.json()["message"] == 'Invalid role. Must be "user" or "admin"'
