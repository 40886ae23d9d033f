"""API tests for projects and membership."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_create_and_list(authenticated_client, test_user):
    response = await authenticated_client.post(
        "/api/projects", json={"name": "Website relaunch", "description": "Q3"}
    )

    assert response.status_code == 201
    project = response.json()["data"]
    assert project["owner_id"] == str(test_user.id)
    assert [m["id"] for m in project["members"]] == [str(test_user.id)]
    assert project["color"] == "#3B82F6"

    listed = await authenticated_client.get("/api/projects")
    assert [p["id"] for p in listed.json()["data"]["projects"]] == [project["id"]]


@pytest.mark.asyncio
async def test_create_requires_name(authenticated_client):
    response = await authenticated_client.post("/api/projects", json={"name": "  "})

    assert response.status_code == 400
    assert response.json()["message"] == "Project name is required"


@pytest.mark.asyncio
async def test_membership_grants_access(client, auth_headers, test_user, test_user_2, test_project):
    bob = auth_headers(test_user_2)

    denied = await client.get(f"/api/projects/{test_project.id}", headers=bob)
    assert denied.status_code == 403

    added = await client.post(
        f"/api/projects/{test_project.id}/members",
        json={"user_id": str(test_user_2.id)},
        headers=auth_headers(test_user),
    )
    assert added.status_code == 200
    assert {m["id"] for m in added.json()["data"]["members"]} == {str(test_user.id), str(test_user_2.id)}

    allowed = await client.get(f"/api/projects/{test_project.id}", headers=bob)
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_duplicate_member(authenticated_client, test_user_2, test_project):
    url = f"/api/projects/{test_project.id}/members"
    await authenticated_client.post(url, json={"user_id": str(test_user_2.id)})

    response = await authenticated_client.post(url, json={"user_id": str(test_user_2.id)})

    assert response.status_code == 400
    assert response.json()["message"] == "User is already a member of this project"
    project = await authenticated_client.get(f"/api/projects/{test_project.id}")
    assert len(project.json()["data"]["members"]) == 2


@pytest.mark.asyncio
async def test_add_unknown_user(authenticated_client, test_project):
    response = await authenticated_client.post(
        f"/api/projects/{test_project.id}/members", json={"user_id": str(uuid.uuid4())}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_owner_cannot_be_removed(client, auth_headers, admin_user, test_user, test_project):
    response = await client.delete(
        f"/api/projects/{test_project.id}/members/{test_user.id}", headers=auth_headers(admin_user)
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Cannot remove project owner"


@pytest.mark.asyncio
async def test_remove_member(authenticated_client, test_user_2, test_project):
    await authenticated_client.post(
        f"/api/projects/{test_project.id}/members", json={"user_id": str(test_user_2.id)}
    )

    response = await authenticated_client.delete(f"/api/projects/{test_project.id}/members/{test_user_2.id}")

    assert response.status_code == 200
    assert len(response.json()["data"]["members"]) == 1


@pytest.mark.asyncio
async def test_update_project(authenticated_client, test_project):
    response = await authenticated_client.put(
        f"/api/projects/{test_project.id}", json={"color": "#EF4444"}
    )

    assert response.status_code == 200
    assert response.json()["data"]["color"] == "#EF4444"
    assert response.json()["data"]["name"] == test_project.name


@pytest.mark.asyncio
async def test_only_owner_deletes(client, auth_headers, test_user, test_user_2, test_project):
    await client.post(
        f"/api/projects/{test_project.id}/members",
        json={"user_id": str(test_user_2.id)},
        headers=auth_headers(test_user),
    )

    denied = await client.delete(f"/api/projects/{test_project.id}", headers=auth_headers(test_user_2))
    assert denied.status_code == 403

    deleted = await client.delete(f"/api/projects/{test_project.id}", headers=auth_headers(test_user))
    assert deleted.status_code == 200

    gone = await client.get(f"/api/projects/{test_project.id}", headers=auth_headers(test_user))
    assert gone.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("project_id", ["not-an-id", "123", str(uuid.uuid4())])
async def test_unknown_project_is_404(authenticated_client, project_id):
    response = await authenticated_client.get(f"/api/projects/{project_id}")

    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"
