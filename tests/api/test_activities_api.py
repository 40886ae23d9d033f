"""API tests for the project activity feed."""

import pytest


@pytest.mark.asyncio
async def test_status_change_shows_in_feed(authenticated_client, test_project):
    created = await authenticated_client.post(
        "/api/tasks", json={"project_id": str(test_project.id), "title": "Fix login bug"}
    )
    task_id = created.json()["data"]["id"]
    await authenticated_client.put(f"/api/tasks/{task_id}", json={"status": "Done"})

    response = await authenticated_client.get(f"/api/activities/project/{test_project.id}")

    assert response.status_code == 200
    feed = response.json()["data"]
    assert [a["type"] for a in feed["activities"]] == ["task_updated", "task_status_changed", "task_created"]
    status_change = feed["activities"][1]
    assert status_change["description"] == 'Alice Owner changed task status from "To Do" to "Done"'
    assert status_change["metadata"] == {"oldStatus": "To Do", "newStatus": "Done"}
    assert status_change["user"]["name"] == "Alice Owner"
    assert feed["total"] == 3
    assert feed["has_next"] is False


@pytest.mark.asyncio
async def test_feed_page_size_is_capped(authenticated_client, test_project):
    response = await authenticated_client.get(
        f"/api/activities/project/{test_project.id}", params={"size": 100}
    )

    assert response.status_code == 200
    assert response.json()["data"]["size"] == 50


@pytest.mark.asyncio
async def test_outsider_cannot_read_feed(client, auth_headers, test_user_2, test_project):
    response = await client.get(
        f"/api/activities/project/{test_project.id}", headers=auth_headers(test_user_2)
    )

    assert response.status_code == 403
