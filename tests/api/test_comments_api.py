"""API tests for task comments."""

import pytest


async def post_comment(client, task, content="Ship it on Friday", headers=None):
    return await client.post(
        "/api/comments", json={"task_id": str(task.id), "content": content}, headers=headers
    )


@pytest.mark.asyncio
async def test_comment_lifecycle(authenticated_client, test_task):
    created = await post_comment(authenticated_client, test_task)
    assert created.status_code == 201
    comment = created.json()["data"]
    assert comment["author"]["name"] == "Alice Owner"

    listed = await authenticated_client.get(f"/api/comments/task/{test_task.id}")
    assert [c["id"] for c in listed.json()["data"]["comments"]] == [comment["id"]]

    edited = await authenticated_client.put(f"/api/comments/{comment['id']}", json={"content": "Monday then"})
    assert edited.json()["data"]["content"] == "Monday then"

    deleted = await authenticated_client.delete(f"/api/comments/{comment['id']}")
    assert deleted.status_code == 200
    listed = await authenticated_client.get(f"/api/comments/task/{test_task.id}")
    assert listed.json()["data"]["comments"] == []


@pytest.mark.asyncio
async def test_empty_comment_rejected(authenticated_client, test_task):
    response = await post_comment(authenticated_client, test_task, content="   ")

    assert response.status_code == 400
    assert response.json()["message"] == "Comment content is required"


@pytest.mark.asyncio
async def test_only_author_edits(client, auth_headers, test_user, test_user_2, test_project, test_task):
    await client.post(
        f"/api/projects/{test_project.id}/members",
        json={"user_id": str(test_user_2.id)},
        headers=auth_headers(test_user),
    )
    comment = (await post_comment(client, test_task, headers=auth_headers(test_user_2))).json()["data"]

    response = await client.put(
        f"/api/comments/{comment['id']}", json={"content": "rewritten"}, headers=auth_headers(test_user)
    )
    assert response.status_code == 403

    # The project owner may still delete it
    response = await client.delete(f"/api/comments/{comment['id']}", headers=auth_headers(test_user))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_outsider_cannot_read_comments(client, auth_headers, test_user_2, test_task):
    response = await client.get(f"/api/comments/task/{test_task.id}", headers=auth_headers(test_user_2))

    assert response.status_code == 403
