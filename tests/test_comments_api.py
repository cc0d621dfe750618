"""Comment API tests — create, list, delete with 404-before-403."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from conftest import ADMIN_ID, ALICE_ID, BOB_ID, auth
from jobhub.db.models import Comment, User


async def _comment(client, job, who=ALICE_ID, content="Great role!"):
    r = await client.post(
        "/api/comments",
        json={"jobId": str(job.id), "content": content},
        headers=auth(who),
    )
    assert r.status_code == 201
    return r.json()


@pytest.mark.asyncio
async def test_create_comment_snapshots_author(client, job):
    comment = await _comment(client, job)
    assert comment["content"] == "Great role!"
    assert comment["job_id"] == str(job.id)
    assert comment["author_name"] == "Alice Smith"
    assert comment["author_avatar"] == "https://img.clerk.com/alice.png"


@pytest.mark.asyncio
async def test_create_comment_requires_auth(client, job):
    r = await client.post("/api/comments", json={"jobId": str(job.id), "content": "hi"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_create_comment_unknown_job(client):
    r = await client.post(
        "/api/comments",
        json={"jobId": str(uuid.uuid4()), "content": "hello?"},
        headers=auth(ALICE_ID),
    )
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "x" * 501])
async def test_create_comment_content_length(client, job, content):
    r = await client.post(
        "/api/comments",
        json={"jobId": str(job.id), "content": content},
        headers=auth(ALICE_ID),
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_comments_newest_first(client, db_session, job):
    now = datetime.now(timezone.utc)
    author = User(external_id="user_seed", name="Seed", role="user")
    db_session.add(author)
    await db_session.flush()
    for i, age in enumerate([30, 10, 20]):
        db_session.add(Comment(
            content=f"c{i}",
            author_id=author.id,
            job_id=job.id,
            author_name="Seed",
            created_at=now - timedelta(minutes=age),
        ))
    await db_session.commit()

    r = await client.get(f"/api/comments/job/{job.id}")
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert [c["content"] for c in body["data"]] == ["c1", "c2", "c0"]


@pytest.mark.asyncio
async def test_list_comments_empty_job(client, job):
    r = await client.get(f"/api/comments/job/{job.id}")
    assert r.json() == {"data": [], "count": 0}


@pytest.mark.asyncio
async def test_author_deletes_own_comment(client, job):
    comment = await _comment(client, job)

    r = await client.delete(f"/api/comments/{comment['id']}", headers=auth(ALICE_ID))
    assert r.status_code == 200
    assert r.json() == {"deleted": True}

    r = await client.delete(f"/api/comments/{comment['id']}", headers=auth(ALICE_ID))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_other_user_cannot_delete(client, job):
    comment = await _comment(client, job)

    r = await client.delete(f"/api/comments/{comment['id']}", headers=auth(BOB_ID))
    assert r.status_code == 403

    r = await client.get(f"/api/comments/job/{job.id}")
    assert r.json()["count"] == 1


@pytest.mark.asyncio
async def test_admin_deletes_any_comment(client, job):
    comment = await _comment(client, job)
    r = await client.delete(f"/api/comments/{comment['id']}", headers=auth(ADMIN_ID))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_missing_comment_is_404_even_for_non_owner(client):
    r = await client.delete(f"/api/comments/{uuid.uuid4()}", headers=auth(BOB_ID))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_comment_requires_auth(client, job):
    comment = await _comment(client, job)
    r = await client.delete(f"/api/comments/{comment['id']}")
    assert r.status_code == 401
