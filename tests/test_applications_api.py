"""Application API tests — apply, review, withdraw."""

import uuid

import pytest

from conftest import ADMIN_ID, ALICE_ID, BOB_ID, auth
from jobhub.db.models import APPLICATION_STATUSES


async def _apply(client, job, who=ALICE_ID, **extra):
    return await client.post(
        "/api/applications",
        json={"jobId": str(job.id), **extra},
        headers=auth(who),
    )


@pytest.mark.asyncio
async def test_apply_to_job(client, job):
    r = await _apply(client, job, cover_letter="Hire me")
    assert r.status_code == 201
    data = r.json()
    assert data["job_id"] == str(job.id)
    assert data["status"] == "pending"
    assert data["cover_letter"] == "Hire me"


@pytest.mark.asyncio
async def test_apply_twice_conflicts(client, job):
    assert (await _apply(client, job)).status_code == 201
    r = await _apply(client, job)
    assert r.status_code == 409

    r = await client.get("/api/applications/me", headers=auth(ALICE_ID))
    assert len(r.json()) == 1


@pytest.mark.asyncio
async def test_apply_unknown_job(client):
    r = await client.post(
        "/api/applications", json={"jobId": str(uuid.uuid4())}, headers=auth(ALICE_ID)
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_apply_requires_auth(client, job):
    r = await client.post("/api/applications", json={"jobId": str(job.id)})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_my_applications_include_job(client, job):
    await _apply(client, job)
    r = await client.get("/api/applications/me", headers=auth(ALICE_ID))
    assert r.status_code == 200
    [application] = r.json()
    assert application["job"]["title"] == "Backend Engineer"
    assert application["job"]["company"] == "Acme"


@pytest.mark.asyncio
async def test_job_applicants_admin_only(client, job):
    await _apply(client, job, ALICE_ID)
    await _apply(client, job, BOB_ID)

    r = await client.get(f"/api/applications/job/{job.id}", headers=auth(ALICE_ID))
    assert r.status_code == 403

    r = await client.get(f"/api/applications/job/{job.id}", headers=auth(ADMIN_ID))
    assert r.status_code == 200
    assert {a["user"]["name"] for a in r.json()} == {"Alice Smith", "bobby"}


@pytest.mark.asyncio
async def test_review_status(client, job):
    application = (await _apply(client, job)).json()

    r = await client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "accepted"},
        headers=auth(ALICE_ID),
    )
    assert r.status_code == 403

    r = await client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "accepted"},
        headers=auth(ADMIN_ID),
    )
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"


@pytest.mark.asyncio
async def test_review_status_rejects_unknown_value(client, job):
    application = (await _apply(client, job)).json()
    r = await client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": "hired!"},
        headers=auth(ADMIN_ID),
    )
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_withdraw(client, job):
    application = (await _apply(client, job)).json()

    r = await client.delete(f"/api/applications/{application['id']}", headers=auth(BOB_ID))
    assert r.status_code == 403

    r = await client.delete(f"/api/applications/{application['id']}", headers=auth(ALICE_ID))
    assert r.status_code == 200

    r = await client.delete(f"/api/applications/{application['id']}", headers=auth(ALICE_ID))
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("status", APPLICATION_STATUSES)
async def test_review_accepts_every_known_status(client, job, status):
    application = (await _apply(client, job)).json()
    r = await client.put(
        f"/api/applications/{application['id']}/status",
        json={"status": status},
        headers=auth(ADMIN_ID),
    )
    assert r.status_code == 200
    assert r.json()["status"] == status
