from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Student


@pytest.mark.asyncio
async def test_create_semester_as_current_unsets_others(client: AsyncClient, school) -> None:
    params = {"school_id": str(school.id)}
    response = await client.post(
        "/api/v1/semesters",
        params=params,
        json={"name": "2025 Fall", "start_date": "2025-09-01", "end_date": "2025-12-19", "is_current": True},
    )
    assert response.status_code == 201

    semesters = (await client.get("/api/v1/semesters", params=params)).json()
    assert [s["name"] for s in semesters] == ["2025 Fall", "2025 Spring", "2024 Fall"]
    assert [s["name"] for s in semesters if s["is_current"]] == ["2025 Fall"]

    current = (await client.get("/api/v1/semesters/current", params=params)).json()
    assert current["name"] == "2025 Fall"


@pytest.mark.asyncio
async def test_create_semester_rejects_duplicate_name(client: AsyncClient, school) -> None:
    response = await client.post(
        "/api/v1/semesters",
        params={"school_id": str(school.id)},
        json={"name": "2025 Spring", "start_date": "2025-01-06", "end_date": "2025-05-30"},
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_semester_rejects_reversed_dates(client: AsyncClient, school) -> None:
    response = await client.post(
        "/api/v1/semesters",
        params={"school_id": str(school.id)},
        json={"name": "Broken", "start_date": "2025-05-30", "end_date": "2025-01-06"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_set_current_switches_default_period(client: AsyncClient, school) -> None:
    params = {"school_id": str(school.id)}
    response = await client.post(f"/api/v1/semesters/{school.fall.id}/set-current", params=params)
    assert response.status_code == 200
    assert response.json()["is_current"] is True

    payment = await client.post(
        "/api/v1/fees/payments",
        params=params,
        json={
            "student_id": str(school.bob.id),
            "fee_type_id": str(school.books.id),
            "amount": "50",
            "collector_type": "teacher",
            "collector_id": str(school.teacher.id),
        },
    )
    assert payment.json()["period"] == "2024 Fall"


@pytest.mark.asyncio
async def test_set_current_unknown_semester(client: AsyncClient, school) -> None:
    response = await client.post(
        f"/api/v1/semesters/{uuid4()}/set-current", params={"school_id": str(school.id)}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_no_current_semester_requires_explicit_period(
    client: AsyncClient, db_session: AsyncSession
) -> None:
    school_id = uuid4()
    student = Student(school_id=school_id, first_name="Yaw", last_name="Mensah")
    db_session.add(student)
    await db_session.commit()

    params = {"school_id": str(school_id)}
    assert (await client.get("/api/v1/semesters/current", params=params)).status_code == 404

    url = f"/api/v1/fees/students/{student.id}/status"
    assert (await client.get(url, params=params)).status_code == 400

    explicit = await client.get(url, params={**params, "period": "Term 1"})
    assert explicit.status_code == 200
    # No fee types and no records
    assert explicit.json()["status"] == "none"
