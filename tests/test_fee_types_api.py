from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_flat_fee_type(client: AsyncClient, school) -> None:
    response = await client.post(
        "/api/v1/fee-types",
        params={"school_id": str(school.id)},
        json={"name": " PTA Levy ", "amount": "25.50", "due_date": "2025-04-01"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "PTA Levy"
    assert Decimal(data["amount"]) == Decimal("25.50")
    assert data["is_active"] is True
    assert data["is_class_specific"] is False
    assert data["applicable_classes"] == []
    assert data["class_prices"] == []


@pytest.mark.asyncio
async def test_create_class_specific_fee_type_with_pricing(client: AsyncClient, school) -> None:
    response = await client.post(
        "/api/v1/fee-types",
        params={"school_id": str(school.id)},
        json={
            "name": "Excursion",
            "amount": "40",
            "is_class_specific": True,
            "applicable_classes": [str(school.class_a.id), str(school.class_b.id)],
            "class_prices": [{"class_id": str(school.class_b.id), "amount": "55"}],
        },
    )
    assert response.status_code == 201
    prices = {p["class_id"]: Decimal(p["amount"]) for p in response.json()["class_prices"]}
    # Class A has no explicit price and falls back to the base amount
    assert prices == {str(school.class_a.id): Decimal("40"), str(school.class_b.id): Decimal("55")}


@pytest.mark.asyncio
async def test_create_class_specific_fee_type_needs_classes(client: AsyncClient, school) -> None:
    response = await client.post(
        "/api/v1/fee-types",
        params={"school_id": str(school.id)},
        json={"name": "Excursion", "amount": "40", "is_class_specific": True},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_fee_type_rejects_foreign_class(client: AsyncClient, school) -> None:
    response = await client.post(
        "/api/v1/fee-types",
        params={"school_id": str(school.id)},
        json={
            "name": "Excursion",
            "amount": "40",
            "is_class_specific": True,
            "applicable_classes": [str(uuid4())],
        },
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_fee_types_active_only(client: AsyncClient, school) -> None:
    params = {"school_id": str(school.id)}
    await client.patch(f"/api/v1/fee-types/{school.books.id}/toggle", params=params)

    everything = (await client.get("/api/v1/fee-types", params=params)).json()
    active = (await client.get("/api/v1/fee-types", params={**params, "active_only": "true"})).json()
    assert {ft["name"] for ft in everything} == {"Tuition", "Books", "Lab"}
    assert {ft["name"] for ft in active} == {"Tuition", "Lab"}


@pytest.mark.asyncio
async def test_toggle_twice_restores_active(client: AsyncClient, school) -> None:
    url = f"/api/v1/fee-types/{school.tuition.id}/toggle"
    params = {"school_id": str(school.id)}
    assert (await client.patch(url, params=params)).json()["is_active"] is False
    assert (await client.patch(url, params=params)).json()["is_active"] is True


@pytest.mark.asyncio
async def test_update_moves_lab_to_class_b(client: AsyncClient, school) -> None:
    response = await client.patch(
        f"/api/v1/fee-types/{school.lab.id}",
        params={"school_id": str(school.id)},
        json={
            "applicable_classes": [str(school.class_b.id)],
            "class_prices": [{"class_id": str(school.class_b.id), "amount": "70"}],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["applicable_classes"] == [str(school.class_b.id)]
    assert [(p["class_id"], Decimal(p["amount"])) for p in data["class_prices"]] == [
        (str(school.class_b.id), Decimal("70"))
    ]

    payment = await client.post(
        "/api/v1/fees/payments",
        params={"school_id": str(school.id)},
        json={
            "student_id": str(school.carol.id),
            "fee_type_id": str(school.lab.id),
            "amount": "70",
            "collector_type": "admin",
            "collector_id": str(school.admin.id),
        },
    )
    assert payment.status_code == 201
    assert payment.json()["status"] == "paid"


@pytest.mark.asyncio
async def test_update_to_flat_clears_pricing(client: AsyncClient, school) -> None:
    response = await client.patch(
        f"/api/v1/fee-types/{school.lab.id}",
        params={"school_id": str(school.id)},
        json={"is_class_specific": False, "amount": "65"},
    )
    data = response.json()
    assert data["is_class_specific"] is False
    assert data["applicable_classes"] == []
    assert data["class_prices"] == []
    assert Decimal(data["amount"]) == Decimal("65")


@pytest.mark.asyncio
async def test_delete_unused_fee_type(client: AsyncClient, school) -> None:
    params = {"school_id": str(school.id)}
    response = await client.delete(f"/api/v1/fee-types/{school.books.id}", params=params)
    assert response.status_code == 204

    names = {ft["name"] for ft in (await client.get("/api/v1/fee-types", params=params)).json()}
    assert "Books" not in names


@pytest.mark.asyncio
async def test_delete_refused_once_paid(client: AsyncClient, school) -> None:
    params = {"school_id": str(school.id)}
    await client.post(
        "/api/v1/fees/payments",
        params=params,
        json={
            "student_id": str(school.alice.id),
            "fee_type_id": str(school.tuition.id),
            "amount": "10",
            "collector_type": "teacher",
            "collector_id": str(school.teacher.id),
        },
    )

    response = await client.delete(f"/api/v1/fee-types/{school.tuition.id}", params=params)
    assert response.status_code == 409
    assert response.json()["detail"] == "Cannot delete fee with existing payments"


@pytest.mark.asyncio
async def test_fee_type_is_school_scoped(client: AsyncClient, school) -> None:
    response = await client.patch(
        f"/api/v1/fee-types/{school.tuition.id}/toggle", params={"school_id": str(uuid4())}
    )
    assert response.status_code == 404
