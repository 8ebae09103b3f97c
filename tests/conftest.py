from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import AsyncGenerator
from uuid import UUID, uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.models import Collector, FeeClassPricing, FeeType, SchoolClass, Semester, Student
from app.db.session import Base, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory SQLite per test; StaticPool keeps one connection so every session sees it."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@dataclass
class School:
    id: UUID
    class_a: SchoolClass
    class_b: SchoolClass
    alice: Student  # class A
    bob: Student  # class A
    carol: Student  # class B
    teacher: Collector
    admin: Collector
    spring: Semester  # current
    fall: Semester
    tuition: FeeType  # flat 100
    books: FeeType  # flat 50
    lab: FeeType  # class A only, 80 for A


@pytest.fixture()
async def school(db_session: AsyncSession) -> School:
    """One school with two classes, three students, two collectors, two semesters and three fee types."""
    school_id = uuid4()
    class_a = SchoolClass(school_id=school_id, name="Basic 4A", grade="4")
    class_b = SchoolClass(school_id=school_id, name="Basic 4B", grade="4")
    db_session.add_all([class_a, class_b])
    await db_session.flush()

    alice = Student(school_id=school_id, class_id=class_a.id, first_name="Alice", last_name="Mensah", roll_no="A01")
    bob = Student(school_id=school_id, class_id=class_a.id, first_name="Bob", last_name="Owusu", roll_no="A02")
    carol = Student(school_id=school_id, class_id=class_b.id, first_name="Carol", last_name="Boateng", roll_no="B01")
    teacher = Collector(school_id=school_id, name="Kofi Asante", role="teacher")
    admin = Collector(school_id=school_id, name="Ama Darko", role="admin")
    spring = Semester(
        school_id=school_id, name="2025 Spring",
        start_date=date(2025, 1, 6), end_date=date(2025, 5, 30), is_current=True,
    )
    fall = Semester(
        school_id=school_id, name="2024 Fall",
        start_date=date(2024, 9, 2), end_date=date(2024, 12, 20), is_current=False,
    )
    tuition = FeeType(school_id=school_id, name="Tuition", amount=Decimal("100"), due_date=date(2025, 2, 1))
    books = FeeType(school_id=school_id, name="Books", amount=Decimal("50"), due_date=date(2025, 2, 15))
    lab = FeeType(
        school_id=school_id,
        name="Lab",
        amount=Decimal("60"),
        due_date=date(2025, 3, 1),
        is_class_specific=True,
        applicable_classes=[str(class_a.id)],
    )
    lab.class_pricing = [FeeClassPricing(class_id=class_a.id, amount=Decimal("80"))]
    db_session.add_all([alice, bob, carol, teacher, admin, spring, fall, tuition, books, lab])
    await db_session.commit()

    return School(
        id=school_id,
        class_a=class_a,
        class_b=class_b,
        alice=alice,
        bob=bob,
        carol=carol,
        teacher=teacher,
        admin=admin,
        spring=spring,
        fall=fall,
        tuition=tuition,
        books=books,
        lab=lab,
    )
