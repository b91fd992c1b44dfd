"""Repository helpers used by the cascade steps"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from src.domain.enums import PermitStatus
from src.infrastructure.persistence.models import Hunter, Permit, Tax
from src.infrastructure.persistence.repositories import Repositories


@pytest.fixture
def repos(test_db):
    return Repositories(test_db)


async def add_hunter(repos, id_number: str) -> Hunter:
    return await repos.hunters.create(
        Hunter(
            last_name="Fouda",
            first_name="Marc",
            date_of_birth=date(1990, 1, 1),
            id_number=id_number,
            address="Ngaoundere",
            profession="Driver",
            category="resident",
        )
    )


async def add_permit(repos, hunter_id: int, number: str, expiry: date, status="active") -> Permit:
    return await repos.permits.create(
        Permit(
            permit_number=number,
            hunter_id=hunter_id,
            issue_date=expiry - timedelta(days=365),
            expiry_date=expiry,
            status=status,
            price=Decimal("25000"),
        )
    )


@pytest.mark.asyncio
async def test_versioned_update_applies_once(repos):
    """
    GIVEN a hunter at version 1
    WHEN two updates both expect version 1
    THEN only the first applies and the version becomes 2
    """
    hunter = await add_hunter(repos, "CM-1")

    assert await repos.hunters.set_active(hunter.id, False, expected_version=1) == 1
    assert await repos.hunters.set_active(hunter.id, True, expected_version=1) == 0

    await repos.db.refresh(hunter)
    assert (hunter.version, hunter.is_active) == (2, False)


@pytest.mark.asyncio
async def test_versioned_delete_requires_current_version(repos):
    hunter = await add_hunter(repos, "CM-2")

    assert await repos.hunters.delete_by_id(hunter.id, expected_version=7) == 0
    assert await repos.hunters.delete_by_id(hunter.id, expected_version=1) == 1
    assert await repos.hunters.exists(hunter.id) is False


@pytest.mark.asyncio
async def test_permit_state_queries(repos):
    today = date(2025, 3, 1)
    hunter = await add_hunter(repos, "CM-3")
    current = await add_permit(repos, hunter.id, "P-1", today + timedelta(days=30))
    lapsed = await add_permit(repos, hunter.id, "P-2", today - timedelta(days=1))
    marked = await add_permit(repos, hunter.id, "P-3", today + timedelta(days=30), status="expired")
    await add_permit(repos, hunter.id, "P-4", today - timedelta(days=1), status="suspended")

    active = await repos.permits.get_active_by_hunter(hunter.id, today)
    expired = await repos.permits.get_expired_by_hunter(hunter.id, today)

    assert [p.id for p in active] == [current.id]
    assert [p.id for p in expired] == [lapsed.id, marked.id]


@pytest.mark.asyncio
async def test_set_status_with_no_ids_is_a_no_op(repos):
    assert await repos.permits.set_status([], PermitStatus.SUSPENDED) == 0


@pytest.mark.asyncio
async def test_tax_counts_by_permit(repos):
    hunter = await add_hunter(repos, "CM-4")
    taxed = await add_permit(repos, hunter.id, "P-10", date(2026, 1, 1))
    free = await add_permit(repos, hunter.id, "P-11", date(2026, 1, 1))
    for n in range(2):
        await repos.taxes.create(
            Tax(
                tax_number=f"T-{n}",
                hunter_id=hunter.id,
                permit_id=taxed.id,
                amount=Decimal("1000"),
                issue_date=date(2025, 3, 1),
                animal_type="phacochere",
                quantity=1,
                location="Faro",
            )
        )

    assert await repos.taxes.count_by_permit(taxed.id) == 2
    assert await repos.taxes.delete_by_hunter(hunter.id) == 2
