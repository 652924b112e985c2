"""Company, cost center, client and profession service functions."""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFound
from database.models.companies import Client, Company, CostCenter
from database.models.jobs import Profession

logger = logging.getLogger(__name__)


# ==================== Companies ===================== #

async def list_companies(db: AsyncSession) -> List[Company]:
    result = await db.execute(select(Company).order_by(Company.name))
    return list(result.scalars().all())


async def get_company(db: AsyncSession, company_id: int) -> Company:
    result = await db.execute(select(Company).where(Company.id == company_id))
    company = result.scalar_one_or_none()
    if not company:
        raise NotFound(f"Company {company_id} not found")
    return company


async def create_company(db: AsyncSession, data: Dict[str, Any]) -> Company:
    company = Company(**data)
    db.add(company)
    await db.commit()
    await db.refresh(company)

    logger.info(f"Created company {company.id}")
    return company


async def update_company(
    db: AsyncSession, company_id: int, data: Dict[str, Any]
) -> Company:
    company = await get_company(db, company_id)
    for field, value in data.items():
        setattr(company, field, value)
    await db.commit()
    await db.refresh(company)
    return company


async def delete_company(db: AsyncSession, company_id: int) -> None:
    """
    Delete a company.

    Cost centers, clients and role assignments go with it through the
    foreign key cascades; a company that still owns jobs cannot be deleted.
    """
    await get_company(db, company_id)
    await db.execute(delete(Company).where(Company.id == company_id))
    await db.commit()

    logger.info(f"Deleted company {company_id}")


# ==================== Cost centers ===================== #

async def list_cost_centers(db: AsyncSession, company_id: int) -> List[CostCenter]:
    await get_company(db, company_id)
    result = await db.execute(
        select(CostCenter)
        .where(CostCenter.company_id == company_id)
        .order_by(CostCenter.code)
    )
    return list(result.scalars().all())


async def get_cost_center(
    db: AsyncSession, company_id: int, cost_center_id: int
) -> CostCenter:
    """Cost center looked up within its company; other companies' are NotFound."""
    result = await db.execute(
        select(CostCenter).where(
            CostCenter.id == cost_center_id,
            CostCenter.company_id == company_id,
        )
    )
    cost_center = result.scalar_one_or_none()
    if not cost_center:
        raise NotFound(
            f"Cost center {cost_center_id} not found in company {company_id}"
        )
    return cost_center


async def create_cost_center(
    db: AsyncSession, company_id: int, data: Dict[str, Any]
) -> CostCenter:
    await get_company(db, company_id)
    cost_center = CostCenter(**data, company_id=company_id)
    db.add(cost_center)
    await db.commit()
    await db.refresh(cost_center)

    logger.info(f"Created cost center {cost_center.id} in company {company_id}")
    return cost_center


async def update_cost_center(
    db: AsyncSession,
    company_id: int,
    cost_center_id: int,
    data: Dict[str, Any],
) -> CostCenter:
    cost_center = await get_cost_center(db, company_id, cost_center_id)
    data.pop("company_id", None)
    for field, value in data.items():
        setattr(cost_center, field, value)
    await db.commit()
    await db.refresh(cost_center)
    return cost_center


async def delete_cost_center(
    db: AsyncSession, company_id: int, cost_center_id: int
) -> None:
    cost_center = await get_cost_center(db, company_id, cost_center_id)
    await db.delete(cost_center)
    await db.commit()

    logger.info(f"Deleted cost center {cost_center_id} from company {company_id}")


# ==================== Clients ===================== #

async def list_clients(db: AsyncSession, company_id: int) -> List[Client]:
    """Active clients of a company, by name."""
    await get_company(db, company_id)
    result = await db.execute(
        select(Client)
        .where(Client.company_id == company_id, Client.is_active.is_(True))
        .order_by(Client.name)
    )
    return list(result.scalars().all())


async def get_client(db: AsyncSession, company_id: int, client_id: int) -> Client:
    """Active client looked up within its company."""
    result = await db.execute(
        select(Client).where(
            Client.id == client_id,
            Client.company_id == company_id,
            Client.is_active.is_(True),
        )
    )
    client = result.scalar_one_or_none()
    if not client:
        raise NotFound(f"Client {client_id} not found in company {company_id}")
    return client


async def create_client(
    db: AsyncSession, company_id: int, data: Dict[str, Any]
) -> Client:
    await get_company(db, company_id)
    client = Client(**data, company_id=company_id)
    db.add(client)
    await db.commit()
    await db.refresh(client)

    logger.info(f"Created client {client.id} in company {company_id}")
    return client


async def update_client(
    db: AsyncSession,
    company_id: int,
    client_id: int,
    data: Dict[str, Any],
) -> Client:
    client = await get_client(db, company_id, client_id)
    data.pop("company_id", None)
    for field, value in data.items():
        setattr(client, field, value)
    await db.commit()
    await db.refresh(client)
    return client


async def delete_client(db: AsyncSession, company_id: int, client_id: int) -> None:
    """Soft delete: the row stays so existing jobs keep their client."""
    client = await get_client(db, company_id, client_id)
    client.is_active = False
    await db.commit()

    logger.info(f"Deactivated client {client_id} in company {company_id}")


# ==================== Professions ===================== #

async def list_professions(
    db: AsyncSession, category: Optional[str] = None
) -> List[Profession]:
    """Active professions, optionally filtered by category."""
    query = select(Profession).where(Profession.is_active.is_(True))
    if category:
        query = query.where(Profession.category == category)

    result = await db.execute(query.order_by(Profession.name))
    return list(result.scalars().all())
