"""
Company, cost center and client endpoints.

Company-level permissions are checked against the ``company_id`` path
parameter.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_admin_user
from api.schemas.companies import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    CompanyCreate,
    CompanyResponse,
    CompanyUpdate,
    CostCenterCreate,
    CostCenterResponse,
    CostCenterUpdate,
)
from api.services import companies as company_service
from core.middleware.authentication import get_current_user
from core.middleware.authorization import require_permission
from database.engine import get_db
from database.models.permissions import Permission
from database.models.users import User

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=List[CompanyResponse], summary="List Companies")
async def list_companies(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.list_companies(db)


@router.post(
    "",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Company",
    description="Create a company. System administrators only.",
)
async def create_company(
    payload: CompanyCreate,
    current_user: User = Depends(require_admin_user),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.create_company(db, payload.model_dump())


@router.get("/{company_id}", response_model=CompanyResponse, summary="Get Company")
async def get_company(
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.get_company(db, company_id)


@router.put(
    "/{company_id}",
    response_model=CompanyResponse,
    summary="Update Company",
    description="Update a company. Requires edit_companies.",
)
async def update_company(
    payload: CompanyUpdate,
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(require_permission(Permission.EDIT_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.update_company(
        db, company_id, payload.model_dump(exclude_unset=True, exclude_none=True)
    )


@router.delete(
    "/{company_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Company",
    description="Delete a company. Requires delete_companies.",
)
async def delete_company(
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(require_permission(Permission.DELETE_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    await company_service.delete_company(db, company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== Cost centers ===================== #

@router.get(
    "/{company_id}/cost-centers",
    response_model=List[CostCenterResponse],
    summary="List Cost Centers",
    description="List a company's cost centers. Requires view_companies.",
)
async def list_cost_centers(
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(require_permission(Permission.VIEW_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.list_cost_centers(db, company_id)


@router.post(
    "/{company_id}/cost-centers",
    response_model=CostCenterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Cost Center",
    description="Add a cost center to a company. Requires manage_cost_centers.",
)
async def create_cost_center(
    payload: CostCenterCreate,
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(require_permission(Permission.MANAGE_COST_CENTERS)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.create_cost_center(db, company_id, payload.model_dump())


@router.put(
    "/{company_id}/cost-centers/{cost_center_id}",
    response_model=CostCenterResponse,
    summary="Update Cost Center",
    description="Update a cost center. Requires manage_cost_centers.",
)
async def update_cost_center(
    payload: CostCenterUpdate,
    company_id: int = Path(..., description="Company ID"),
    cost_center_id: int = Path(..., description="Cost center ID"),
    current_user: User = Depends(require_permission(Permission.MANAGE_COST_CENTERS)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.update_cost_center(
        db,
        company_id,
        cost_center_id,
        payload.model_dump(exclude_unset=True, exclude_none=True),
    )


@router.delete(
    "/{company_id}/cost-centers/{cost_center_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Cost Center",
    description="Remove a cost center. Requires manage_cost_centers.",
)
async def delete_cost_center(
    company_id: int = Path(..., description="Company ID"),
    cost_center_id: int = Path(..., description="Cost center ID"),
    current_user: User = Depends(require_permission(Permission.MANAGE_COST_CENTERS)),
    db: AsyncSession = Depends(get_db),
):
    await company_service.delete_cost_center(db, company_id, cost_center_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== Clients ===================== #

@router.get(
    "/{company_id}/clients",
    response_model=List[ClientResponse],
    summary="List Clients",
    description="List a company's active clients. Requires view_companies.",
)
async def list_clients(
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(require_permission(Permission.VIEW_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.list_clients(db, company_id)


@router.post(
    "/{company_id}/clients",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Client",
    description="Add a client to a company. Requires edit_companies.",
)
async def create_client(
    payload: ClientCreate,
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(require_permission(Permission.EDIT_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.create_client(db, company_id, payload.model_dump())


@router.put(
    "/{company_id}/clients/{client_id}",
    response_model=ClientResponse,
    summary="Update Client",
    description="Update a client. Requires edit_companies.",
)
async def update_client(
    payload: ClientUpdate,
    company_id: int = Path(..., description="Company ID"),
    client_id: int = Path(..., description="Client ID"),
    current_user: User = Depends(require_permission(Permission.EDIT_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.update_client(
        db,
        company_id,
        client_id,
        payload.model_dump(exclude_unset=True, exclude_none=True),
    )


@router.delete(
    "/{company_id}/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Deactivate Client",
    description=(
        "Deactivate a client. Jobs that reference it keep the reference. "
        "Requires edit_companies."
    ),
)
async def delete_client(
    company_id: int = Path(..., description="Company ID"),
    client_id: int = Path(..., description="Client ID"),
    current_user: User = Depends(require_permission(Permission.EDIT_COMPANIES)),
    db: AsyncSession = Depends(get_db),
):
    await company_service.delete_client(db, company_id, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
