"""Profession catalogue endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.companies import ProfessionResponse
from api.services import companies as company_service
from core.middleware.authentication import get_current_user
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/professions", tags=["professions"])


@router.get(
    "",
    response_model=List[ProfessionResponse],
    summary="List Professions",
    description="List active professions that new jobs can reference.",
)
async def list_professions(
    category: Optional[str] = Query(None, description="Filter by category"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await company_service.list_professions(db, category=category)
