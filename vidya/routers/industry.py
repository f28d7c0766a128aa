from typing import Optional

from fastapi import APIRouter, Query

from vidya.dependencies import StorageDep
from vidya.schemas.insights import IndustryTrendResponse

router = APIRouter()


@router.get("", response_model=list[IndustryTrendResponse])
async def list_industry_trends(storage: StorageDep, sector: Optional[str] = Query(None)):
    return await storage.list_industry_trends(sector or None)
