from fastapi import APIRouter

from vidya.dependencies import StorageDep, SurveyCompletedPrincipal
from vidya.schemas.insights import DashboardAnalytics

router = APIRouter()


@router.get("/analytics", response_model=DashboardAnalytics)
async def dashboard_analytics(principal: SurveyCompletedPrincipal, storage: StorageDep):
    return DashboardAnalytics(**await storage.dashboard_analytics(principal.id))
