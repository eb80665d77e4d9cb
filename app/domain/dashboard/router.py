"""Dashboard router - admin overview"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from .schemas import DashboardOverview, DashboardResponse
from .service import DashboardService

# Mounted under /api/admin
router = APIRouter(prefix="/dashboard", tags=["Admin: Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("/overview", response_model=DashboardResponse)
async def get_overview(
    _admin: User = Depends(get_current_admin),
    service: DashboardService = Depends(get_dashboard_service),
):
    return DashboardResponse(data=DashboardOverview(**service.get_overview()))
