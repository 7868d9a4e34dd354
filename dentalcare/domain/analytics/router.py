"""Analytics router - FastAPI endpoints for doctor dashboards"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from .schemas import DashboardAnalytics, PatientAnalytics
from .service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    """Dependency injection for AnalyticsService"""
    return AnalyticsService(db)


@router.get("/dashboard", response_model=Optional[DashboardAnalytics])
async def get_dashboard_analytics(
    period: Literal["week", "month", "year"] = Query("month"),
    auth: AuthContext = Depends(get_auth_context),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Appointment and revenue statistics; null for non-doctors"""
    return service.get_dashboard(period, auth)


@router.get("/patients", response_model=Optional[PatientAnalytics])
async def get_patient_analytics(
    auth: AuthContext = Depends(get_auth_context),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return service.get_patient_analytics(auth)
