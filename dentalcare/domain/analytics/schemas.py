"""Analytics schemas - response shapes for dashboard statistics"""

from typing import Optional

from pydantic import BaseModel


class DashboardAnalytics(BaseModel):
    period: str
    totalAppointments: int
    completedAppointments: int
    cancelledAppointments: int
    completionRate: float
    totalRevenue: float
    pendingRevenue: float
    averageRevenuePerAppointment: float
    visitTypes: dict[str, int]
    dailyAppointments: dict[str, int]


class TopPatient(BaseModel):
    userId: int
    fullName: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    totalVisits: int
    lastVisit: Optional[str] = None
    totalSpent: float


class PatientAnalytics(BaseModel):
    totalPatients: int
    newPatientsThisMonth: int
    ageGroups: dict[str, int]
    genderDistribution: dict[str, int]
    topPatients: list[TopPatient]
