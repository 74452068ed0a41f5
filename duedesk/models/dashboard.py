# duedesk/models/dashboard.py

from datetime import datetime
from typing import List

from pydantic import BaseModel

from duedesk.models.customers import CollectionSummaryOut, CustomerOut


class DashboardSummaryOut(CollectionSummaryOut):
    recent_customers: List[CustomerOut]
    overdue_customers: List[CustomerOut]


class DashboardSummaryResponse(BaseModel):
    success: bool = True
    data: DashboardSummaryOut


class HealthOut(BaseModel):
    success: bool = True
    status: str
    message: str
    timestamp: datetime
    uptime: float
