# duedesk/api/dashboard.py

from fastapi import APIRouter, Depends

from duedesk.api.customers import record_to_customer, summary_fields
from duedesk.core.summary import overdue_customers, recent_customers, summarize
from duedesk.db.store import CustomerStore, get_store
from duedesk.models.dashboard import DashboardSummaryOut, DashboardSummaryResponse

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
def dashboard_summary(
    store: CustomerStore = Depends(get_store),
) -> DashboardSummaryResponse:
    """
    Collection totals over every customer, plus the five newest customers
    and those with nothing paid on a non-zero balance.
    """
    records = store.list_all()
    summary = summarize(records)

    return DashboardSummaryResponse(
        data=DashboardSummaryOut(
            **summary_fields(summary),
            recent_customers=[record_to_customer(r) for r in recent_customers(records)],
            overdue_customers=[record_to_customer(r) for r in overdue_customers(records)],
        )
    )
