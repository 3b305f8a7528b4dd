"""Reports endpoints for the admin dashboard.

GET /reports/revenue?start_date=...&end_date=...
GET /reports/occupancy?start_date=...&end_date=...

Both dates are required (YYYY-MM-DD). end_date before start_date → 400.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from hotelbooking.api.deps import get_reporting_engine
from hotelbooking.domain.reports import ReportingEngine

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/revenue")
def get_revenue_report(
    start_date: date = Query(..., description="Window start (YYYY-MM-DD, inclusive)"),
    end_date: date = Query(..., description="Window end (YYYY-MM-DD, inclusive)"),
    engine: ReportingEngine = Depends(get_reporting_engine),
) -> dict:
    return engine.revenue_report(start_date, end_date).to_dict()


@router.get("/occupancy")
def get_occupancy_report(
    start_date: date = Query(..., description="Window start (YYYY-MM-DD)"),
    end_date: date = Query(..., description="Window end (YYYY-MM-DD)"),
    engine: ReportingEngine = Depends(get_reporting_engine),
) -> dict:
    return engine.occupancy_report(start_date, end_date).to_dict()
