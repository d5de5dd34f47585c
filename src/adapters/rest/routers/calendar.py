"""Calendar endpoints: month markers and a day's entries."""

from fastapi import APIRouter, Depends, HTTPException

from factory import ServiceFactory
from adapters.rest.dependencies import get_factory
from application.services.calendar import CalendarFilter, month_grid

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/day/{day}")
def get_day(
    day: str,
    filter: CalendarFilter = CalendarFilter.ALL,
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_calendar_service()
    try:
        entries = service.entries_for_day(day, filter)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [c.to_dict() for c in entries]


@router.get("/{year}/{month}")
def get_month(
    year: int,
    month: int,
    factory: ServiceFactory = Depends(get_factory),
):
    """Monday-first grid layout plus markers for each day with entries."""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail="month must be between 1 and 12")
    grid = month_grid(year, month)
    view = factory.create_calendar_service().month_view(year, month)
    return {
        "year": grid.year,
        "month": grid.month,
        "startOffset": grid.start_offset,
        "daysInMonth": grid.days_in_month,
        "prevMonthDays": grid.prev_month_days,
        "days": {day: [m.value for m in markers] for day, markers in view.items()},
    }
