from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from celltech.api.deps import get_current_user, get_window_params
from celltech.database import get_db
from celltech.schemas.common import ApiResponse
from celltech.schemas.statistics import DailySales
from celltech.services.errors import InvalidReferenceError
from celltech.services.statistics_service import StatisticsService, WindowParams

router = APIRouter(prefix="/statistics", tags=["Statistics"], dependencies=[Depends(get_current_user)])


@router.get(
    "/sales",
    response_model=ApiResponse[List[DailySales]],
    summary="Daily sales totals",
    description="""
    Total amount sold per day over a trailing window, today first.
    
    Every day of the window is present; days without sales report 0.
    Window priority: `days` > `currentYear` > `currentMonth` > `currentWeek` > 1 day.
    Pass `userId` to restrict the totals to one seller.
    """
)
def sales_statistics(
    params: WindowParams = Depends(get_window_params),
    db: Session = Depends(get_db)
):
    try:
        _, series = StatisticsService(db).daily_sales(params)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ApiResponse(message="Data Found!", content=series)
