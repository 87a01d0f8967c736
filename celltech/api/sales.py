from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from celltech.api.deps import get_current_user, get_window_params
from celltech.database import get_db
from celltech.models.user import User
from celltech.schemas.common import ApiResponse
from celltech.schemas.sale import SaleCreate, SaleDetail, SaleResponse
from celltech.services.errors import (
    InsufficientStockError,
    InvalidReferenceError,
    ProductNotFoundError,
    UserNotFoundError
)
from celltech.services.sale_service import SaleService
from celltech.services.statistics_service import WindowParams

router = APIRouter(tags=["Sales"])


@router.get(
    "/sales",
    response_model=ApiResponse[List[SaleDetail]],
    summary="List sales",
    description="""
    List sales inside a trailing window, newest first, joined with product and
    seller details (the seller's password is never included).
    
    Window priority: `days` > `currentYear` > `currentMonth` > `currentWeek` > 1 day.
    """
)
def list_sales(
    params: WindowParams = Depends(get_window_params),
    db: Session = Depends(get_db)
):
    try:
        sales = SaleService(db).list_sales(params)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return ApiResponse(
        message="Data Found!",
        content=[SaleDetail.model_validate(s) for s in sales]
    )


@router.post(
    "/sale",
    response_model=ApiResponse[SaleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record a sale",
    description="""
    Sell units of a product.
    
    **Stock handling:**
    Stock is decremented with a single conditional update, so concurrent
    sales can never oversell. The stock change and the sale record are
    committed together.
    """
)
def create_sale(
    sale_data: SaleCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record a sale.
    
    - **productId**: ID of the product sold (required)
    - **quantitySold**: Units sold, at least 1 (required)
    - **totalAmount**: Amount charged (required)
    - **sellerId**: Seller ID (optional, defaults to the authenticated user)
    - **dateSold**: ISO 8601 timestamp (optional, defaults to now)
    """
    seller_id = sale_data.seller_id or current_user.id

    try:
        sale = SaleService(db).record_sale(sale_data, seller_id)
    except (ProductNotFoundError, UserNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="Sale added successfully!",
        content=SaleResponse.model_validate(sale)
    )
