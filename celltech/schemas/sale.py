from pydantic import Field, ConfigDict
from datetime import datetime
from typing import Optional

from celltech.schemas.common import CamelModel
from celltech.schemas.product import ProductResponse
from celltech.schemas.user import UserResponse


class SaleCreate(CamelModel):
    """Schema for recording a sale."""
    product_id: int = Field(..., description="ID of the product sold")
    seller_id: Optional[int] = Field(None, description="ID of the seller, defaults to the caller")
    quantity_sold: int = Field(..., ge=1, description="Units sold")
    total_amount: float = Field(..., ge=0, description="Amount charged")
    date_sold: Optional[datetime] = Field(None, description="When the sale happened, defaults to now")


class SaleResponse(CamelModel):
    """Schema for a persisted sale."""
    id: int
    product_id: Optional[int]
    seller_id: int
    quantity_sold: int
    total_amount: float
    date_sold: datetime
    
    model_config = ConfigDict(from_attributes=True)


class SaleDetail(SaleResponse):
    """Sale joined with its product and seller."""
    product: Optional[ProductResponse] = None
    seller: UserResponse
