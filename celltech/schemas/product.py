from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import Optional

from celltech.schemas.common import CamelModel


class ProductBase(CamelModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=255, description="Product name (unique)")
    price: float = Field(..., gt=0, description="Product price (must be positive)")
    stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")


class ProductCreate(ProductBase):
    """Schema for creating a new product. Status is derived from stock."""
    sold: int = Field(default=0, ge=0, description="Units already sold")


class ProductUpdate(BaseModel):
    """Schema for updating an existing product. All fields are optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Product name")
    price: Optional[float] = Field(None, gt=0, description="Product price")
    stock: Optional[int] = Field(None, ge=0, description="Available stock")
    sold: Optional[int] = Field(None, ge=0, description="Units sold")


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: int
    sold: int
    status: bool
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class DeleteResult(CamelModel):
    """Number of rows removed by a delete request."""
    deleted_count: int
