from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from celltech.api.deps import get_current_user
from celltech.database import get_db
from celltech.schemas.common import ApiResponse
from celltech.schemas.product import (
    DeleteResult,
    ProductCreate,
    ProductResponse,
    ProductUpdate
)
from celltech.services.errors import DuplicateError, InvalidReferenceError, ProductNotFoundError
from celltech.services.product_service import ProductService
from celltech.utils.references import parse_reference_list

router = APIRouter(tags=["Products"], dependencies=[Depends(get_current_user)])


@router.get(
    "/products",
    response_model=ApiResponse[List[ProductResponse]],
    summary="List all products",
    description="Get all products, newest first, with optional name search."
)
def list_products(
    search: Optional[str] = Query(None, description="Search by product name"),
    db: Session = Depends(get_db)
):
    """Get the product catalog."""
    products = ProductService(db).get_all(search)
    return ApiResponse(
        message="Data Found!",
        content=[ProductResponse.model_validate(p) for p in products]
    )


@router.get(
    "/product/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Get product by ID",
    description="Get a single product. Results are cached in Redis."
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    product_data = ProductService(db).get_by_id_cached(product_id)

    if not product_data:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} not found"
        )

    return ApiResponse(message="Data Found!", content=product_data)


@router.post(
    "/product",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product"
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.
    
    - **name**: Product name, must be unique (required)
    - **price**: Product price, must be positive (required)
    - **stock**: Initial stock quantity, must be non-negative (required)
    - **sold**: Units already sold (optional, default 0)
    
    ``status`` is set to whether the product is in stock.
    """
    try:
        product = ProductService(db).create(product_data)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="Product Added successfully!",
        content=ProductResponse.model_validate(product)
    )


@router.patch(
    "/product/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Update a product",
    description="Partial update. Only provided fields will be changed."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    try:
        product = ProductService(db).update(product_id, product_data)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="Product Updated successfully!",
        content=ProductResponse.model_validate(product)
    )


@router.delete(
    "/product/{product_id}",
    response_model=ApiResponse[DeleteResult],
    summary="Delete a product"
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    try:
        deleted = ProductService(db).delete(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return ApiResponse(
        message="Product Deleted successfully!",
        content=DeleteResult(deleted_count=deleted)
    )


@router.delete(
    "/products",
    response_model=ApiResponse[DeleteResult],
    summary="Delete several products",
    description="Delete every product listed in `ids` (comma separated). Unknown IDs are ignored."
)
def delete_products(
    ids: str = Query(..., description="Comma separated product IDs, e.g. 1,2,3"),
    db: Session = Depends(get_db)
):
    try:
        product_ids = parse_reference_list(ids)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    deleted = ProductService(db).delete_many(product_ids)
    return ApiResponse(
        message="Products Deleted successfully!",
        content=DeleteResult(deleted_count=deleted)
    )
