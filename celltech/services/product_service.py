from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List
import logging

from celltech.models.product import Product
from celltech.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from celltech.services.errors import DuplicateError, ProductNotFoundError
from celltech.utils.cache import cache_service

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations.

    This service handles:
    - Creating new products (names are unique)
    - Reading products (single product reads go through Redis)
    - Partial updates
    - Single and bulk deletes

    Every write keeps ``status == (stock > 0)``.
    """

    CACHE_PREFIX = "product"

    def __init__(self, db: Session):
        self.db = db

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            product_data: Product creation data

        Returns:
            Created product instance

        Raises:
            DuplicateError: If a product with the same name exists
        """
        product = Product(
            name=product_data.name,
            price=product_data.price,
            stock=product_data.stock,
            sold=product_data.sold,
            status=product_data.stock > 0
        )
        self.db.add(product)
        self._commit_unique(product_data.name)
        self.db.refresh(product)
        logger.info(f"Product #{product.id} '{product.name}' created")
        return product

    def get_by_id(self, product_id: int) -> Optional[Product]:
        """Get a product row by ID straight from the database."""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_id_cached(self, product_id: int) -> Optional[dict]:
        """
        Get product details from cache or database.
        Returns a dictionary (suitable for API response).

        Args:
            product_id: Product ID to look up

        Returns:
            Product data as dictionary or None
        """
        cached = cache_service.get(self.CACHE_PREFIX, str(product_id))
        if cached:
            return cached

        product = self.get_by_id(product_id)
        if not product:
            return None

        product_dict = ProductResponse.model_validate(product).model_dump(mode="json")
        cache_service.set(self.CACHE_PREFIX, str(product_id), product_dict)
        return product_dict

    def get_all(self, search: str = None) -> List[Product]:
        """
        List products, newest first.

        Args:
            search: Optional case-insensitive fragment of the product name
        """
        query = self.db.query(Product)

        if search:
            query = query.filter(Product.name.ilike(f"%{search}%"))

        return query.order_by(Product.id.desc()).all()

    def update(self, product_id: int, product_data: ProductUpdate) -> Product:
        """
        Update an existing product.

        Only fields present in the request are changed; ``status`` is
        re-derived from the resulting stock.

        Raises:
            ProductNotFoundError: If the product doesn't exist
            DuplicateError: If the new name is already taken
        """
        product = self.get_by_id(product_id)

        if not product:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")

        update_data = product_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(product, field, value)
        product.status = product.stock > 0

        self._commit_unique(product.name)
        self.db.refresh(product)

        self._invalidate_cache(product_id)

        return product

    def delete(self, product_id: int) -> int:
        """
        Delete a product.

        Returns:
            Number of deleted products (always 1)

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        deleted = self.delete_many([product_id])
        if not deleted:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        return deleted

    def delete_many(self, product_ids: List[int]) -> int:
        """
        Delete every product whose ID is listed; unknown IDs are ignored.

        Returns:
            Number of deleted products
        """
        deleted = (
            self.db.query(Product)
            .filter(Product.id.in_(product_ids))
            .delete(synchronize_session=False)
        )
        self.db.commit()

        cache_service.delete_many(self.CACHE_PREFIX, product_ids)

        logger.info(f"Deleted {deleted} product(s) out of {len(product_ids)} requested")
        return deleted

    def _commit_unique(self, name: str) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(f"Product name '{name}' already exists!")

    def _invalidate_cache(self, product_id: int) -> None:
        """Invalidate cache for a product."""
        cache_service.delete(self.CACHE_PREFIX, str(product_id))
