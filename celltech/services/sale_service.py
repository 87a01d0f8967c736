from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session, contains_eager, joinedload

from celltech.models.product import Product
from celltech.models.sale import Sale
from celltech.models.user import User
from celltech.schemas.sale import SaleCreate
from celltech.services.errors import (
    InsufficientStockError,
    ProductNotFoundError,
    UserNotFoundError
)
from celltech.services.statistics_service import WindowParams, compute_window
from celltech.utils.cache import cache_service

logger = logging.getLogger(__name__)


def to_utc_naive(value: Optional[datetime]) -> datetime:
    """Normalize a timestamp to naive UTC; None means now."""
    if value is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SaleService:
    """
    Service class for recording and listing sales.

    STOCK HANDLING STRATEGY:
    ========================
    A sale never reads the product and then writes back a computed stock.
    Instead a single conditional UPDATE decrements stock only while enough
    is available:

        UPDATE products
        SET stock = stock - :qty, sold = sold + :qty, status = (stock - :qty > 0)
        WHERE id = :product_id AND stock >= :qty

    Zero affected rows means the product is missing or short of stock, and
    nothing has been changed. Two concurrent sales of the last unit cannot
    both succeed.

    The stock update and the sale insert share one transaction, so a failed
    insert rolls the stock back as well.
    """

    PRODUCT_CACHE_PREFIX = "product"

    def __init__(self, db: Session):
        self.db = db

    def record_sale(self, sale_data: SaleCreate, seller_id: int) -> Sale:
        """
        Record a sale and take the sold units out of stock.

        Args:
            sale_data: Product, quantity, amount and optional sale date
            seller_id: User credited with the sale

        Returns:
            The persisted sale

        Raises:
            UserNotFoundError: If the seller doesn't exist
            ProductNotFoundError: If the product doesn't exist
            InsufficientStockError: If quantity_sold exceeds the available stock
        """
        product_id = sale_data.product_id
        quantity = sale_data.quantity_sold

        try:
            if not self.db.query(User.id).filter(User.id == seller_id).first():
                raise UserNotFoundError(f"Seller with ID {seller_id} not found")

            result = self.db.execute(
                update(Product)
                .where(Product.id == product_id, Product.stock >= quantity)
                .values(
                    stock=Product.stock - quantity,
                    sold=Product.sold + quantity,
                    status=(Product.stock - quantity) > 0
                )
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                exists = self.db.query(Product.id).filter(Product.id == product_id).first()
                if not exists:
                    raise ProductNotFoundError("Phone not found!")
                raise InsufficientStockError("Quantity sold is more than available stock!")

            sale = Sale(
                product_id=product_id,
                seller_id=seller_id,
                quantity_sold=quantity,
                total_amount=sale_data.total_amount,
                date_sold=to_utc_naive(sale_data.date_sold)
            )
            self.db.add(sale)
            self.db.commit()
            self.db.refresh(sale)

        except (UserNotFoundError, ProductNotFoundError, InsufficientStockError):
            self.db.rollback()
            raise
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error processing sale: {e}")
            raise

        cache_service.delete(self.PRODUCT_CACHE_PREFIX, str(product_id))

        logger.info(f"Sale #{sale.id}: {quantity} unit(s) of product #{product_id} by seller #{seller_id}")
        return sale

    def list_sales(self, params: WindowParams, today=None) -> List[Sale]:
        """
        List sales inside the requested window, newest first.

        Each sale carries its product (None once the product is deleted) and
        its seller; sales whose seller no longer exists are left out.
        """
        window = compute_window(params, today)
        return (
            self.db.query(Sale)
            .join(Sale.seller)
            .options(contains_eager(Sale.seller), joinedload(Sale.product))
            .filter(*window.sale_filters())
            .order_by(Sale.id.desc())
            .all()
        )
