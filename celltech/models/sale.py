from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from celltech.database import Base


class Sale(Base):
    """
    Sale model representing a completed, immutable sale transaction.
    
    Attributes:
        id: Unique identifier for the sale
        product_id: Reference to the sold product (kept when the product is deleted)
        seller_id: Reference to the user who made the sale
        quantity_sold: Number of units sold
        total_amount: Amount charged for the sale
        date_sold: When the sale happened (naive UTC)
        created_at: Timestamp when the record was inserted
    """
    __tablename__ = "sales"
    
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quantity_sold = Column(Integer, nullable=False)
    total_amount = Column(Float, nullable=False)
    date_sold = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    __table_args__ = (
        CheckConstraint('quantity_sold > 0', name='check_quantity_sold_positive'),
        CheckConstraint('total_amount >= 0', name='check_total_amount_non_negative'),
    )
    
    product = relationship("Product", backref="sales")
    seller = relationship("User", backref="sales")
    
    def __repr__(self):
        return f"<Sale(id={self.id}, product_id={self.product_id}, quantity_sold={self.quantity_sold})>"
