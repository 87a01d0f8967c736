import datetime

from celltech.schemas.common import CamelModel


class DailySales(CamelModel):
    """Total amount sold on one calendar day."""
    date: datetime.date
    day: str
    total_amount_sold: float
