from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints

from .model import OrderStatus
from ..common.validation import blank_to_none

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class OrderRequest(BaseModel):
    product_id: int
    customer_name: RequiredText
    customer_phone: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]
    delivery_address: RequiredText
    quantity: Annotated[Optional[int], BeforeValidator(blank_to_none)] = Field(None, ge=1)
    # informational only; the charged amount is recomputed from the product price
    amount: Annotated[Optional[Decimal], BeforeValidator(blank_to_none)] = None

    @property
    def units(self) -> int:
        return self.quantity or 1


def normalise_status(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


StatusField = Annotated[OrderStatus, BeforeValidator(normalise_status)]


class OrderStatusRequest(BaseModel):
    """Status sent by the merchant, or the dashboard's status filter."""

    order_status: StatusField
