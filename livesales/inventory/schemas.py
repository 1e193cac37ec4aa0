from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, Field

from ..common.db import MAX_INT
from ..common.validation import OptionalText, blank_to_none


class ProductRequest(BaseModel):
    """Body of product create and update.

    Updates replace the whole record, so anything left out here is stored
    as its default rather than kept.
    """

    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: OptionalText = None
    size: OptionalText = None
    color: OptionalText = None
    image: OptionalText = None
    stock_quantity: Annotated[Optional[int], BeforeValidator(blank_to_none)] = Field(None, ge=0, le=MAX_INT)

    def fields(self) -> dict:
        data = self.model_dump()
        data["stock_quantity"] = data["stock_quantity"] or 0
        return data
