"""Ownership checks shared by every product and order mutation.

Products belong to a merchant through ``products.user_id``; orders belong
to whoever owns the product they reference. A resource that exists but is
owned by someone else is reported the same way as one that does not exist.
"""
from typing import Type, TypeVar, Union

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.db import fits_int
from ..common.errors import NotFoundOrUnauthorized
from ..inventory.model import Product
from ..orders.model import Order

Owned = TypeVar("Owned", Product, Order)

_NOT_FOUND_MESSAGES = {
    Product: "Product not found or unauthorized",
    Order: "Order not found or unauthorized",
}


def owned_by(model: Union[Type[Product], Type[Order]], merchant_id: int) -> sa.Select:
    """SELECT over ``model`` restricted to rows the merchant owns."""
    if model is Product:
        return sa.select(Product).where(Product.user_id == merchant_id)
    if model is Order:
        return sa.select(Order).join(Product, Order.product_id == Product.id).where(Product.user_id == merchant_id)
    raise TypeError(f"no ownership rule for {model!r}")


async def load_owned(session: AsyncSession, model: Type[Owned], resource_id: int, merchant_id: int) -> Owned:
    if not fits_int(resource_id):
        raise NotFoundOrUnauthorized(_NOT_FOUND_MESSAGES[model])
    stmt = owned_by(model, merchant_id).where(model.id == resource_id)
    res = await session.execute(stmt)
    obj = res.scalar_one_or_none()
    if obj is None:
        raise NotFoundOrUnauthorized(_NOT_FOUND_MESSAGES[model])
    return obj
