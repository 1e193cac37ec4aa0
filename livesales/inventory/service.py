import logging
from typing import Any, Dict, List

import sqlalchemy as sa

from .model import Product
from .schemas import ProductRequest
from ..auth.ownership import load_owned, owned_by
from ..common.database import Database
from ..common.db import fits_int, utcnow
from ..common.errors import NotFound
from ..media.service import MediaStore
from ..realtime.events import StockEvents

_logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db: Database, media: MediaStore, events: StockEvents):
        self.db = db
        self.media = media
        self.events = events

    async def create_product(self, merchant_id: int, payload: ProductRequest) -> Dict[str, Any]:
        product = Product(user_id=merchant_id, **payload.fields())
        async with self.db.session() as session:
            session.add(product)
            await session.commit()
        _logger.info("Product created | merchant_id=%s product_id=%s", merchant_id, product.id)
        return product.to_dict()

    async def list_products(self, merchant_id: int) -> List[Dict[str, Any]]:
        stmt = owned_by(Product, merchant_id).order_by(Product.created_at.desc(), Product.id.desc())
        async with self.db.session() as session:
            res = await session.execute(stmt)
            return [p.to_dict() for p in res.scalars().all()]

    async def get_product(self, product_id: int) -> Dict[str, Any]:
        if not fits_int(product_id):
            raise NotFound("Product not found")
        async with self.db.session() as session:
            product = await session.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        return product.to_dict()

    async def update_product(self, merchant_id: int, product_id: int, payload: ProductRequest) -> Dict[str, Any]:
        async with self.db.session() as session:
            async with session.begin():
                product = await load_owned(session, Product, product_id, merchant_id)
                for key, value in payload.fields().items():
                    setattr(product, key, value)
                product.updated_at = utcnow()
            data = product.to_dict()
        _logger.info("Product updated | merchant_id=%s product_id=%s", merchant_id, product_id)
        await self.events.publish(product_id, data["stock_quantity"])
        return data

    async def delete_product(self, merchant_id: int, product_id: int) -> None:
        async with self.db.session() as session:
            async with session.begin():
                product = await load_owned(session, Product, product_id, merchant_id)
                image = product.image
                # orders follow through ON DELETE CASCADE
                await session.execute(sa.delete(Product).where(Product.id == product.id))
        self.media.discard(image)
        _logger.info("Product deleted | merchant_id=%s product_id=%s", merchant_id, product_id)
