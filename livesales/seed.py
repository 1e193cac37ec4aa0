"""Create a demo merchant with a handful of products for local development."""
import asyncio
import logging
from decimal import Decimal

import sqlalchemy as sa

from .auth.model import Merchant
from .auth.security import hash_password
from .common.config import Settings, settings as default_settings
from .common.database import Database
from .inventory.model import Product

log = logging.getLogger(__name__)

DEMO_EMAIL = "demo@livesales.dev"
DEMO_PASSWORD = "demo1234"

SAMPLE_PRODUCTS = [
    {"name": "Handloom Saree", "stock_quantity": 12, "price": Decimal("2499.00"), "color": "Maroon"},
    {"name": "Silver Jhumka Earrings", "stock_quantity": 40, "price": Decimal("799.00")},
    {"name": "Cotton Kurta", "stock_quantity": 25, "price": Decimal("1199.00"), "size": "M"},
    {"name": "Ceramic Mug", "stock_quantity": 60, "price": Decimal("349.00"), "color": "White"},
    {"name": "Block Print Dupatta", "stock_quantity": 18, "price": Decimal("899.00")},
]


async def seed_demo(db: Database) -> int:
    """Insert the demo merchant and any missing sample products. Returns how many were added."""
    await db.init()
    async with db.session() as session:
        res = await session.execute(sa.select(Merchant).where(Merchant.email == DEMO_EMAIL))
        merchant = res.scalar_one_or_none()
        if merchant is None:
            merchant = Merchant(
                first_name="Demo",
                last_name="Merchant",
                email=DEMO_EMAIL,
                password=hash_password(DEMO_PASSWORD),
                company_name="Demo Boutique",
            )
            session.add(merchant)
            await session.flush()
        added = 0
        for p in SAMPLE_PRODUCTS:
            # avoid duplicates by name
            res = await session.execute(
                sa.select(Product.id).where(Product.user_id == merchant.id, Product.name == p["name"])
            )
            if res.first():
                continue
            session.add(Product(user_id=merchant.id, **p))
            added += 1
        await session.commit()
    return added


async def amain(settings: Settings = default_settings) -> None:
    logging.basicConfig(level=logging.INFO)
    db = Database(settings.DB_URL)
    try:
        added = await seed_demo(db)
        log.info("Seed complete. Added %s products for %s / %s", added, DEMO_EMAIL, DEMO_PASSWORD)
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(amain())
