import csv
import io
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import sqlalchemy as sa

from .model import Order, OrderStatus, PaymentStatus
from .schemas import OrderRequest
from ..auth.ownership import load_owned, owned_by
from ..common.database import Database
from ..common.db import MAX_INT, fits_int, utcnow
from ..common.errors import InsufficientStock, NotFound
from ..common.metrics import ORDERS_TOTAL
from ..inventory.model import Product
from ..realtime.events import StockEvents

_logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

CSV_HEADERS = [
    "Order ID",
    "Product Name",
    "Customer Name",
    "Phone",
    "Delivery Address",
    "Amount",
    "Order Status",
    "Payment Status",
    "Date",
]


class OrderService:
    def __init__(self, db: Database, events: StockEvents):
        self.db = db
        self.events = events

    async def place_order(self, payload: OrderRequest) -> int:
        """Record a customer order and take its units out of stock.

        The stock check is the conditional UPDATE itself: it only matches
        while enough units remain, so two racing orders cannot both pass.
        The order insert shares its transaction.
        """
        product_id = payload.product_id
        quantity = payload.units
        if not fits_int(product_id):
            ORDERS_TOTAL.labels(result="not_found").inc()
            raise NotFound("Product not found")
        async with self.db.session() as session:
            async with session.begin():
                matched = 0
                # no stock column can hold more than MAX_INT units
                if quantity <= MAX_INT:
                    stmt = (
                        sa.update(Product)
                        .where(Product.id == product_id, Product.stock_quantity >= quantity)
                        .values(stock_quantity=Product.stock_quantity - quantity)
                        .execution_options(synchronize_session=False)
                    )
                    res = await session.execute(stmt)
                    matched = res.rowcount or 0
                if matched == 0:
                    exists = await session.scalar(sa.select(Product.id).where(Product.id == product_id))
                    if exists is None:
                        ORDERS_TOTAL.labels(result="not_found").inc()
                        raise NotFound("Product not found")
                    ORDERS_TOTAL.labels(result="insufficient_stock").inc()
                    _logger.warning("Insufficient stock | product_id=%s qty=%s", product_id, quantity)
                    raise InsufficientStock("Insufficient stock")

                row = (
                    await session.execute(
                        sa.select(Product.price, Product.stock_quantity).where(Product.id == product_id)
                    )
                ).one()
                amount = (Decimal(row.price) * quantity).quantize(CENTS)
                if payload.amount is not None and payload.amount.quantize(CENTS) != amount:
                    _logger.warning(
                        "Client amount ignored | product_id=%s submitted=%s computed=%s",
                        product_id,
                        payload.amount,
                        amount,
                    )
                order = Order(
                    product_id=product_id,
                    customer_name=payload.customer_name,
                    customer_phone=payload.customer_phone,
                    delivery_address=payload.delivery_address,
                    quantity=quantity,
                    amount=amount,
                    order_status=OrderStatus.PENDING.value,
                    # no payment gateway behind this yet
                    payment_status=PaymentStatus.SIMULATED.value,
                )
                session.add(order)
                await session.flush()
                order_id = int(order.id)
                new_stock = int(row.stock_quantity)

        ORDERS_TOTAL.labels(result="placed").inc()
        _logger.info("Order placed | order_id=%s product_id=%s qty=%s stock=%s", order_id, product_id, quantity, new_stock)
        await self.events.publish(product_id, new_stock)
        return order_id

    async def list_orders(self, merchant_id: int, status: Optional[OrderStatus] = None) -> List[Dict[str, Any]]:
        stmt = (
            owned_by(Order, merchant_id)
            .add_columns(Product.name, Product.price, Product.image)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        if status:
            stmt = stmt.where(Order.order_status == status.value)
        async with self.db.session() as session:
            res = await session.execute(stmt)
            rows = res.all()
        items = []
        for order, product_name, price, image in rows:
            item = order.to_dict()
            item["product_name"] = product_name
            item["price"] = float(price) if price is not None else None
            item["image"] = image
            items.append(item)
        return items

    async def update_status(self, merchant_id: int, order_id: int, status: OrderStatus) -> Dict[str, Any]:
        async with self.db.session() as session:
            async with session.begin():
                order = await load_owned(session, Order, order_id, merchant_id)
                order.order_status = status.value
                order.updated_at = utcnow()
            data = order.to_dict()
        _logger.info("Order status updated | order_id=%s status=%s", order_id, status.value)
        return data

    async def stats(self, merchant_id: int) -> Dict[str, Any]:
        async with self.db.session() as session:
            res = await session.execute(owned_by(Order, merchant_id))
            orders = res.scalars().all()
        revenue = sum((o.amount for o in orders), Decimal("0"))
        count = len(orders)
        return {
            "totalOrders": count,
            "pendingOrders": sum(1 for o in orders if o.order_status == OrderStatus.PENDING.value),
            "completedOrders": sum(1 for o in orders if o.order_status == OrderStatus.COMPLETED.value),
            "totalRevenue": float(revenue),
            "avgOrderValue": float((revenue / count).quantize(CENTS)) if count else 0.0,
            "totalCustomers": len({o.customer_phone for o in orders}),
        }

    async def export_csv(self, merchant_id: int) -> str:
        orders = await self.list_orders(merchant_id)
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(CSV_HEADERS)
        for o in orders:
            writer.writerow([
                o["id"],
                o["product_name"],
                o["customer_name"],
                o["customer_phone"],
                o["delivery_address"],
                f"{o['amount']:.2f}",
                o["order_status"],
                o["payment_status"],
                (o["created_at"] or "")[:10],
            ])
        return buf.getvalue()
