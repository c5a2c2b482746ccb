import logging
from typing import List

from database import KEYS, Database
from events import ChangeBus, Signal
from schemas import Order, SalesStat

logger = logging.getLogger(__name__)

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def day_bucket(order_id: str) -> int:
    # Not calendar based: orders are spread over the week by the last id character.
    return ord(order_id[-1]) % 7


class OrderRepository:
    def __init__(self, db: Database, bus: ChangeBus):
        self.db = db
        self.bus = bus

    async def create_order(self, order: Order) -> Order:
        await self.db.delay(800)
        orders = self.db.read_models(KEYS["ORDERS"], Order)
        self.db.write_models(KEYS["ORDERS"], [order, *orders])
        logger.info("Order %s created for user %s (total %.2f)", order.id, order.user_id, order.total)
        self.bus.publish(Signal.ORDERS_CHANGED)
        return order

    async def list_orders(self) -> List[Order]:
        await self.db.delay(300)
        return self.db.read_models(KEYS["ORDERS"], Order)

    async def orders_for_user(self, user_id: str) -> List[Order]:
        return [o for o in await self.list_orders() if o.user_id == user_id]

    async def vendor_stats(self, vendor_id: str) -> List[SalesStat]:
        stats = [SalesStat(name=day) for day in WEEKDAYS]
        for order in await self.list_orders():
            for item in order.items:
                if item.vendor_id != vendor_id:
                    continue
                bucket = stats[day_bucket(order.id)]
                bucket.sales += item.quantity
                bucket.revenue += item.price * item.quantity
        return stats
