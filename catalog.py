import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from database import KEYS, Database
from events import ChangeBus, Signal
from schemas import Product, Review

logger = logging.getLogger(__name__)


def round_rating(value: float) -> float:
    # Half-up on the exact binary value, so 4.25 -> 4.3
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def average_rating(reviews: List[Review]) -> float:
    return round_rating(sum(r.rating for r in reviews) / len(reviews))


class CatalogRepository:
    def __init__(self, db: Database, bus: ChangeBus):
        self.db = db
        self.bus = bus

    async def list_products(self) -> List[Product]:
        await self.db.delay(300)
        return self.db.read_models(KEYS["PRODUCTS"], Product)

    async def get_product(self, product_id: str) -> Optional[Product]:
        products = await self.list_products()
        return next((p for p in products if p.id == product_id), None)

    async def add_product(self, product: Product) -> Product:
        await self.db.delay(500)
        products = await self.list_products()
        self.db.write_models(KEYS["PRODUCTS"], [product, *products])
        logger.info("Product %s listed by vendor %s", product.id, product.vendor_id)
        self.bus.publish(Signal.PRODUCTS_CHANGED)
        return product

    async def update_product(self, product: Product):
        await self.db.delay(400)
        products = await self.list_products()
        for index, p in enumerate(products):
            if p.id == product.id:
                products[index] = product
                self.db.write_models(KEYS["PRODUCTS"], products)
                self.bus.publish(Signal.PRODUCTS_CHANGED)
                return

    async def delete_product(self, product_id: str):
        await self.db.delay(400)
        products = await self.list_products()
        self.db.write_models(KEYS["PRODUCTS"], [p for p in products if p.id != product_id])
        logger.info("Product %s removed", product_id)
        self.bus.publish(Signal.PRODUCTS_CHANGED)

    async def add_review(self, product_id: str, review: Review):
        """Prepend a review and recompute the product's aggregate rating.

        Goes through ``update_product``, so the whole catalog is re-read and
        rewritten; a concurrent review on the same product can be lost.
        """
        await self.db.delay(400)
        product = await self.get_product(product_id)
        if product is None:
            return
        reviews = [review, *product.reviews]
        product.reviews = reviews
        product.rating = average_rating(reviews)
        product.reviews_count = len(reviews)
        await self.update_product(product)
