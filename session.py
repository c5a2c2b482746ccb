import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Set

from catalog import CatalogRepository
from checkout import CheckoutSummary, grand_total, summarize
from database import Database
from events import ChangeBus
from identity import IdentityRepository
from navigation import NavigationResult, View, landing_view, navigate
from orders import OrderRepository
from schemas import Address, CartItem, Order, Product, User, UserRole

logger = logging.getLogger(__name__)

DEMO_VENDOR_EMAIL = "alex.developer@example.com"
PAYMENT_METHOD = "Card ending 0000"


class AuthenticationRequired(Exception):
    pass


class EmptyCart(Exception):
    pass


def _now_ms() -> int:
    return int(time.time() * 1000)


def _avatar(seed: str) -> str:
    return f"https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def _parse_age(age) -> Optional[int]:
    try:
        return int(age) or None
    except (TypeError, ValueError):
        return None


@dataclass
class Marketplace:
    """Everything that lives for the whole process: storage, bus, repositories."""

    db: Database
    bus: ChangeBus = field(default_factory=ChangeBus)

    def __post_init__(self):
        self.catalog = CatalogRepository(self.db, self.bus)
        self.orders = OrderRepository(self.db, self.bus)
        self.identity = IdentityRepository(self.db, self.bus)


class ShopperSession:
    """One visitor's state: who is signed in, their cart and wishlist.

    The cart is never persisted; checkout turns it into an Order snapshot.
    """

    def __init__(self, market: Marketplace, user: Optional[User] = None):
        self.market = market
        self.user = user
        self.cart: List[CartItem] = []
        self.wishlist: Set[str] = set()
        self.view = View.HOME

    # --- Auth ---

    async def login(self, email: str, role: UserRole) -> User:
        if email == DEMO_VENDOR_EMAIL and role == UserRole.VENDOR:
            user_id = "v1"
        elif role == UserRole.ADMIN:
            user_id = f"admin-{_now_ms()}"
        else:
            user_id = f"u-{_now_ms()}"
        user = User(
            id=user_id,
            name=email.split("@")[0],
            email=email,
            role=role,
            avatar_url=_avatar(email),
        )
        return await self._sign_in(user)

    async def register(
        self,
        name: str,
        email: str,
        role: UserRole,
        age=None,
        gender: Optional[str] = None,
        address: Optional[Address] = None,
    ) -> User:
        user = User(
            id=f"u-{_now_ms()}",
            name=name,
            email=email,
            role=role,
            avatar_url=_avatar(name),
            age=_parse_age(age),
            gender=gender,
            address=address,
        )
        return await self._sign_in(user)

    async def _sign_in(self, user: User) -> User:
        self.user = await self.market.identity.upsert_user(user)
        self.view = landing_view(user)
        logger.info("Signed in %s as %s", user.id, user.role.value)
        return self.user

    async def update_profile(self, user: User) -> User:
        self.user = await self.market.identity.upsert_user(user)
        return self.user

    def logout(self):
        self.user = None
        self.cart = []
        self.wishlist = set()
        self.view = View.HOME
        self.market.identity.clear_current_user()

    # --- Cart ---

    def add_to_cart(self, product: Product) -> CartItem:
        for item in self.cart:
            if item.id == product.id:
                item.quantity += 1
                return item
        item = CartItem.model_validate({**product.model_dump(), "quantity": 1})
        self.cart.append(item)
        return item

    def remove_from_cart(self, product_id: str):
        self.cart = [i for i in self.cart if i.id != product_id]

    def update_quantity(self, product_id: str, delta: int):
        for item in self.cart:
            if item.id == product_id:
                item.quantity = max(1, item.quantity + delta)

    def cart_summary(self) -> CheckoutSummary:
        return summarize(self.cart)

    # --- Wishlist ---

    def toggle_wishlist(self, product_id: str) -> bool:
        if self.user is None:
            raise AuthenticationRequired("Sign in to use the wishlist")
        if product_id in self.wishlist:
            self.wishlist.discard(product_id)
            return False
        self.wishlist.add(product_id)
        return True

    # --- Navigation ---

    def go(self, requested: View) -> NavigationResult:
        result = navigate(self.user, requested, self.view)
        self.view = result.view
        return result

    # --- Checkout ---

    async def checkout(self, payment_delay_ms: int = 2000) -> Order:
        if self.user is None:
            raise AuthenticationRequired("Please sign in to complete your purchase.")
        if not self.cart:
            raise EmptyCart("Cart is empty")

        # Payment always succeeds after a fixed wait
        await asyncio.sleep(payment_delay_ms * self.market.db.latency_scale / 1000)

        order = Order(
            id=f"ORD-{_now_ms()}",
            user_id=self.user.id,
            items=[i.model_copy(deep=True) for i in self.cart],
            total=grand_total(self.cart),
            date=time.strftime("%m/%d/%Y"),
            status="processing",
            shipping_address=self.user.address or Address(),
            payment_method=PAYMENT_METHOD,
        )
        await self.market.orders.create_order(order)
        self.cart = []
        return order
