import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from assistant import ShoppingAssistant
from config import Settings
from database import Database, MemoryStore
from events import ChangeBus
from main import create_app
from schemas import CartItem, Order, Product, User, UserRole
from session import Marketplace


@pytest.fixture
def anyio_backend():
    return "asyncio"


class RecordingModel:
    """Chat model double: records the messages it was sent and answers with a fixed reply."""

    def __init__(self, reply="Sure thing!"):
        self.reply = reply
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        return AIMessage(content=self.reply)


class BrokenModel:
    async def ainvoke(self, messages):
        raise RuntimeError("API key not valid")


class Recorder:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def db(store):
    return Database(store, latency_scale=0)


@pytest.fixture
def bus():
    return ChangeBus()


@pytest.fixture
def market(db, bus):
    return Marketplace(db, bus)


@pytest.fixture
def model():
    return RecordingModel()


@pytest.fixture
def client(market, model):
    settings = Settings(latency_scale=0, payment_delay_ms=0)
    app = create_app(settings=settings, market=market, assistant=ShoppingAssistant(model))
    with TestClient(app) as c:
        yield c


def make_product(id="px", vendor_id="vx", price=10.0, **kw) -> Product:
    fields = dict(
        id=id,
        name=kw.pop("name", f"Product {id}"),
        price=price,
        category=kw.pop("category", "Gadgets"),
        vendor_id=vendor_id,
        vendor_name=kw.pop("vendor_name", "Gadget Co"),
    )
    fields.update(kw)
    return Product(**fields)


def make_item(product: Product, quantity: int) -> CartItem:
    return CartItem.model_validate({**product.model_dump(), "quantity": quantity})


def make_order(id="ORD-1", user_id="u-1", items=None, total=0.0) -> Order:
    return Order(id=id, user_id=user_id, items=items or [], total=total, date="10/18/2026")


def make_user(id="u-1", role=UserRole.BUYER, name="Sam", **kw) -> User:
    return User(id=id, name=name, email=kw.pop("email", f"{name.lower()}@example.com"), role=role, **kw)
