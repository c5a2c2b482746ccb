import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from assistant import ShoppingAssistant, build_chat_model
from browse import SORT_OPTIONS, admin_overview, categories, filter_products, storefront_summary
from config import Settings
from database import MongoStore, connect
from events import LiveCollection, Signal
from identity import InvalidResetCode
from navigation import View
from schemas import Address, ChatTurn, Order, Product, Review, User, UserRole
from session import AuthenticationRequired, EmptyCart, Marketplace, ShopperSession
from seed_data import CATEGORIES

logger = logging.getLogger(__name__)

router = APIRouter()


# Helpers
def get_market(request: Request) -> Marketplace:
    return request.app.state.market


def get_session(session_id: str, request: Request) -> ShopperSession:
    session = request.app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def open_session(session_id: str, request: Request) -> ShopperSession:
    sessions: Dict[str, ShopperSession] = request.app.state.sessions
    if session_id not in sessions:
        sessions[session_id] = ShopperSession(request.app.state.market)
    return sessions[session_id]


async def get_catalog(request: Request) -> List[Product]:
    # The cached view only hears writes made through this process
    if request.app.state.settings.use_mongo:
        return await request.app.state.market.catalog.list_products()
    return await request.app.state.catalog_view.items()


def _now_ms() -> int:
    return int(time.time() * 1000)


@router.get("/")
def read_root():
    return {"message": "IntelliVend Marketplace API running"}


@router.get("/test")
def test_database(request: Request):
    market: Marketplace = request.app.state.market
    store = market.db.store
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_name": None,
        "store": type(store).__name__,
        "collections": [],
    }
    try:
        if isinstance(store, MongoStore):
            response["database_name"] = store.name
        response["collections"] = store.keys()[:20]
        response["database"] = "✅ Connected & Working"
    except Exception as e:
        response["database"] = f"⚠️ Connected but Error: {str(e)[:80]}"
    return response


# Products
class CreateProductPayload(BaseModel):
    vendor_id: str
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., ge=0)
    original_price: Optional[float] = Field(None, ge=0)
    category: str = "General"
    sub_category: Optional[str] = None
    images: List[str] = Field(default_factory=list)


@router.get("/api/products", response_model=List[Product])
async def list_products(
    request: Request,
    q: str = "",
    category: str = "All",
    sort: str = "featured",
    deals: bool = False,
):
    if sort not in SORT_OPTIONS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {', '.join(SORT_OPTIONS)}")
    products = await get_catalog(request)
    return filter_products(products, query=q, category=category, sort_by=sort, deals_only=deals)


@router.get("/api/categories")
async def list_categories(request: Request):
    products = await get_catalog(request)
    return {"categories": categories(products), "catalog": CATEGORIES}


@router.get("/api/products/{product_id}", response_model=Product)
async def get_product(product_id: str, market: Marketplace = Depends(get_market)):
    product = await market.catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/api/products", response_model=Product, status_code=201)
async def create_product(payload: CreateProductPayload, market: Marketplace = Depends(get_market)):
    vendor = await market.identity.get_user(payload.vendor_id)
    if not vendor or vendor.role != UserRole.VENDOR:
        raise HTTPException(status_code=404, detail="Vendor not found")
    product = Product(
        id=f"p-{_now_ms()}",
        name=payload.name,
        description=payload.description,
        price=payload.price,
        original_price=payload.original_price or None,
        category=payload.category or "General",
        sub_category=payload.sub_category,
        image_url=payload.images[0] if payload.images else "",
        images=payload.images,
        vendor_id=vendor.id,
        vendor_name=vendor.name,
        rating=0,
        reviews_count=0,
        reviews=[],
    )
    return await market.catalog.add_product(product)


@router.put("/api/products/{product_id}")
async def update_product(product_id: str, product: Product, market: Marketplace = Depends(get_market)):
    product.id = product_id
    await market.catalog.update_product(product)
    return {"ok": True}


@router.delete("/api/products/{product_id}")
async def delete_product(product_id: str, market: Marketplace = Depends(get_market)):
    await market.catalog.delete_product(product_id)
    return {"ok": True}


# Reviews
class CreateReview(BaseModel):
    user_id: str
    user_name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


@router.post("/api/products/{product_id}/reviews", response_model=Review, status_code=201)
async def create_review(product_id: str, payload: CreateReview, market: Marketplace = Depends(get_market)):
    review = Review(
        id=str(_now_ms()),
        user_id=payload.user_id,
        user_name=payload.user_name,
        rating=payload.rating,
        comment=payload.comment,
        date=time.strftime("%m/%d/%Y"),
    )
    await market.catalog.add_review(product_id, review)
    return review


# Vendors
@router.get("/api/vendors/{vendor_id}")
async def get_storefront(vendor_id: str, request: Request, market: Marketplace = Depends(get_market)):
    vendor = await market.identity.get_user(vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found.")
    products = [p for p in await get_catalog(request) if p.vendor_id == vendor_id]
    return {"vendor": vendor, "products": products, "summary": storefront_summary(products)}


@router.get("/api/vendors/{vendor_id}/stats")
async def get_vendor_stats(vendor_id: str, market: Marketplace = Depends(get_market)):
    return await market.orders.vendor_stats(vendor_id)


# Orders
@router.get("/api/orders", response_model=List[Order])
async def list_orders(user_id: Optional[str] = None, market: Marketplace = Depends(get_market)):
    if user_id:
        return await market.orders.orders_for_user(user_id)
    return await market.orders.list_orders()


@router.post("/api/orders", response_model=Order, status_code=201)
async def create_order(order: Order, market: Marketplace = Depends(get_market)):
    return await market.orders.create_order(order)


# Users
@router.get("/api/users", response_model=List[User])
async def list_users(market: Marketplace = Depends(get_market)):
    return await market.identity.list_users()


@router.get("/api/users/{user_id}", response_model=User)
async def get_user(user_id: str, market: Marketplace = Depends(get_market)):
    user = await market.identity.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/api/users/{user_id}", response_model=User)
async def update_user(user_id: str, user: User, market: Marketplace = Depends(get_market)):
    user.id = user_id
    return await market.identity.upsert_user(user)


@router.delete("/api/users/{user_id}")
async def delete_user(user_id: str, market: Marketplace = Depends(get_market)):
    await market.identity.delete_user(user_id)
    return {"ok": True}


@router.post("/api/users/{user_id}/verify", response_model=User)
async def toggle_verified(user_id: str, market: Marketplace = Depends(get_market)):
    user = await market.identity.toggle_verified(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# Admin
@router.get("/api/admin/overview")
async def get_admin_overview(market: Marketplace = Depends(get_market)):
    users = await market.identity.list_users()
    products = await market.catalog.list_products()
    orders = await market.orders.list_orders()
    return admin_overview(users, products, orders)


# Auth
class LoginPayload(BaseModel):
    session_id: str
    email: str
    role: UserRole = UserRole.BUYER


class RegisterPayload(BaseModel):
    session_id: str
    name: str
    email: str
    role: UserRole = UserRole.BUYER
    age: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[Address] = None


class SessionPayload(BaseModel):
    session_id: str


class ResetRequestPayload(BaseModel):
    email: str


class ResetConfirmPayload(BaseModel):
    code: str
    password: str


@router.post("/api/auth/login")
async def login(payload: LoginPayload, request: Request):
    session = open_session(payload.session_id, request)
    user = await session.login(payload.email, payload.role)
    return {"user": user, "view": session.view.value}


@router.post("/api/auth/register")
async def register(payload: RegisterPayload, request: Request):
    session = open_session(payload.session_id, request)
    user = await session.register(
        payload.name, payload.email, payload.role,
        age=payload.age, gender=payload.gender, address=payload.address,
    )
    return {"user": user, "view": session.view.value}


@router.post("/api/auth/logout")
def logout(payload: SessionPayload, request: Request):
    session = request.app.state.sessions.pop(payload.session_id, None)
    if session is not None:
        session.logout()
    return {"ok": True}


@router.post("/api/auth/password-reset/request")
async def request_password_reset(payload: ResetRequestPayload, market: Marketplace = Depends(get_market)):
    code = await market.identity.request_reset(payload.email)
    return {"code": code}


@router.post("/api/auth/password-reset/confirm")
async def confirm_password_reset(payload: ResetConfirmPayload, market: Marketplace = Depends(get_market)):
    try:
        await market.identity.reset_password(payload.code, payload.password)
    except InvalidResetCode as e:
        raise HTTPException(status_code=401, detail=str(e))
    return {"ok": True}


# Sessions: cart, wishlist, checkout, navigation
class CartAddPayload(BaseModel):
    product_id: str


class QuantityPayload(BaseModel):
    delta: int


def _cart_view(session: ShopperSession) -> dict:
    summary = session.cart_summary()
    return {
        "items": session.cart,
        "subtotal": summary.subtotal,
        "tax": summary.tax,
        "shipping": summary.shipping,
        "total": summary.total,
    }


@router.get("/api/sessions/{session_id}/cart")
def get_cart(session: ShopperSession = Depends(get_session)):
    return _cart_view(session)


@router.post("/api/sessions/{session_id}/cart")
async def add_to_cart(session_id: str, payload: CartAddPayload, request: Request):
    product = await request.app.state.market.catalog.get_product(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    session = open_session(session_id, request)
    session.add_to_cart(product)
    return _cart_view(session)


@router.patch("/api/sessions/{session_id}/cart/{product_id}")
def update_cart_quantity(product_id: str, payload: QuantityPayload, session: ShopperSession = Depends(get_session)):
    session.update_quantity(product_id, payload.delta)
    return _cart_view(session)


@router.delete("/api/sessions/{session_id}/cart/{product_id}")
def remove_from_cart(product_id: str, session: ShopperSession = Depends(get_session)):
    session.remove_from_cart(product_id)
    return _cart_view(session)


@router.post("/api/sessions/{session_id}/wishlist/{product_id}")
def toggle_wishlist(product_id: str, session: ShopperSession = Depends(get_session)):
    try:
        added = session.toggle_wishlist(product_id)
    except AuthenticationRequired as e:
        raise HTTPException(status_code=401, detail=str(e))
    return {"wishlisted": added, "wishlist": sorted(session.wishlist)}


@router.post("/api/sessions/{session_id}/checkout", response_model=Order, status_code=201)
async def checkout(request: Request, session: ShopperSession = Depends(get_session)):
    settings: Settings = request.app.state.settings
    try:
        return await session.checkout(payment_delay_ms=settings.payment_delay_ms)
    except AuthenticationRequired as e:
        raise HTTPException(status_code=401, detail=str(e))
    except EmptyCart as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/api/sessions/{session_id}/navigate/{view}")
def navigate_to(view: View, session: ShopperSession = Depends(get_session)):
    result = session.go(view)
    return {"view": result.view.value, "auth_required": result.auth_required, "reset_filters": result.reset_filters}


# AI
class DescriptionPayload(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    keywords: str = "high quality, premium, best seller"


class ChatPayload(BaseModel):
    message: str
    history: List[ChatTurn] = Field(default_factory=list)


@router.post("/api/ai/description")
async def generate_description(payload: DescriptionPayload, request: Request):
    assistant: ShoppingAssistant = request.app.state.assistant
    text = await assistant.generate_description(payload.name, payload.category, payload.keywords)
    return {"description": text}


@router.post("/api/ai/chat")
async def chat(payload: ChatPayload, request: Request):
    assistant: ShoppingAssistant = request.app.state.assistant
    products = await get_catalog(request)
    reply = await assistant.chat(payload.message, products, payload.history)
    return {"reply": reply}


def create_app(
    settings: Optional[Settings] = None,
    market: Optional[Marketplace] = None,
    assistant: Optional[ShoppingAssistant] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.market = market or Marketplace(connect(settings))
        app.state.assistant = assistant or ShoppingAssistant(build_chat_model(settings))
        app.state.sessions = {}
        view = LiveCollection(app.state.market.bus, Signal.PRODUCTS_CHANGED, app.state.market.catalog.list_products)
        view.show()
        app.state.catalog_view = view
        logger.info("IntelliVend API ready (store: %s)", type(app.state.market.db.store).__name__)
        yield
        view.hide()

    app = FastAPI(title="IntelliVend Marketplace API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Settings.from_env().port)
