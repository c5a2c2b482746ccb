"""
Data Schemas for the IntelliVend Marketplace

Each Pydantic model is one record type. Collections are stored as JSON arrays
under a fixed key (see database.KEYS); field names are persisted in camelCase
(imageUrl, vendorId, reviewsCount, ...) so stored blobs keep the layout the
browser client reads.

Collections:
- users     (list of User)
- products  (list of Product, reviews embedded)
- orders    (list of Order, items are frozen CartItem snapshots)
- user      (single User, the one currently signed in)
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserRole(str, Enum):
    BUYER = "BUYER"
    VENDOR = "VENDOR"
    ADMIN = "ADMIN"


class Address(Record):
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


class User(Record):
    id: str = Field(..., description="User id")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    role: UserRole = Field(UserRole.BUYER, description="Exactly one role per user")
    avatar_url: str = Field("", description="Avatar image URL")
    age: Optional[int] = Field(None, ge=0, le=120, description="Age in years")
    gender: Optional[str] = None
    address: Optional[Address] = None
    is_verified: bool = Field(False, description="Set by an admin from the console")


class Review(Record):
    id: str
    user_id: str = Field(..., description="Author id")
    user_name: str = Field(..., description="Author name at write time")
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    date: str = Field(..., description="Creation date")


class Product(Record):
    id: str
    name: str = Field(..., description="Product title")
    description: str = ""
    price: float = Field(..., ge=0, description="Price in USD")
    original_price: Optional[float] = Field(None, ge=0, description="Price before discount")
    category: str = Field(..., description="Product category")
    sub_category: Optional[str] = None
    image_url: str = Field("", description="Main display image")
    images: List[str] = Field(default_factory=list, description="All product images")
    vendor_id: str = Field(..., description="Owning vendor user id")
    vendor_name: str = Field(..., description="Vendor name at write time")
    rating: float = Field(0, ge=0, le=5, description="Average rating")
    reviews_count: int = Field(0, ge=0)
    reviews: List[Review] = Field(default_factory=list, description="Newest first")


class CartItem(Product):
    quantity: int = Field(1, ge=1)


OrderStatus = Literal["processing", "shipped", "delivered"]


class Order(Record):
    id: str = Field(..., min_length=1, description="Order id, ORD-<ms> from checkout")
    user_id: str = Field(..., description="Buyer who placed the order")
    items: List[CartItem] = Field(..., description="Snapshot of the cart at purchase time")
    total: float = Field(..., ge=0, description="Subtotal + tax + shipping")
    date: str
    status: OrderStatus = "processing"
    shipping_address: Address = Field(default_factory=Address)
    payment_method: str = ""


class SalesStat(Record):
    name: str
    sales: int = 0
    revenue: float = 0.0


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str
