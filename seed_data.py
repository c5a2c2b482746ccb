"""Built-in catalog and demo accounts written on first start."""

from typing import List

from schemas import Address, Product, User, UserRole


def _img(photo: str) -> str:
    return f"https://images.unsplash.com/{photo}?auto=format&fit=crop&w=800&q=80"


MOCK_USER = User(
    id="v1",
    name="Alex Developer",
    email="alex.developer@example.com",
    role=UserRole.VENDOR,
    avatar_url="https://api.dicebear.com/7.x/avataaars/svg?seed=Alex",
    age=28,
    gender="Male",
    address=Address(street="123 Galaxy Way", city="Tech District", state="CA", zip="94105"),
)

CATEGORIES = [
    {"name": "Electronics", "image": _img("photo-1511707171634-5f897ff02aa9"),
     "sub_categories": ["Audio", "Computers", "Cameras", "Accessories", "Gaming"]},
    {"name": "Fashion", "image": _img("photo-1483985988355-763728e1935b"),
     "sub_categories": ["Men", "Women", "Shoes", "Outerwear", "Accessories"]},
    {"name": "Furniture", "image": _img("photo-1556228453-efd6c1ff04f6"),
     "sub_categories": ["Chairs", "Tables", "Sofas", "Lighting", "Decor"]},
    {"name": "Home & Living", "image": _img("photo-1513694203232-719a280e022f"),
     "sub_categories": ["Kitchen", "Bedding", "Storage", "Plants", "Dining"]},
    {"name": "Fitness", "image": _img("photo-1534438327276-14e5300c3a48"),
     "sub_categories": ["Equipment", "Apparel", "Supplements", "Yoga", "Tracking"]},
    {"name": "Books", "image": _img("photo-1524995997946-a1c2e315a42f"),
     "sub_categories": ["Technology", "Fiction", "Self-Help", "Design", "Science"]},
]


def initial_products() -> List[Product]:
    # Fresh instances on every call; callers mutate them.
    return [
        Product(
            id="p1",
            name="Ergonomic AI Chair",
            description="A futuristic chair that adapts to your posture in real-time using built-in sensors. Designed for 24/7 comfort with breathable mesh.",
            price=599.99,
            original_price=799.99,
            category="Furniture",
            sub_category="Chairs",
            image_url=_img("photo-1592078615290-033ee584e267"),
            images=[
                _img("photo-1592078615290-033ee584e267"),
                _img("photo-1505843490538-5133c6c7d0e1"),
                _img("photo-1580480055273-228ff5388ef8"),
            ],
            vendor_id="v1",
            vendor_name="FutureFurnish",
            rating=4.8,
            reviews_count=124,
        ),
        Product(
            id="p2",
            name="Pro Noise Cancelling Earbuds",
            description="Experience pure silence with our top-tier active noise cancellation technology and transparency mode. 30-hour battery life.",
            price=199.50,
            original_price=249.99,
            category="Electronics",
            sub_category="Audio",
            image_url=_img("photo-1590658268037-6bf12165a8df"),
            images=[
                _img("photo-1590658268037-6bf12165a8df"),
                _img("photo-1572569028738-411a29639581"),
                _img("photo-1606220588913-b3aacb4d2f46"),
            ],
            vendor_id="v2",
            vendor_name="AudioTech",
            rating=4.5,
            reviews_count=89,
        ),
        Product(
            id="p3",
            name="Ceramic Matcha Set",
            description="Premium handcrafted ceramic set with organic tea leaves harvested from high mountains. Includes whisk, bowl, and spoon.",
            price=34.99,
            category="Home & Living",
            sub_category="Kitchen",
            image_url=_img("photo-1563822249548-9a72b6353cd1"),
            images=[
                _img("photo-1563822249548-9a72b6353cd1"),
                _img("photo-1582794543139-8ac92a900275"),
            ],
            vendor_id="v3",
            vendor_name="NatureGood",
            rating=4.9,
            reviews_count=210,
        ),
        Product(
            id="p4",
            name="Mechanical Keyboard 60%",
            description="Clicky blue switches with customizable RGB lighting for the ultimate tactile typing experience. Compact design for gamers.",
            price=89.99,
            original_price=119.99,
            category="Electronics",
            sub_category="Computers",
            image_url=_img("photo-1595225476474-87563907a212"),
            images=[
                _img("photo-1595225476474-87563907a212"),
                _img("photo-1587829741301-dc798b91a603"),
                _img("photo-1618384887929-16ec33fab9ef"),
            ],
            vendor_id="v1",
            vendor_name="FutureFurnish",
            rating=4.6,
            reviews_count=55,
        ),
        Product(
            id="p5",
            name="Smart Hydration Bottle",
            description="Tracks your hydration levels via app and glows gently when you need to drink water. Stainless steel construction.",
            price=45.00,
            category="Fitness",
            sub_category="Equipment",
            image_url=_img("photo-1543163521-1bf539c55dd2"),
            images=[
                _img("photo-1543163521-1bf539c55dd2"),
                _img("photo-1602143407151-01114192008b"),
            ],
            vendor_id="v2",
            vendor_name="AudioTech",
            rating=4.2,
            reviews_count=30,
        ),
        Product(
            id="p6",
            name="Minimalist Desk Lamp",
            description="Adjustable color temperature LED lamp with wireless charging base for your devices. Sleek aluminum finish.",
            price=79.00,
            original_price=99.00,
            category="Furniture",
            sub_category="Lighting",
            image_url=_img("photo-1565814329452-e1efa11c5b89"),
            images=[
                _img("photo-1565814329452-e1efa11c5b89"),
                _img("photo-1534073828943-f801091a7d58"),
                _img("photo-1507473888900-52e1adad5452"),
            ],
            vendor_id="v1",
            vendor_name="FutureFurnish",
            rating=4.7,
            reviews_count=42,
        ),
        Product(
            id="p7",
            name="Vintage Denim Jacket",
            description="Classic oversized denim jacket with distressed details. 100% cotton, perfect for layering in any season.",
            price=65.00,
            category="Fashion",
            sub_category="Outerwear",
            image_url=_img("photo-1551537482-f2075a1d41f2"),
            images=[
                _img("photo-1551537482-f2075a1d41f2"),
                _img("photo-1576871337632-b9aef4c17ab9"),
                _img("photo-1523205565295-f8e91625443b"),
            ],
            vendor_id="v4",
            vendor_name="UrbanStyle",
            rating=4.4,
            reviews_count=67,
        ),
        Product(
            id="p8",
            name="Running Shoes - Velocity X",
            description="Ultra-lightweight running shoes with foam cushioning technology. Breathable upper mesh for maximum comfort.",
            price=129.99,
            original_price=180.00,
            category="Fashion",
            sub_category="Shoes",
            image_url=_img("photo-1542291026-7eec264c27ff"),
            images=[
                _img("photo-1542291026-7eec264c27ff"),
                _img("photo-1608231387042-66d1773070a5"),
                _img("photo-1560769629-975e13f0c470"),
            ],
            vendor_id="v4",
            vendor_name="UrbanStyle",
            rating=4.8,
            reviews_count=312,
        ),
        Product(
            id="p9",
            name="The Art of Code",
            description="A comprehensive guide to software craftsmanship. Hardcover edition with illustrations.",
            price=29.99,
            category="Books",
            sub_category="Technology",
            image_url=_img("photo-1544947950-fa07a98d237f"),
            images=[
                _img("photo-1544947950-fa07a98d237f"),
                _img("photo-1512820790803-83ca734da794"),
            ],
            vendor_id="v5",
            vendor_name="BookHaven",
            rating=4.9,
            reviews_count=500,
        ),
    ]
