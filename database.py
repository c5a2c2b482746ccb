"""
Storage layer

A key-value store holds each collection as one JSON value under a fixed key.
Every write replaces the whole collection; there are no partial updates and no
transactions, so the later of two overlapping writes wins.

Two stores are provided:
- MemoryStore: a dict, used by tests and when no database is configured
- MongoStore: one document per key in a MongoDB collection
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from pymongo import MongoClient

from config import Settings
from schemas import Product
from seed_data import initial_products

logger = logging.getLogger(__name__)

KEYS = {
    "USERS": "intellivend_users",
    "PRODUCTS": "intellivend_products",
    "ORDERS": "intellivend_orders",
    "CURRENT_USER": "intellivend_user",
}

M = TypeVar("M", bound=BaseModel)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class MongoStore:
    """Keeps each key as ``{"_id": key, "value": <json string>}``."""

    def __init__(self, database, collection: str = "kv"):
        self._db = database
        self._col = database[collection]

    @classmethod
    def from_url(cls, url: str, name: str) -> "MongoStore":
        client = MongoClient(url)
        return cls(client[name])

    @property
    def name(self) -> str:
        return getattr(self._db, "name", "")

    def get(self, key: str) -> Optional[str]:
        doc = self._col.find_one({"_id": key})
        return doc["value"] if doc else None

    def set(self, key: str, value: str) -> None:
        self._col.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)

    def delete(self, key: str) -> None:
        self._col.delete_one({"_id": key})

    def keys(self) -> List[str]:
        return [d["_id"] for d in self._col.find({}, {"_id": 1})]


def dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


class Database:
    """JSON adapter over a KeyValueStore with simulated network latency."""

    def __init__(
        self,
        store: KeyValueStore,
        latency_scale: float = 1.0,
        seed: Callable[[], List[Product]] = initial_products,
    ):
        self.store = store
        self.latency_scale = latency_scale
        self._seed = seed
        self._init()

    def _init(self):
        seed = [dump(p) for p in self._seed()]
        stored = self.store.get(KEYS["PRODUCTS"])
        if stored is None:
            self.write(KEYS["PRODUCTS"], seed)
        else:
            try:
                products = json.loads(stored)
                if not isinstance(products, list):
                    raise ValueError("products blob is not a list")
                fresh = {p["id"]: p for p in seed}
                changed = False
                # Image fields always come from the seed so asset fixes reach existing stores
                for p in products:
                    match = fresh.get(p.get("id"))
                    if match:
                        p["imageUrl"] = match["imageUrl"]
                        p["images"] = match["images"]
                        changed = True
                if changed:
                    self.write(KEYS["PRODUCTS"], products)
            except (ValueError, AttributeError) as e:
                logger.warning("Stored products unreadable (%s); resetting to seed catalog", e)
                self.write(KEYS["PRODUCTS"], seed)

        if self.store.get(KEYS["ORDERS"]) is None:
            self.write(KEYS["ORDERS"], [])

    async def delay(self, ms: int):
        if self.latency_scale > 0:
            await asyncio.sleep(ms * self.latency_scale / 1000)

    def read(self, key: str) -> Any:
        data = self.store.get(key)
        return json.loads(data) if data else None

    def write(self, key: str, value: Any):
        self.store.set(key, json.dumps(value))

    def remove(self, key: str):
        self.store.delete(key)

    def read_models(self, key: str, model: Type[M]) -> List[M]:
        raw = self.read(key)
        if not raw:
            return []
        return TypeAdapter(List[model]).validate_python(raw)

    def write_models(self, key: str, models: List[BaseModel]):
        self.write(key, [dump(m) for m in models])

    def read_model(self, key: str, model: Type[M]) -> Optional[M]:
        raw = self.read(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logger.warning("Stored value under %s is invalid: %s", key, e)
            return None

    def write_model(self, key: str, model: BaseModel):
        self.write(key, dump(model))


def connect(settings: Settings) -> Database:
    if settings.use_mongo:
        logger.info("Using MongoDB store %s", settings.database_name)
        store = MongoStore.from_url(settings.database_url, settings.database_name)
    else:
        logger.info("DATABASE_URL/DATABASE_NAME not set; using in-memory store")
        store = MemoryStore()
    return Database(store, latency_scale=settings.latency_scale)
