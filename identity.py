import logging
from typing import List, Optional

from database import KEYS, Database
from events import ChangeBus, Signal
from schemas import Product, User, UserRole
from seed_data import MOCK_USER

logger = logging.getLogger(__name__)

RESET_CODE = "123456"


class InvalidResetCode(PermissionError):
    pass


class IdentityRepository:
    """Users, the signed-in user, and the mock password reset flow.

    Nothing here authenticates anyone: passwords are never stored or checked.
    """

    def __init__(self, db: Database, bus: ChangeBus):
        self.db = db
        self.bus = bus

    def current_user(self) -> Optional[User]:
        return self.db.read_model(KEYS["CURRENT_USER"], User)

    def clear_current_user(self):
        self.db.remove(KEYS["CURRENT_USER"])

    async def upsert_user(self, user: User) -> User:
        await self.db.delay(400)
        self.db.write_model(KEYS["CURRENT_USER"], user)
        return await self._save(user)

    async def _save(self, user: User) -> User:
        users = await self.list_users()
        for index, u in enumerate(users):
            if u.id == user.id:
                users[index] = user
                break
        else:
            users.append(user)
        self.db.write_models(KEYS["USERS"], users)
        self.bus.publish(Signal.USERS_CHANGED)
        return user

    async def list_users(self) -> List[User]:
        await self.db.delay(300)
        users = self.db.read_models(KEYS["USERS"], User)
        current = self.current_user()
        if current and not any(u.id == current.id for u in users):
            users.append(current)
        return users

    async def get_user(self, user_id: str) -> Optional[User]:
        users = await self.list_users()
        found = next((u for u in users if u.id == user_id), None)
        if found is None and user_id == MOCK_USER.id:
            return MOCK_USER.model_copy(deep=True)
        return found

    async def delete_user(self, user_id: str):
        await self.db.delay(300)
        users = await self.list_users()
        target = next((u for u in users if u.id == user_id), None)
        self.db.write_models(KEYS["USERS"], [u for u in users if u.id != user_id])

        # Orders keep their user_id; only a vendor's catalog goes with them.
        if target is not None and target.role == UserRole.VENDOR:
            products = self.db.read_models(KEYS["PRODUCTS"], Product)
            kept = [p for p in products if p.vendor_id != user_id]
            self.db.write_models(KEYS["PRODUCTS"], kept)
            logger.info("Vendor %s deleted with %d products", user_id, len(products) - len(kept))
            self.bus.publish(Signal.PRODUCTS_CHANGED)
        else:
            logger.info("User %s deleted", user_id)

        self.bus.publish(Signal.USERS_CHANGED)

    async def toggle_verified(self, user_id: str) -> Optional[User]:
        user = await self.get_user(user_id)
        if user is None:
            return None
        user.is_verified = not user.is_verified
        # Admin edits must not replace the signed-in user
        return await self._save(user)

    async def request_reset(self, email: str) -> str:
        await self.db.delay(1200)
        logger.info("Password reset requested for %s", email)
        return RESET_CODE

    async def reset_password(self, token: str, new_password: str):
        await self.db.delay(1200)
        if token != RESET_CODE:
            logger.warning("Rejected password reset with invalid code")
            raise InvalidResetCode("Invalid reset code")
