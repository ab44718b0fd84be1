from database.models import User, UserRole, Order, Service
from typing import Optional
import logging

SELLER_ROLE_VALUES = [UserRole.SELLER, UserRole.BOTH]

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db_session):
        self.db = db_session

    def get_user(self, telegram_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.telegram_id == telegram_id).first()

    def create_user(self, telegram_id: int, name: str, username: Optional[str], role) -> User:
        """Create a user on registration; an existing profile is never overwritten"""
        role = UserRole(role)
        existing = self.get_user(telegram_id)
        if existing:
            logger.warning(f"⚠️ User {telegram_id} already registered as {existing.role.value}, keeping profile")
            return existing

        try:
            user = User(
                telegram_id=telegram_id,
                name=name,
                username=username,
                role=role
            )
            self.db.add(user)
            self.db.commit()
            logger.info(f"✅ Created user: {telegram_id} ({name}, {role.value})")
            return user
        except Exception as e:
            logger.error(f"❌ Error creating user {telegram_id}: {e}")
            self.db.rollback()
            raise

    def get_stats(self) -> dict:
        """Marketplace-wide counters for the admin"""
        return {
            'total_users': self.db.query(User).count(),
            'total_orders': self.db.query(Order).count(),
            'active_sellers': self.db.query(User).filter(User.role.in_(SELLER_ROLE_VALUES)).count(),
            'total_services': self.db.query(Service).count(),
        }
