from sqlalchemy import (
    Column, Integer, BigInteger, String, Float, Boolean, DateTime, Text,
    ForeignKey, Enum, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

# Import Base from db.py to ensure all models use the same Base
from .db import Base


# ========== ENUMS ==========
class UserRole(str, enum.Enum):
    BUYER = "Buyer"
    SELLER = "Seller"
    BOTH = "Both"

    @property
    def can_sell(self):
        return self in (UserRole.SELLER, UserRole.BOTH)

    @property
    def can_buy(self):
        return self in (UserRole.BUYER, UserRole.BOTH)


class OrderStatus(str, enum.Enum):
    REQUEST_SENT = "request_sent"
    QUOTE_SENT = "quote_sent"
    QUOTE_ACCEPTED = "quote_accepted"
    QUOTE_DECLINED = "quote_declined"
    DECLINED = "declined"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FileKind(str, enum.Enum):
    DOCUMENT = "document"
    PHOTO = "photo"
    VIDEO = "video"


# ========== MODELS ==========
class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    telegram_id = Column(BigInteger, unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    username = Column(String(100))
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    services = relationship("Service", back_populates="seller", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(telegram_id={self.telegram_id}, role={self.role})>"


class Service(Base):
    __tablename__ = 'services'

    id = Column(Integer, primary_key=True)
    seller_id = Column(BigInteger, ForeignKey('users.telegram_id'), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    net_price = Column(Float, nullable=False)
    delivery_time = Column(String(100), nullable=False)
    payment_method = Column(Text, nullable=False)
    is_promoted = Column(Boolean, default=False, nullable=False)
    promotion_expires = Column(DateTime)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    seller = relationship("User", back_populates="services")
    orders = relationship("Order", back_populates="service")

    def is_currently_promoted(self, now=None):
        now = now or datetime.now()
        return bool(self.is_promoted and self.promotion_expires and self.promotion_expires > now)


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True)
    buyer_id = Column(BigInteger, ForeignKey('users.telegram_id'), nullable=False, index=True)
    seller_id = Column(BigInteger, ForeignKey('users.telegram_id'), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey('services.id'), nullable=False)
    transaction_id = Column(String(100), unique=True, nullable=False)
    net_amount = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)
    custom_price = Column(Float)
    buyer_requirements = Column(Text, default='')
    seller_quote = Column(Text)
    status = Column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.REQUEST_SENT,
        nullable=False
    )
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    service = relationship("Service", back_populates="orders")
    files = relationship("OrderFile", back_populates="order", order_by="OrderFile.id", cascade="all, delete-orphan")
    review = relationship("Review", back_populates="order", uselist=False)

    @property
    def payable_price(self):
        """Seller-side price the buyer is paying for: the quote once one exists"""
        return self.custom_price if self.custom_price is not None else self.net_amount


class OrderFile(Base):
    __tablename__ = 'order_files'

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id'), nullable=False, index=True)
    file_id = Column(String(300), nullable=False)
    file_type = Column(Enum(FileKind, values_callable=lambda e: [m.value for m in e]), nullable=False)
    file_name = Column(String(300))
    uploaded_by = Column(BigInteger, ForeignKey('users.telegram_id'))
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    order = relationship("Order", back_populates="files")


class Review(Base):
    __tablename__ = 'reviews'
    __table_args__ = (
        UniqueConstraint('order_id', name='uq_reviews_order_id'),
        CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
    )

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id'), nullable=False)
    buyer_id = Column(BigInteger, ForeignKey('users.telegram_id'), nullable=False)
    seller_id = Column(BigInteger, ForeignKey('users.telegram_id'), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.now)

    # Relationships
    order = relationship("Order", back_populates="review")
