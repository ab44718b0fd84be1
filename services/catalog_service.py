"""
Service catalog - listings, search, promotion and seller statistics.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
import logging

from sqlalchemy import and_, case, func, or_

from config import PROMOTION_DAYS, SEARCH_LIMIT, TOP_SELLERS_LIMIT
from database.models import Order, OrderStatus, Review, Service, User, UserRole
from services.exceptions import AccessDeniedError, NotFoundError
from services.order_lifecycle import OPEN_STATUSES

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def _contains_pattern(keyword: str) -> str:
    # % and _ in user input are literal characters, not wildcards
    for char in (LIKE_ESCAPE, "%", "_"):
        keyword = keyword.replace(char, LIKE_ESCAPE + char)
    return f"%{keyword}%"


@dataclass
class ServiceListing:
    service: Service
    seller_name: str
    seller_username: Optional[str]
    avg_rating: float
    review_count: int
    is_currently_promoted: bool


@dataclass
class SellerStats:
    total_orders: int = 0
    completed_orders: int = 0
    pending_orders: int = 0
    total_earned: float = 0.0
    avg_rating: float = 0.0
    total_reviews: int = 0
    active_services: int = 0
    monthly_orders: int = 0


@dataclass
class TopSeller:
    telegram_id: int
    name: str
    avg_rating: float
    total_orders: int
    total_earned: float
    active_services: int
    is_promoted: bool


class CatalogService:
    def __init__(self, db_session):
        self.db = db_session

    # ========== SERVICES ==========
    def create_service(self, seller_id: int, title: str, description: str, net_price: float,
                       delivery_time: str, payment_method: str) -> Service:
        seller = self.db.query(User).filter(User.telegram_id == seller_id).first()
        if not seller:
            raise NotFoundError(f"Seller {seller_id} not registered")
        if not seller.role.can_sell:
            raise AccessDeniedError(f"User {seller_id} has role {seller.role.value}")

        try:
            service = Service(
                seller_id=seller_id,
                title=title,
                description=description,
                net_price=net_price,
                delivery_time=delivery_time,
                payment_method=payment_method
            )
            self.db.add(service)
            self.db.commit()
            logger.info(f"✅ Created service {service.id} for seller {seller_id}")
            return service
        except Exception as e:
            logger.error(f"❌ Error creating service: {e}")
            self.db.rollback()
            raise

    def get_service(self, service_id: int) -> Optional[Service]:
        return self.db.query(Service).filter(Service.id == service_id).first()

    def get_user_services(self, seller_id: int) -> List[Service]:
        return self.db.query(Service).filter(
            Service.seller_id == seller_id
        ).order_by(Service.created_at.desc(), Service.id.desc()).all()

    def _listing_query(self, now):
        ratings = self.db.query(
            Review.seller_id.label('seller_id'),
            func.avg(Review.rating).label('avg_rating'),
            func.count(Review.id).label('review_count')
        ).group_by(Review.seller_id).subquery()

        promoted = case(
            (and_(Service.is_promoted.is_(True), Service.promotion_expires > now), 1),
            else_=0
        )
        avg_rating = func.coalesce(ratings.c.avg_rating, 0)

        query = self.db.query(
            Service,
            User.name,
            User.username,
            avg_rating,
            func.coalesce(ratings.c.review_count, 0),
            promoted
        ).join(
            User, User.telegram_id == Service.seller_id
        ).outerjoin(
            ratings, ratings.c.seller_id == Service.seller_id
        )
        ordering = (promoted.desc(), avg_rating.desc(), Service.created_at.desc(), Service.id.desc())
        return query, ordering

    @staticmethod
    def _to_listings(rows) -> List[ServiceListing]:
        return [
            ServiceListing(
                service=service,
                seller_name=seller_name,
                seller_username=seller_username,
                avg_rating=float(avg or 0),
                review_count=int(count or 0),
                is_currently_promoted=bool(promoted)
            )
            for service, seller_name, seller_username, avg, count, promoted in rows
        ]

    def search_services(self, keyword: str, limit: int = SEARCH_LIMIT) -> List[ServiceListing]:
        """Case-insensitive match on title or description, promoted and best-rated first"""
        keyword = keyword.strip()
        if not keyword:
            return []

        query, ordering = self._listing_query(datetime.now())
        pattern = _contains_pattern(keyword)
        rows = query.filter(
            or_(Service.title.ilike(pattern, escape=LIKE_ESCAPE),
                Service.description.ilike(pattern, escape=LIKE_ESCAPE))
        ).order_by(*ordering).limit(limit).all()
        return self._to_listings(rows)

    def browse_services(self, limit: int = SEARCH_LIMIT) -> List[ServiceListing]:
        query, ordering = self._listing_query(datetime.now())
        return self._to_listings(query.order_by(*ordering).limit(limit).all())

    # ========== PROMOTION ==========
    def promote_service(self, service_id: int, expires_at: Optional[datetime] = None) -> Service:
        service = self.get_service(service_id)
        if not service:
            raise NotFoundError(f"Service {service_id} not found")

        try:
            service.is_promoted = True
            service.promotion_expires = expires_at or datetime.now() + timedelta(days=PROMOTION_DAYS)
            self.db.commit()
            logger.info(f"🌟 Service {service_id} promoted until {service.promotion_expires}")
            return service
        except Exception as e:
            logger.error(f"❌ Error promoting service {service_id}: {e}")
            self.db.rollback()
            raise

    def expire_promotions(self, now: Optional[datetime] = None) -> int:
        """Clear the promoted flag on every service whose promotion has run out"""
        now = now or datetime.now()
        try:
            count = self.db.query(Service).filter(
                Service.is_promoted.is_(True),
                or_(Service.promotion_expires.is_(None), Service.promotion_expires <= now)
            ).update({Service.is_promoted: False}, synchronize_session=False)
            self.db.commit()
            if count:
                logger.info(f"⏰ Expired {count} promotion(s)")
            return count
        except Exception as e:
            logger.error(f"❌ Error expiring promotions: {e}")
            self.db.rollback()
            raise

    # ========== STATISTICS ==========
    def get_seller_stats(self, seller_id: int, now: Optional[datetime] = None) -> SellerStats:
        now = now or datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        orders = self.db.query(Order).filter(Order.seller_id == seller_id).all()
        completed = [o for o in orders if o.status == OrderStatus.COMPLETED]
        avg_rating, total_reviews = self.db.query(
            func.coalesce(func.avg(Review.rating), 0),
            func.count(Review.id)
        ).filter(Review.seller_id == seller_id).one()

        return SellerStats(
            total_orders=len(orders),
            completed_orders=len(completed),
            pending_orders=len([o for o in orders if o.status in OPEN_STATUSES]),
            total_earned=sum(o.payable_price or 0 for o in completed),
            avg_rating=float(avg_rating or 0),
            total_reviews=int(total_reviews or 0),
            active_services=self.db.query(Service).filter(Service.seller_id == seller_id).count(),
            monthly_orders=len([o for o in orders if o.created_at and o.created_at >= month_start])
        )

    def get_top_sellers(self, limit: int = TOP_SELLERS_LIMIT) -> List[TopSeller]:
        """Sellers with at least one service, promoted first, then rating, orders, earnings"""
        now = datetime.now()
        sellers = self.db.query(User).filter(
            User.role.in_([UserRole.SELLER, UserRole.BOTH])
        ).all()

        leaderboard = []
        for seller in sellers:
            services = self.get_user_services(seller.telegram_id)
            if not services:
                continue
            stats = self.get_seller_stats(seller.telegram_id, now)
            leaderboard.append(TopSeller(
                telegram_id=seller.telegram_id,
                name=seller.name,
                avg_rating=stats.avg_rating,
                total_orders=stats.completed_orders,
                total_earned=stats.total_earned,
                active_services=len(services),
                is_promoted=any(s.is_currently_promoted(now) for s in services)
            ))

        leaderboard.sort(
            key=lambda s: (s.is_promoted, s.avg_rating, s.total_orders, s.total_earned),
            reverse=True
        )
        return leaderboard[:limit]
