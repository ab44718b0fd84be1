from database.models import Order, OrderStatus, OrderFile, Review, Service, FileKind
from services.exceptions import AccessDeniedError, DuplicateReviewError, NotFoundError
from services.order_lifecycle import ensure_transition
from utils.helpers import generate_reference, total_with_commission
from sqlalchemy.exc import IntegrityError
from typing import Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)


class OrderService:
    def __init__(self, db_session):
        self.db = db_session

    def create_order(self, buyer_id: int, service: Service, requirements: str = '',
                     files: Iterable = ()) -> Order:
        """
        Create a service request together with its uploaded files in one commit.

        ``files`` are objects exposing ``file_id``, ``kind`` and ``file_name``.
        """
        if service.seller_id == buyer_id:
            raise AccessDeniedError("Sellers cannot request their own service")

        try:
            order = Order(
                buyer_id=buyer_id,
                seller_id=service.seller_id,
                service_id=service.id,
                transaction_id=generate_reference("REQ", service.id),
                net_amount=service.net_price,
                total_amount=total_with_commission(service.net_price),
                buyer_requirements=requirements,
                status=OrderStatus.REQUEST_SENT
            )
            self.db.add(order)
            self.db.flush()

            for file in files:
                self.db.add(self._order_file(order.id, file.file_id, file.kind, file.file_name, buyer_id))

            self.db.commit()
            logger.info(f"✅ Created order {order.id} ({order.transaction_id}) for buyer {buyer_id}")
            return order
        except Exception as e:
            logger.error(f"❌ Error creating order: {e}")
            self.db.rollback()
            raise

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_order_for(self, order_id: int, telegram_id: int, as_role: str) -> Order:
        """Load an order and check the caller is its buyer or seller"""
        order = self.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        owner = order.buyer_id if as_role == 'buyer' else order.seller_id
        if owner != telegram_id:
            raise AccessDeniedError(f"User {telegram_id} is not the {as_role} of order {order_id}")
        return order

    def get_user_orders(self, buyer_id: int) -> List[Order]:
        return self.db.query(Order).filter(
            Order.buyer_id == buyer_id
        ).order_by(Order.created_at.desc(), Order.id.desc()).all()

    def update_order_status(self, order_id: int, status: OrderStatus) -> Order:
        order = self.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")

        try:
            ensure_transition(order, status)
            self.db.commit()
            return order
        except Exception:
            self.db.rollback()
            raise

    def update_order_quote(self, order_id: int, custom_price: float, seller_quote: str) -> Order:
        order = self.get_order(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")

        try:
            ensure_transition(order, OrderStatus.QUOTE_SENT)
            order.custom_price = custom_price
            order.seller_quote = seller_quote
            self.db.commit()
            logger.info(f"💰 Quote for order {order_id}: {custom_price:.2f}")
            return order
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def _order_file(order_id, file_id, file_type, file_name, uploaded_by) -> OrderFile:
        return OrderFile(
            order_id=order_id,
            file_id=file_id,
            file_type=FileKind(file_type),
            file_name=file_name,
            uploaded_by=uploaded_by
        )

    def save_order_file(self, order_id: int, file_id: str, file_type, file_name: str,
                        uploaded_by: int) -> OrderFile:
        try:
            order_file = self._order_file(order_id, file_id, file_type, file_name, uploaded_by)
            self.db.add(order_file)
            self.db.commit()
            return order_file
        except Exception as e:
            logger.error(f"❌ Error saving file for order {order_id}: {e}")
            self.db.rollback()
            raise

    def get_order_files(self, order_id: int) -> List[OrderFile]:
        return self.db.query(OrderFile).filter(
            OrderFile.order_id == order_id
        ).order_by(OrderFile.created_at.asc(), OrderFile.id.asc()).all()

    def create_review(self, order_id: int, buyer_id: int, rating: int) -> Review:
        """
        Rate an accepted order and complete it in one transaction.

        Raises:
            DuplicateReviewError: the order already has a review
            InvalidStatusTransition: the order is not waiting for a rating
        """
        order = self.get_order_for(order_id, buyer_id, 'buyer')

        if self.db.query(Review).filter(Review.order_id == order_id).first():
            raise DuplicateReviewError(order_id)

        try:
            ensure_transition(order, OrderStatus.COMPLETED)
            review = Review(
                order_id=order_id,
                buyer_id=buyer_id,
                seller_id=order.seller_id,
                rating=rating
            )
            self.db.add(review)
            self.db.commit()
            logger.info(f"⭐ Order {order_id} rated {rating}/5 and completed")
            return review
        except IntegrityError:
            self.db.rollback()
            raise DuplicateReviewError(order_id)
        except Exception:
            self.db.rollback()
            raise

    def cancel_order(self, order_id: int, buyer_id: int) -> Order:
        order = self.get_order_for(order_id, buyer_id, 'buyer')
        try:
            ensure_transition(order, OrderStatus.CANCELLED)
            self.db.commit()
            return order
        except Exception:
            self.db.rollback()
            raise
