"""Order service - grocery order placement and status tracking"""

import logging
import secrets
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Order, User
from ...notifications.dispatcher import NotificationDispatcher
from ...notifications.events import EventKind
from ...shared.recipients import notify_user
from .repository import OrderRepository
from .schemas import ORDER_STATUSES, OrderCreate, OrderStatusUpdate

logger = logging.getLogger(__name__)


def generate_tracking_number(order_id: int) -> str:
    """Human-readable tracking number, e.g. MC000042-7F3A2C"""
    return f"MC{order_id:06d}-{secrets.token_hex(3).upper()}"


class OrderService:
    def __init__(self, db: Session, dispatcher: NotificationDispatcher):
        self.db = db
        self.dispatcher = dispatcher
        self.repo = OrderRepository()

    def get_orders(self, user: User) -> list[Order]:
        return self.repo.get_orders_for_user(self.db, user.id)

    def create_order(self, data: OrderCreate, user: User) -> Order:
        store = self.repo.get_store(self.db, data.storeId)
        if not store:
            raise HTTPException(status_code=404, detail="Store not found")

        logger.info(f"🛒 Mother {user.id} placing order with store {store.id}")
        return self.repo.create_order(
            self.db,
            mother_id=user.id,
            store_id=store.id,
            total_amount=data.totalAmount,
            delivery_address=data.deliveryAddress,
            status="pending",
        )

    def update_order_status(self, order_id: int, data: OrderStatusUpdate, user: User) -> Order:
        """
        Move an order to a new status and notify the mother.

        Delivered orders get their actual delivery time stamped. Orders without a
        tracking number get one on their first status change.
        """
        if data.status not in ORDER_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}",
            )

        order = self.repo.get_store_order(self.db, order_id, user.id)
        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        previous_status = order.status
        order.status = data.status
        if data.estimatedDeliveryTime:
            order.estimated_delivery_time = data.estimatedDeliveryTime
        if data.status == "delivered":
            order.actual_delivery_time = datetime.now(timezone.utc)
        if not order.tracking_number:
            order.tracking_number = generate_tracking_number(order.id)

        order = self.repo.save(self.db, order)
        logger.info(f"📦 Order {order.id} status {previous_status} -> {order.status}")

        notify_user(
            self.dispatcher,
            EventKind.ORDER_STATUS_CHANGED,
            order.mother,
            order_id=order.id,
            tracking_number=order.tracking_number,
            status=order.status,
            estimated_delivery=order.estimated_delivery_time,
        )
        return order
