"""Order repository - Database operations for grocery orders"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Order, User


class OrderRepository:
    """Repository for order database operations"""

    @staticmethod
    def get_store(db: Session, store_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == store_id, User.role == "store").first()

    @staticmethod
    def get_orders_for_user(db: Session, user_id: int) -> list[Order]:
        """Orders placed by a mother or received by a store"""
        return (
            db.query(Order)
            .filter(or_(Order.mother_id == user_id, Order.store_id == user_id))
            .order_by(Order.created_at.desc())
            .all()
        )

    @staticmethod
    def get_store_order(db: Session, order_id: int, store_id: int) -> Optional[Order]:
        """Get an order only if it belongs to the given store"""
        return db.query(Order).filter(Order.id == order_id, Order.store_id == store_id).first()

    @staticmethod
    def create_order(db: Session, **order_data) -> Order:
        order = Order(**order_data)
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def save(db: Session, order: Order) -> Order:
        db.commit()
        db.refresh(order)
        return order
