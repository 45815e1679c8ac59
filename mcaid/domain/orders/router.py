"""Order router - FastAPI endpoints for grocery orders"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_role
from ...database import get_db
from ...models import Order, User
from ...notifications.dispatcher import NotificationDispatcher
from ...shared.recipients import get_dispatcher
from .schemas import OrderCreate, OrderResponse, OrderStatusUpdate
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db, dispatcher)


def to_response(o: Order) -> OrderResponse:
    return OrderResponse(
        id=o.id,
        motherId=o.mother_id,
        storeId=o.store_id,
        trackingNumber=o.tracking_number,
        status=o.status,
        totalAmount=o.total_amount,
        deliveryAddress=o.delivery_address,
        estimatedDeliveryTime=o.estimated_delivery_time,
        actualDeliveryTime=o.actual_delivery_time,
        created_at=o.created_at,
    )


@router.get("", response_model=list[OrderResponse])
async def get_orders(
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return [to_response(o) for o in service.get_orders(current_user)]


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    data: OrderCreate,
    current_user: User = Depends(require_role("mother")),
    service: OrderService = Depends(get_order_service),
):
    return to_response(service.create_order(data, current_user))


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    current_user: User = Depends(require_role("store")),
    service: OrderService = Depends(get_order_service),
):
    """Update an order's status (stores only); the mother is notified"""
    return to_response(service.update_order_status(order_id, data, current_user))
