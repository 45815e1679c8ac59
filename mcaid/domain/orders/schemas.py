"""Order domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

ORDER_STATUSES = ("pending", "confirmed", "preparing", "out-for-delivery", "delivered", "cancelled")


class OrderCreate(BaseModel):
    storeId: int
    totalAmount: float
    deliveryAddress: Optional[str] = None

    @field_validator("totalAmount")
    @classmethod
    def validate_amount(cls, v):
        if v < 0:
            raise ValueError("Total amount cannot be negative")
        return v


class OrderStatusUpdate(BaseModel):
    status: str
    estimatedDeliveryTime: Optional[datetime] = None


class OrderResponse(BaseModel):
    id: int
    motherId: int
    storeId: int
    trackingNumber: Optional[str] = None
    status: str
    totalAmount: float
    deliveryAddress: Optional[str] = None
    estimatedDeliveryTime: Optional[datetime] = None
    actualDeliveryTime: Optional[datetime] = None
    created_at: Optional[datetime] = None
