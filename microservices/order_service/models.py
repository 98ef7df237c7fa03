"""
Order Service Data Models

Pydantic models for orders, order requests and the user projection
returned by user_service during verification.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum


class OrderStatus(str, Enum):
    """Order status enumeration"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Core Order Model

class Order(BaseModel):
    """Core order model"""
    order_id: str
    user_id: str
    product_name: str
    quantity: int
    price: Decimal
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def amount(self) -> Decimal:
        """Line amount (price x quantity)"""
        return self.price * self.quantity


# Request Models

class OrderRequest(BaseModel):
    """Create / full update order request"""
    user_id: str = Field(..., min_length=1, description="User placing the order")
    product_name: str = Field(..., min_length=1, max_length=100, description="Product name")
    quantity: int = Field(..., ge=1, description="Quantity, at least 1")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Unit price")
    status: Optional[OrderStatus] = Field(None, description="Initial / new status")

    @field_validator('user_id', 'product_name')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('must not be blank')
        return v


# Remote projections

class UserSummary(BaseModel):
    """Minimal user projection returned by user_service"""
    user_id: str
    name: str
    email: Optional[str] = None
    status: Optional[str] = None


# Response Models

class ErrorResponse(BaseModel):
    """Uniform error body"""
    detail: str
    error_code: str


class OrderServiceStatus(BaseModel):
    """Order service status response"""
    service: str = "order_service"
    status: str = "operational"
    port: int = 8082
    version: str = "1.0.0"
    database_connected: bool
    user_service_connected: bool = False
    timestamp: Optional[datetime] = None
