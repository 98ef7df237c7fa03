"""
Order Microservice

Responsibilities:
- Order management and lifecycle
- User verification against user_service before writes
- Order aggregates (counts, totals)
"""

from fastapi import FastAPI, HTTPException, Depends, Query, Path, Request, status
from fastapi.responses import JSONResponse, Response
import uvicorn
from contextlib import asynccontextmanager
from typing import List, Optional
from datetime import datetime, timezone
from decimal import Decimal

from core.config_manager import ConfigManager
from core.logger import setup_service_logger
from core.request_context import RequestContext

from .order_service import OrderService
from .protocols import (
    OrderServiceError,
    OrderNotFoundError,
    OrderValidationError,
    UserNotFoundError,
    UpstreamUnavailableError,
    InvalidStatusTransitionError,
)
from .models import Order, OrderRequest, OrderStatus, ErrorResponse, OrderServiceStatus

# Initialize configuration
config_manager = ConfigManager("order_service")
config = config_manager.get_service_config()

# Setup loggers (use actual service name)
app_logger = setup_service_logger("order_service", config_manager.get_logging_config())
logger = app_logger


class OrderMicroservice:
    """Order microservice core class"""

    def __init__(self):
        self.order_service: Optional[OrderService] = None

    async def initialize(self):
        """Initialize the microservice"""
        from .factory import create_order_service

        try:
            self.order_service = create_order_service(config=config_manager)
            await self.order_service.repo.ensure_schema()
            logger.info("Order microservice initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize order microservice: {e}")
            raise

    async def shutdown(self):
        """Shutdown the microservice"""
        if not self.order_service:
            return
        try:
            await self.order_service.user_client.close()
            await self.order_service.repo.db.close()
            logger.info("Order microservice shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}")


# Global microservice instance
order_microservice = OrderMicroservice()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    await order_microservice.initialize()
    logger.info(f"Order Service started on port {config.service_port}")
    yield
    await order_microservice.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Order Service",
    description="Order management microservice",
    version="1.0.0",
    lifespan=lifespan
)


# Dependency injection
def get_order_service() -> OrderService:
    """Get order service instance"""
    if not order_microservice.order_service:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Order service not initialized"
        )
    return order_microservice.order_service


def get_request_context(request: Request) -> RequestContext:
    """Build the per-request context from inbound headers"""
    return RequestContext.from_headers(request.headers, source="order_service")


# ==================== Exception Handlers ====================

def _error(status_code: int, exc: Exception, error_code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), error_code=error_code).model_dump(),
    )


@app.exception_handler(OrderValidationError)
async def validation_error_handler(request: Request, exc: OrderValidationError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, exc, "VALIDATION_ERROR")


@app.exception_handler(OrderNotFoundError)
async def not_found_handler(request: Request, exc: OrderNotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, exc, "NOT_FOUND")


@app.exception_handler(UserNotFoundError)
async def user_not_found_handler(request: Request, exc: UserNotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, exc, "USER_NOT_FOUND")


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, exc, "UPSTREAM_UNAVAILABLE")


@app.exception_handler(InvalidStatusTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidStatusTransitionError):
    return _error(status.HTTP_409_CONFLICT, exc, "INVALID_STATUS_TRANSITION")


@app.exception_handler(OrderServiceError)
async def service_error_handler(request: Request, exc: OrderServiceError):
    logger.error(f"Unhandled order service error on {request.url.path}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "INTERNAL_ERROR")


# ==================== Health ====================

@app.get("/health")
async def health_check():
    """Service health check"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "port": config.service_port,
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/health/detailed", response_model=OrderServiceStatus)
async def detailed_health_check(
    order_service: OrderService = Depends(get_order_service)
):
    """Detailed health check with database and user_service connectivity"""
    return OrderServiceStatus(
        port=config.service_port,
        database_connected=await order_service.health_check(),
        user_service_connected=await order_service.user_service_health_check(),
        timestamp=datetime.now(timezone.utc)
    )


# ==================== Aggregates ====================
# Registered before /{order_id} routes for readability; paths do not overlap.

@app.get("/api/v1/orders/count/status/{order_status}", response_model=int)
async def count_orders_by_status(
    order_status: OrderStatus = Path(..., description="Order status"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Count orders in a status"""
    logger.info(f"{ctx} GET /api/v1/orders/count/status/{order_status.value}")
    return await order_service.count_by_status(order_status, ctx=ctx)


@app.get("/api/v1/orders/count/user/{user_id}", response_model=int)
async def count_orders_by_user(
    user_id: str = Path(..., description="User ID"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Count orders of a user"""
    logger.info(f"{ctx} GET /api/v1/orders/count/user/{user_id}")
    return await order_service.count_by_user(user_id, ctx=ctx)


@app.get("/api/v1/orders/total/user/{user_id}", response_model=Decimal)
async def total_amount_by_user(
    user_id: str = Path(..., description="User ID"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """
    Sum of price x quantity over a user's non-cancelled orders

    The body is a JSON string such as "20.00", not a number, so the
    decimal value is exact. A user with no orders gets "0".
    """
    logger.info(f"{ctx} GET /api/v1/orders/total/user/{user_id}")
    return await order_service.total_amount_by_user(user_id, ctx=ctx)


# ==================== Orders ====================

@app.get("/api/v1/orders", response_model=List[Order])
async def list_orders(
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """List all orders"""
    logger.info(f"{ctx} GET /api/v1/orders")
    return await order_service.list_orders(ctx=ctx)


@app.get("/api/v1/orders/user/{user_id}", response_model=List[Order])
async def list_user_orders(
    user_id: str = Path(..., description="User ID"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="Filter by status"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """List orders of a user (user is verified against user_service first)"""
    logger.info(f"{ctx} GET /api/v1/orders/user/{user_id}")
    return await order_service.get_orders_by_user(user_id, status=order_status, ctx=ctx)


@app.get("/api/v1/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str = Path(..., description="Order ID"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Get order details"""
    logger.info(f"{ctx} GET /api/v1/orders/{order_id}")
    return await order_service.get_order(order_id, ctx=ctx)


@app.post("/api/v1/orders", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderRequest,
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Create a new order"""
    logger.info(f"{ctx} POST /api/v1/orders: user {request.user_id}, product {request.product_name}")
    return await order_service.create_order(request, ctx=ctx)


@app.put("/api/v1/orders/{order_id}", response_model=Order)
async def update_order(
    request: OrderRequest,
    order_id: str = Path(..., description="Order ID"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Full update of an order"""
    logger.info(f"{ctx} PUT /api/v1/orders/{order_id}")
    return await order_service.update_order(order_id, request, ctx=ctx)


@app.patch("/api/v1/orders/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str = Path(..., description="Order ID"),
    order_status: OrderStatus = Query(..., alias="status", description="Target status"),
    force: bool = Query(False, description="Skip transition checks (operator override)"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Change order status"""
    logger.info(f"{ctx} PATCH /api/v1/orders/{order_id}/status: {order_status.value} (force={force})")
    return await order_service.update_order_status(order_id, order_status, force=force, ctx=ctx)


@app.delete("/api/v1/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: str = Path(..., description="Order ID"),
    ctx: RequestContext = Depends(get_request_context),
    order_service: OrderService = Depends(get_order_service)
):
    """Cancel an order (soft delete)"""
    logger.info(f"{ctx} DELETE /api/v1/orders/{order_id}")
    await order_service.delete_order(order_id, ctx=ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


if __name__ == "__main__":
    uvicorn.run(
        "microservices.order_service.main:app",
        host=config.service_host,
        port=config.service_port,
        reload=config.debug,
        log_level="info"
    )
